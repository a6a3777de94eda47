import logging
import numbers

import numpy as np
from poly_ops import PO
from kem_constants import NOISE_BOUND, SEED_BYTES
from kem_errors import EntropySourceError

logger = logging.getLogger("LatticeKEM")


class Sampler:
    """
    Draws ring elements from a single seedable generator.

    The generator state is private to the instance and every draw advances it,
    so one Sampler must not be shared between threads without a lock.
    With a fixed seed the sequence of draws, and therefore every key and
    ciphertext built from them, is reproducible.
    """
    def __init__(self, seed=None, ops=PO, noise_bound=NOISE_BOUND):
        self.ops = ops
        self.noise_bound = self._check_bound(noise_bound)

        if seed is None:
            # Pull fresh entropy from the OS now, so a broken source fails here.
            try:
                seed = np.random.SeedSequence()
            except (OSError, NotImplementedError) as e:
                raise EntropySourceError("System entropy source unavailable.") from e
            logger.debug("Sampler seeded from system entropy.")
        else:
            logger.debug("Sampler seeded deterministically.")

        self.rng = np.random.default_rng(seed)

    @classmethod
    def from_seed_bytes(cls, seed_bytes, ops=PO, noise_bound=NOISE_BOUND):
        """Builds a deterministic Sampler from a SEED_BYTES-long byte string."""
        if len(seed_bytes) != SEED_BYTES:
            raise ValueError(f"Seed must be {SEED_BYTES} bytes, got {len(seed_bytes)}.")
        return cls(int.from_bytes(seed_bytes, "little"), ops=ops, noise_bound=noise_bound)

    def _check_bound(self, bound):
        if isinstance(bound, bool) or not isinstance(bound, numbers.Integral):
            raise ValueError(f"Noise bound must be an integer, got {bound!r}.")
        bound = int(bound)
        if bound < 0:
            raise ValueError(f"Noise bound must be non-negative, got {bound}.")
        if 2 * bound + 1 > self.ops.Q:
            raise ValueError(f"Noise bound {bound} covers more than the modulus Q={self.ops.Q}.")
        return bound

    def sample_uniform(self):
        """Generates a polynomial with uniform random coefficients in [0, Q)."""
        return self.rng.integers(0, self.ops.Q, size=self.ops.N, dtype=np.int64)

    def sample_noise(self, bound=None):
        """
        Samples a 'small' polynomial (secret or error) with coefficients drawn
        uniformly from [-bound, bound], then reduced into [0, Q).
        Defaults to the Sampler's configured noise bound.
        """
        bound = self.noise_bound if bound is None else self._check_bound(bound)
        p = self.rng.integers(-bound, bound, size=self.ops.N, dtype=np.int64, endpoint=True)
        return self.ops.reduce_mod_q(p)
