import hashlib
import functools

import numpy as np
from poly_ops import PO
from kem_constants import COEFF_BYTES, BYTE_ORDER, HASH_NAME

_DTYPE_ORDER = {"little": "<", "big": ">"}


def serialize_poly(p, ops=PO):
    """
    Encodes a polynomial as N fixed-width unsigned integers in index order.
    Layout: COEFF_BYTES per coefficient, BYTE_ORDER byte order, no header.
    """
    if ops.Q > 1 << (8 * COEFF_BYTES):
        raise ValueError(f"Q={ops.Q} does not fit in {COEFF_BYTES}-byte coefficients.")
    coeffs = ops.reduce_mod_q(ops.as_poly(p))
    dtype = np.dtype(f"{_DTYPE_ORDER[BYTE_ORDER]}u{COEFF_BYTES}")
    return coeffs.astype(dtype).tobytes()


@functools.lru_cache(maxsize=None)
def _named_hash(name):
    try:
        hashlib.new(name)
    except ValueError as e:
        raise ValueError(f"Unknown hash algorithm: {name}") from e
    return functools.partial(hashlib.new, name)


def resolve_hash(hash_fn):
    """
    Turns a hashlib algorithm name or constructor into a zero-argument factory.
    Variable-length digests (shake_*) are rejected: the secret length must be fixed.
    """
    if isinstance(hash_fn, str):
        factory = _named_hash(hash_fn)
    elif callable(hash_fn):
        factory = hash_fn
    else:
        raise ValueError(f"hash_fn must be a hashlib name or constructor, got {hash_fn!r}.")

    if factory().digest_size == 0:
        raise ValueError("Hash function must have a fixed, non-zero digest size.")
    return factory


def derive_secret(p, hash_fn=HASH_NAME, ops=PO):
    """
    Maps a ring element to a fixed-length shared secret: H(serialize(p)).
    hash_fn is a hashlib name or a factory already checked by resolve_hash.
    """
    factory = resolve_hash(hash_fn) if isinstance(hash_fn, str) else hash_fn
    h = factory()
    h.update(serialize_poly(p, ops))
    return h.digest()
