import numbers

import numpy as np
from kem_constants import N, Q
from kem_errors import ShapeError

# Largest coefficient accumulator numpy can hold without wrapping.
_INT64_MAX = np.iinfo(np.int64).max


class PolyOps:
    """
    A class to handle polynomial arithmetic in the cyclic ring R_q = Z_q[x] / (x^N - 1).
    Every result is reduced coefficient-wise into [0, Q).
    """
    def __init__(self, N, Q):
        if N < 1:
            raise ValueError(f"Ring degree must be positive, got N={N}.")
        if Q < 2:
            raise ValueError(f"Modulus must be at least 2, got Q={Q}.")
        # Each output coefficient of poly_mul accumulates exactly N products.
        if N * (Q - 1) ** 2 > _INT64_MAX:
            raise ValueError(f"N={N}, Q={Q} would overflow int64 accumulation.")
        self.N = N
        self.Q = Q

    def as_poly(self, p):
        """
        Validates that p is a flat sequence of exactly N integers and returns it as int64.
        Unsigned and arbitrary-precision input is reduced modulo Q first, so it cannot wrap.
        """
        arr = np.asarray(p)
        if arr.ndim != 1 or arr.shape[0] != self.N:
            raise ShapeError(f"Expected a polynomial of {self.N} coefficients, got shape {arr.shape}.")
        if arr.dtype.kind == "i":
            return arr.astype(np.int64, copy=False)
        if arr.dtype.kind == "u":
            return np.mod(arr, np.uint64(self.Q)).astype(np.int64)
        # Python ints beyond int64 land in an object array.
        if arr.dtype.kind == "O" and all(
                isinstance(c, numbers.Integral) and not isinstance(c, bool) for c in arr):
            return np.array([int(c) % self.Q for c in arr], dtype=np.int64)
        raise ShapeError(f"Polynomial coefficients must be integers, got dtype {arr.dtype}.")

    def reduce(self, x):
        """Canonical reduction of a single signed integer into [0, Q)."""
        # Python's % is already non-negative for a positive modulus.
        return int(x) % self.Q

    def reduce_mod_q(self, p):
        """Reduces all coefficients of a polynomial modulo Q."""
        return np.mod(p, self.Q).astype(np.int64)

    def poly_add(self, p1, p2):
        """Coefficient-wise sum modulo Q."""
        p1 = self.reduce_mod_q(self.as_poly(p1))
        p2 = self.reduce_mod_q(self.as_poly(p2))
        return self.reduce_mod_q(p1 + p2)

    def poly_sub(self, p1, p2):
        """Coefficient-wise difference modulo Q; negative intermediates wrap into [0, Q)."""
        p1 = self.reduce_mod_q(self.as_poly(p1))
        p2 = self.reduce_mod_q(self.as_poly(p2))
        return self.reduce_mod_q(p1 - p2)

    def poly_mul(self, p1, p2):
        """
        Multiplies two polynomials p1 and p2 and reduces the result
        modulo (x^N - 1) and modulo Q.
        The product a[i]*b[j] lands on index (i + j) mod N.
        """
        p1 = self.reduce_mod_q(self.as_poly(p1))
        p2 = self.reduce_mod_q(self.as_poly(p2))

        # 1. Standard polynomial multiplication (convolution), length 2N - 1
        p_long = np.convolve(p1, p2)

        # 2. Reduction modulo (x^N - 1): x^N wraps around to x^0
        p_reduced = p_long[:self.N].copy()
        p_reduced[:self.N - 1] += p_long[self.N:]

        # 3. Reduction modulo Q
        return self.reduce_mod_q(p_reduced)

    def zero(self):
        """The additive identity."""
        return np.zeros(self.N, dtype=np.int64)

    def basis(self, i):
        """The basis polynomial x^i (single coefficient 1 at index i)."""
        if not 0 <= i < self.N:
            raise IndexError(f"Basis index {i} outside [0, {self.N}).")
        e = self.zero()
        e[i] = 1
        return e

    def frozen(self, p):
        """Returns a reduced, read-only copy of p, suitable for storing in key material."""
        out = self.reduce_mod_q(self.as_poly(p))
        out.flags.writeable = False
        return out

# Instantiate the PolyOps helper for use across the KEM modules
PO = PolyOps(N, Q)
