"""Key derivation: serialization layout, stability, pluggable hashes."""

import functools
import hashlib
import unittest

import numpy as np

from poly_ops import PO, PolyOps
from sampler import Sampler
from key_derivation import serialize_poly, derive_secret, resolve_hash
from kem_constants import N, Q, SECRET_BYTES, COEFF_BYTES


class TestSerialize(unittest.TestCase):

    def test_layout_little_endian(self):
        data = serialize_poly(PO.basis(1))
        self.assertEqual(len(data), N * COEFF_BYTES)
        self.assertEqual(data[:4], b"\x00\x00\x01\x00")
        self.assertEqual(data[4:], bytes(len(data) - 4))

    def test_top_coefficient(self):
        p = PO.zero()
        p[0] = Q - 1
        self.assertEqual(serialize_poly(p)[:2], (Q - 1).to_bytes(2, "little"))

    def test_modulus_too_wide(self):
        with self.assertRaises(ValueError):
            serialize_poly([0, 0, 0, 0], PolyOps(4, 70000))


class TestDeriveSecret(unittest.TestCase):

    def test_known_value_zero_poly(self):
        expected = hashlib.sha256(bytes(N * COEFF_BYTES)).digest()
        self.assertEqual(derive_secret(PO.zero()), expected)

    def test_length(self):
        self.assertEqual(len(derive_secret(PO.basis(3))), SECRET_BYTES)

    def test_stable(self):
        p = Sampler(9).sample_uniform()
        self.assertEqual(derive_secret(p), derive_secret(p.copy()))
        self.assertEqual(derive_secret(p), derive_secret(p.tolist()))

    def test_single_coefficient_change(self):
        p = Sampler(10).sample_uniform()
        base = derive_secret(p)
        for i in range(N):
            q = p.copy()
            q[i] = (q[i] + 1) % Q
            self.assertNotEqual(derive_secret(q), base)

    def test_unreduced_input_hashes_like_reduced(self):
        p = np.arange(N) - Q
        self.assertEqual(derive_secret(p), derive_secret(PO.reduce_mod_q(p)))


class TestPluggableHash(unittest.TestCase):

    def test_backends(self):
        p = PO.basis(5)
        data = serialize_poly(p)
        for name, ctor in (("sha256", hashlib.sha256),
                           ("sha3_256", hashlib.sha3_256),
                           ("blake2s", hashlib.blake2s)):
            self.assertEqual(derive_secret(p, name), ctor(data).digest())
            self.assertEqual(derive_secret(p, ctor), ctor(data).digest())

    def test_digest_size_follows_hash(self):
        self.assertEqual(len(derive_secret(PO.zero(), "sha512")), 64)

    def test_named_factory_is_partial(self):
        factory = resolve_hash("sha256")
        self.assertIsInstance(factory, functools.partial)
        self.assertIs(resolve_hash("sha256"), factory)
        self.assertEqual(factory().name, "sha256")

    def test_resolved_factory_called_once_per_derivation(self):
        calls = []

        def counting_sha256():
            calls.append(1)
            return hashlib.sha256()

        factory = resolve_hash(counting_sha256)
        calls.clear()
        derive_secret(PO.zero(), factory)
        self.assertEqual(len(calls), 1)

    def test_rejects_unknown_and_xof(self):
        with self.assertRaises(ValueError):
            resolve_hash("not-a-hash")
        with self.assertRaises(ValueError):
            resolve_hash("shake_128")
        with self.assertRaises(ValueError):
            resolve_hash(42)


if __name__ == "__main__":
    unittest.main()
