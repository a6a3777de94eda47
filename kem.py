"""
Minimal lattice key encapsulation over Z_q[x] / (x^N - 1), educational only.

Not cryptographically secure: no side-channel hardening, no message encoding,
no vetted parameter set. The two sides hash different ring elements
(v on the sender, v - u*s on the receiver), so their secrets usually differ;
see kem_demo.agreement_rate for a measurement.
"""
import logging
from collections import namedtuple

from poly_ops import PO
from key_derivation import derive_secret, resolve_hash
from kem_constants import HASH_NAME

logger = logging.getLogger("LatticeKEM")

PublicKey = namedtuple("PublicKey", ["a", "b"])
PrivateKey = namedtuple("PrivateKey", ["s"])
CipherText = namedtuple("CipherText", ["u", "v"])


def keygen(sampler):
    """
    Key Generation.
    Returns (PublicKey(a, b), PrivateKey(s)) with b = a*s + e.
    """
    ops = sampler.ops
    s = sampler.sample_noise()
    e = sampler.sample_noise()
    a = sampler.sample_uniform()
    b = ops.poly_add(ops.poly_mul(a, s), e)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("keygen: public a[:4]=%s b[:4]=%s", a[:4].tolist(), b[:4].tolist())
    return PublicKey(ops.frozen(a), ops.frozen(b)), PrivateKey(ops.frozen(s))


def encapsulate(pk, sampler, hash_fn=HASH_NAME):
    """
    Sender side.
    u = a*r + e1, v = b*r + e2; the shared secret is H(v).
    Returns (CipherText(u, v), secret).
    """
    ops = sampler.ops
    factory = resolve_hash(hash_fn)
    r = sampler.sample_noise()
    e1 = sampler.sample_noise()
    e2 = sampler.sample_noise()

    u = ops.poly_add(ops.poly_mul(pk.a, r), e1)
    v = ops.poly_add(ops.poly_mul(pk.b, r), e2)

    secret = derive_secret(v, factory, ops)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("encapsulate: ciphertext u[:4]=%s v[:4]=%s", u[:4].tolist(), v[:4].tolist())
    return CipherText(ops.frozen(u), ops.frozen(v)), secret


def decapsulate(ct, sk, hash_fn=HASH_NAME, ops=PO):
    """
    Receiver side.
    t = v - u*s; the shared secret is H(t).
    Expanding gives t = e*r + e2 - e1*s, which is not v, so no agreement is promised.
    """
    factory = resolve_hash(hash_fn)
    t = ops.poly_sub(ct.v, ops.poly_mul(ct.u, sk.s))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("decapsulate: residual t[:4]=%s", t[:4].tolist())
    return derive_secret(t, factory, ops)
