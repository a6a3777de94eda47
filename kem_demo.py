import argparse
import json
import logging
import sys

from sampler import Sampler
from kem import keygen, encapsulate, decapsulate
from key_derivation import resolve_hash
from kem_constants import N, Q, NOISE_BOUND, HASH_NAME, DEFAULT_TRIALS, SEED_BYTES
from kem_errors import KEMError

logger = logging.getLogger("LatticeKEM")


def setup_logging(verbose=False):
    """Installs a single stream handler on the shared logger."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def run_exchange(sampler, hash_fn=HASH_NAME):
    """Runs keygen -> encapsulate -> decapsulate once and returns a JSON-friendly transcript."""
    pk, sk = keygen(sampler)
    ct, secret_enc = encapsulate(pk, sampler, hash_fn)
    secret_dec = decapsulate(ct, sk, hash_fn, sampler.ops)

    return {
        "a": pk.a.tolist(),
        "b": pk.b.tolist(),
        "s": sk.s.tolist(),
        "u": ct.u.tolist(),
        "v": ct.v.tolist(),
        "secret_enc": secret_enc.hex(),
        "secret_dec": secret_dec.hex(),
        "agree": secret_enc == secret_dec,
    }


def agreement_rate(trials, sampler, hash_fn=HASH_NAME):
    """Fraction of fresh exchanges in which both sides derived the same secret."""
    if trials < 1:
        raise ValueError(f"Need at least one trial, got {trials}.")
    hits = 0
    for _ in range(trials):
        pk, sk = keygen(sampler)
        ct, secret_enc = encapsulate(pk, sampler, hash_fn)
        if decapsulate(ct, sk, hash_fn, sampler.ops) == secret_enc:
            hits += 1
    return hits / trials


def build_parser():
    parser = argparse.ArgumentParser(
        description=f"Toy lattice KEM demo (N={N}, Q={Q}). Educational only, not secure.")
    seed_group = parser.add_mutually_exclusive_group()
    seed_group.add_argument("--seed", type=int, help="Integer seed for a reproducible run")
    seed_group.add_argument("--seed-hex", help=f"{SEED_BYTES}-byte seed as hex")
    parser.add_argument("--noise-bound", type=int, default=NOISE_BOUND,
                        help=f"Noise coefficient bound (default: {NOISE_BOUND})")
    parser.add_argument("--hash", default=HASH_NAME,
                        help=f"hashlib algorithm for key derivation (default: {HASH_NAME})")
    parser.add_argument("--trials", type=int, default=DEFAULT_TRIALS,
                        help=f"Exchanges used to measure agreement (default: {DEFAULT_TRIALS}, 0 to skip)")
    parser.add_argument("--json", action="store_true", help="Print the exchange transcript as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        hash_fn = resolve_hash(args.hash)
        if args.seed_hex is not None:
            sampler = Sampler.from_seed_bytes(bytes.fromhex(args.seed_hex), noise_bound=args.noise_bound)
        else:
            sampler = Sampler(args.seed, noise_bound=args.noise_bound)

        transcript = run_exchange(sampler, hash_fn)
        if args.json:
            print(json.dumps(transcript))
        else:
            logger.info(f"Public key a: {transcript['a']}")
            logger.info(f"Public key b: {transcript['b']}")
            logger.info(f"Ciphertext u: {transcript['u']}")
            logger.info(f"Ciphertext v: {transcript['v']}")
            logger.info(f"Sender secret:   {transcript['secret_enc']}")
            logger.info(f"Receiver secret: {transcript['secret_dec']}")
            logger.info(f"Secrets agree: {transcript['agree']}")

        if args.trials > 0:
            rate = agreement_rate(args.trials, sampler, hash_fn)
            logger.info(f"Agreement rate over {args.trials} exchanges: {rate:.4f}")
    except (KEMError, ValueError) as e:
        logger.error(f"Demo failed: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
