# --- LATTICE KEM CONFIGURATION ---
N = 16         # Degree of the cyclic ring (x^N - 1). Small for speed, not security.
Q = 3329       # Coefficient modulus (same value as Kyber, primality not required).
NOISE_BOUND = 3  # Noise coefficients are drawn uniformly from [-NOISE_BOUND, NOISE_BOUND].

# Key derivation
SECRET_BYTES = 32      # Length of the shared secret (SHA-256 digest size).
HASH_NAME = "sha256"   # Default hashlib algorithm for derive_secret.
COEFF_BYTES = 2        # Width of one serialized coefficient.
BYTE_ORDER = "little"  # Byte order of serialized coefficients.

# Sampler seeding
SEED_BYTES = 32

# Demo driver
DEFAULT_TRIALS = 1000
