class KEMError(Exception):
    """Base class for all errors raised by the lattice KEM modules."""


class ShapeError(KEMError, ValueError):
    """A polynomial is not a flat sequence of exactly N integer coefficients."""


class EntropySourceError(KEMError, RuntimeError):
    """The operating system entropy source could not seed a Sampler."""
