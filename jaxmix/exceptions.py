"""Exception types raised while assembling multi-fluid mixture models.

All of them are construction-time errors. Evaluating an assembled model has no
error paths of its own.
"""


class MultiFluidError(ValueError):
    """Base class for every error raised by jaxmix."""


class SchemaError(MultiFluidError):
    """A parameter table does not follow the expected schema."""


class LengthMismatchError(SchemaError):
    """The coefficient arrays of one term do not all have the same length."""


class NonIntegerExponentError(SchemaError):
    """An exponent array that must hold integers contains a fractional entry."""


class UnknownTermTypeError(SchemaError):
    """A term or departure-function type tag is not one of the supported kinds."""


class DataSourceError(MultiFluidError):
    """An external data file is missing, unreadable or not valid JSON."""


class BinaryPairNotFoundError(MultiFluidError, KeyError):
    """No binary interaction record matches a pair of components."""

    def __str__(self):
        # KeyError quotes its message; keep the plain ValueError rendering
        return ValueError.__str__(self)


class DepartureFunctionNotFoundError(MultiFluidError, KeyError):
    """A binary interaction record names a departure function that does not exist."""

    def __str__(self):
        return ValueError.__str__(self)


class MixtureSizeError(MultiFluidError):
    """The operation is not supported for this number of components."""
