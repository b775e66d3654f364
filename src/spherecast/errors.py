"""Exception hierarchy for the spherecast renderer.

All errors raised by the library derive from SpherecastError so that callers
(the command-line entry point in particular) can report them uniformly. Each
subclass also derives from the closest builtin exception, so code that already
expects a ValueError or RuntimeError keeps working.
"""


class SpherecastError(Exception):
    """Base class for all spherecast errors."""


class ConfigurationError(SpherecastError, ValueError):
    """Malformed scene or render configuration.

    Raised before any rendering work begins: unparseable scene records,
    invalid option values, wrong file extensions, or a camera orientation
    from which no viewport can be built.
    """


class DegenerateVectorError(SpherecastError, ArithmeticError):
    """Attempted to normalize a zero-length vector."""


class PreconditionError(SpherecastError, RuntimeError):
    """An operation was called before the state it depends on exists.

    Examples are writing an image before the render completed, or taking the
    mean of an accumulator that never received a sample.
    """
