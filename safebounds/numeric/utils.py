"""General utilities, such as exception classes."""

# safebounds-specific exceptions
# these signal misuse of the library; arithmetic failures are never raised,
# they are carried as data in a CheckedResult

class SafeBoundsError(ValueError):
    """Base safebounds error."""

class ContextError(SafeBoundsError):
    """Unknown or unsupported numeric representation."""

class CheckedError(SafeBoundsError):
    """Operand that cannot be interpreted as a number."""

class IntervalError(SafeBoundsError):
    """Invalid combination of interval constructor arguments."""


def describe(x) -> str:
    """Short human readable description of a value, for error messages."""
    return '{} of type {}'.format(repr(x), type(x).__name__)
