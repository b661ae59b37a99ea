"""Standard codes shared by the checked arithmetic and the interval engine."""

from enum import IntEnum, unique

@unique
class EXC(IntEnum):
    """Exception kinds carried by a CheckedResult."""
    no_exception = 0
    overflow = 1
    underflow = 2
    range_error = 3
    domain_error = 4

@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2
    div = 3
    mod = 4
    cast = 5

@unique
class KIND(IntEnum):
    """Representation categories. Checked arithmetic is implemented
    once per category, not once per width."""
    SIGNED = 0
    UNSIGNED = 1
    FLOAT = 2

op_names = {
    OP.add: 'addition',
    OP.sub: 'subtraction',
    OP.mul: 'multiplication',
    OP.div: 'division',
    OP.mod: 'modulus',
    OP.cast: 'conversion',
}
