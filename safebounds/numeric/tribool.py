"""Three-valued logic.

A Tribool is a boolean interval [lo, hi]: [False, False] is definitely false,
[True, True] is definitely true, and [False, True] means the answer could not
be determined. Negation and conjunction are the boolean interval operations,
so indeterminate propagates unless one operand alone decides the result.
"""

from enum import Enum, unique


@unique
class Tribool(Enum):

    FALSE = (False, False)
    INDETERMINATE = (False, True)
    TRUE = (True, True)

    @property
    def lo(self):
        return self.value[0]

    @property
    def hi(self):
        return self.value[1]

    @classmethod
    def of(cls, x):
        """Coerce a bool to a Tribool. None is taken to mean indeterminate."""
        if isinstance(x, Tribool):
            return x
        elif x is None:
            return cls.INDETERMINATE
        elif isinstance(x, bool):
            return cls.TRUE if x else cls.FALSE
        else:
            raise ValueError('expected a boolean: {}'.format(repr(x)))

    def neg(self):
        """Applies boolean NOT."""
        return Tribool((not self.hi, not self.lo))

    def conjoin(self, other):
        """Applies boolean AND to this value and another and returns the result."""
        other = Tribool.of(other)
        return Tribool((self.lo and other.lo, self.hi and other.hi))

    def disjoin(self, other):
        """Applies boolean OR to this value and another and returns the result."""
        other = Tribool.of(other)
        return Tribool((self.lo or other.lo, self.hi or other.hi))

    __invert__ = neg
    __and__ = conjoin
    __rand__ = conjoin
    __or__ = disjoin
    __ror__ = disjoin

    def is_true(self):
        return self is Tribool.TRUE

    def is_false(self):
        return self is Tribool.FALSE

    def is_indeterminate(self):
        return self is Tribool.INDETERMINATE

    def bool_or_none(self):
        """Returns the boolean value if it is known, else None."""
        return self.lo if self.lo == self.hi else None

    # only a definite true is truthy: an indeterminate result proves nothing
    def __bool__(self):
        return self is Tribool.TRUE

    def __str__(self):
        return self.name.lower()


indeterminate = Tribool.INDETERMINATE
