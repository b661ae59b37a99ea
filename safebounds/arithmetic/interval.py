"""Interval arithmetic over checked bounds.

An Interval [lo, hi] bounds the values some quantity can take in a
representation R. Each bound is a CheckedResult, so a bound that could
not be computed (overflow, division by an interval containing zero, ...)
is carried as data instead of being raised. Arithmetic combines bounds
pairwise through the checked primitives; comparisons answer with a
Tribool, because intervals are only partially ordered.
Rules adapted from https://en.wikipedia.org/wiki/Interval_arithmetic
"""

import logging

from ..numeric.ops import EXC
from ..numeric.tribool import Tribool
from ..numeric.utils import IntervalError, SafeBoundsError, describe
from . import evalctx
from . import checked
from .checked import CheckedResult


logger = logging.getLogger(__name__)


#
#   Variadic reducers
#

def vmin(*values):
    """Smallest of one or more values, by pairwise < from left to right."""
    if not values:
        raise ValueError('vmin() requires at least one argument')
    result = values[0]
    for x in values[1:]:
        result = result if result < x else x
    return result

def vmax(*values):
    """Largest of one or more values, by pairwise > from left to right."""
    if not values:
        raise ValueError('vmax() requires at least one argument')
    result = values[0]
    for x in values[1:]:
        result = result if result > x else x
    return result


# An overflow off the far side of the representation cannot be the
# extremum being sought, so it is skipped while a concrete candidate
# remains. Any other marker makes the extremum unknown.
def _extremum(reducer, *bounds):
    far_side = 1 if reducer is vmin else -1
    values = []
    for bound in bounds:
        if bound.is_valid():
            values.append(bound)
        elif bound.exception != EXC.overflow or bound.sign != far_side:
            return bound
    if values:
        return reducer(*values)
    else:
        return bounds[0]


def _divisor_includes_zero(ctx):
    logger.debug('degenerate interval in %s: divisor includes zero', str(ctx))
    return Interval(
        lo=checked.cast(0, ctx),
        hi=CheckedResult(exception=EXC.domain_error, msg='interval divisor includes zero', ctx=ctx),
    )


class Interval(object):
    """A closed interval [lo, hi] with checked bounds in representation `ctx`.
    Intervals are values: they are never modified after construction.
    """

    _lo: CheckedResult = CheckedResult(evalctx.default_int_ctx.min_value, ctx=evalctx.default_int_ctx)
    _hi: CheckedResult = CheckedResult(evalctx.default_int_ctx.max_value, ctx=evalctx.default_int_ctx)
    _ctx: evalctx.NumericCtx = evalctx.default_int_ctx

    # the internal state is not directly visible: expose it with properties

    @property
    def lo(self):
        """The lower bound, a CheckedResult."""
        return self._lo

    @property
    def hi(self):
        """The upper bound, a CheckedResult."""
        return self._hi

    @property
    def ctx(self):
        """The representation both bounds are stored in."""
        return self._ctx

    def __init__(self, x=None, lo=None, hi=None, ctx=None):
        """Creates a new interval.

        With no arguments, or only `ctx`, the interval covers every value of
        the representation (int64 by default).
        `lo` and `hi` give the bounds: CheckedResults are kept verbatim, other
        numbers are cast to `ctx` (or to the representation implied by the
        numbers themselves, so numpy.int8 bounds make an int8 interval).
        `x` is another Interval to copy, or to convert when `ctx` names a
        different representation, or a single value for the interval [x, x].
        Bounds are not required to be ordered.
        """
        if x is not None and (lo is not None or hi is not None):
            raise IntervalError('cannot specify both x={} and [lo={}, hi={}]'
                                .format(repr(x), repr(lo), repr(hi)))
        if (lo is None) != (hi is None):
            raise IntervalError('both bounds are required, got lo={}, hi={}'.format(repr(lo), repr(hi)))

        if ctx is not None and not isinstance(ctx, evalctx.NumericCtx):
            raise IntervalError('expected a representation for ctx: {}'.format(describe(ctx)))

        try:
            if x is None and lo is None:
                self._ctx = ctx if ctx is not None else type(self)._ctx
                self._lo = CheckedResult(self._ctx.min_value, ctx=self._ctx)
                self._hi = CheckedResult(self._ctx.max_value, ctx=self._ctx)

            elif isinstance(x, Interval):
                if ctx is None or ctx == x._ctx:
                    self._ctx = x._ctx
                    self._lo = x._lo
                    self._hi = x._hi
                else:
                    self._ctx = ctx
                    self._lo = checked.cast(x._lo, ctx)
                    self._hi = checked.cast(x._hi, ctx)

            elif x is not None:
                self._ctx = ctx if ctx is not None else evalctx.ctx_of(x)
                self._lo = self._hi = checked.cast(x, self._ctx)

            elif isinstance(lo, CheckedResult) and isinstance(hi, CheckedResult):
                self._ctx = ctx if ctx is not None else lo.ctx
                self._lo = lo
                self._hi = hi

            else:
                self._ctx = ctx if ctx is not None else evalctx.select_ctx(evalctx.ctx_of(lo), evalctx.ctx_of(hi))
                self._lo = checked.cast(lo, self._ctx)
                self._hi = checked.cast(hi, self._ctx)

        except IntervalError:
            raise
        except SafeBoundsError as exn:
            raise IntervalError('cannot make an interval from x={}, lo={}, hi={}: {}'
                                .format(repr(x), repr(lo), repr(hi), str(exn))) from exn

    def __repr__(self):
        return '{}(lo={}, hi={}, ctx={})'.format(
            type(self).__name__, repr(self._lo), repr(self._hi), repr(self._ctx))

    def __str__(self):
        return '[{},{}]'.format(str(self._lo), str(self._hi))

    def no_exception(self):
        """Are both bounds concrete values?"""
        return self._lo.is_valid() and self._hi.is_valid()

    def includes(self, other):
        """Does this interval contain every point of `other`?
        Indeterminate whenever a bound of either interval is an exception:
        that means inclusion cannot be proven, not that it is false.
        """
        other = _as_interval(other)
        return (self._lo <= other._lo) & (self._hi >= other._hi)

    # arithmetic

    def _result_ctx(self, other, ctx):
        return ctx if ctx is not None else evalctx.select_ctx(self._ctx, other._ctx)

    def add(self, other, ctx=None):
        other = _as_interval(other)
        ctx = self._result_ctx(other, ctx)
        return Interval(
            lo=checked.add(self._lo, other._lo, ctx),
            hi=checked.add(self._hi, other._hi, ctx),
            ctx=ctx,
        )

    def sub(self, other, ctx=None):
        other = _as_interval(other)
        ctx = self._result_ctx(other, ctx)
        return Interval(
            lo=checked.subtract(self._lo, other._hi, ctx),
            hi=checked.subtract(self._hi, other._lo, ctx),
            ctx=ctx,
        )

    def mul(self, other, ctx=None):
        other = _as_interval(other)
        ctx = self._result_ctx(other, ctx)
        products = (
            checked.multiply(self._lo, other._lo, ctx),
            checked.multiply(self._lo, other._hi, ctx),
            checked.multiply(self._hi, other._lo, ctx),
            checked.multiply(self._hi, other._hi, ctx),
        )
        return Interval(lo=_extremum(vmin, *products), hi=_extremum(vmax, *products), ctx=ctx)

    def div(self, other, ctx=None):
        other = _as_interval(other)
        ctx = self._result_ctx(other, ctx)
        # unknown divisor bounds might include zero as well
        if not ((other._lo <= 0) & (other._hi >= 0)).is_false():
            return _divisor_includes_zero(ctx)
        quotients = (
            checked.divide(self._lo, other._lo, ctx),
            checked.divide(self._lo, other._hi, ctx),
            checked.divide(self._hi, other._lo, ctx),
            checked.divide(self._hi, other._hi, ctx),
        )
        return Interval(lo=_extremum(vmin, *quotients), hi=_extremum(vmax, *quotients), ctx=ctx)

    def mod(self, other, ctx=None):
        other = _as_interval(other)
        ctx = self._result_ctx(other, ctx)
        # conservative: any divisor that may be non-positive is rejected
        if not (other._lo > 0).is_true():
            return _divisor_includes_zero(ctx)
        return Interval(
            lo=checked.cast(0, ctx),
            hi=checked.cast(_extremum(vmax, other._hi, other._lo), ctx),
            ctx=ctx,
        )

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return _as_interval(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return _as_interval(other).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return _as_interval(other).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return _as_interval(other).div(self)

    def __mod__(self, other):
        return self.mod(other)

    def __rmod__(self, other):
        return _as_interval(other).mod(self)

    # comparison

    def _every_lt(self, other):
        return self._hi.value < other._lo.value

    def _every_gt(self, other):
        return self._lo.value > other._hi.value

    def lt(self, other):
        """Is every point of this interval less than every point of `other`?"""
        other = _as_interval(other)
        if not (self.no_exception() and other.no_exception()):
            return Tribool.INDETERMINATE
        elif self._every_lt(other):
            return Tribool.TRUE
        elif self._every_gt(other):
            return Tribool.FALSE
        else:
            return Tribool.INDETERMINATE

    def gt(self, other):
        """Is every point of this interval greater than every point of `other`?"""
        other = _as_interval(other)
        if not (self.no_exception() and other.no_exception()):
            return Tribool.INDETERMINATE
        elif self._every_gt(other):
            return Tribool.TRUE
        elif self._every_lt(other):
            return Tribool.FALSE
        else:
            return Tribool.INDETERMINATE

    def le(self, other):
        return ~self.gt(other)

    def ge(self, other):
        return ~self.lt(other)

    def __lt__(self, other):
        return self.lt(other)

    def __gt__(self, other):
        return self.gt(other)

    def __le__(self, other):
        return self.le(other)

    def __ge__(self, other):
        return self.ge(other)

    # equality compares the descriptions, not the sets of values

    def __eq__(self, other):
        if isinstance(other, Interval):
            return self._lo == other._lo and self._hi == other._hi
        else:
            return NotImplemented

    def __hash__(self):
        return hash((self._lo, self._hi))


def _as_interval(x):
    if isinstance(x, Interval):
        return x
    elif x is None:
        raise IntervalError('expected an interval: None')
    try:
        return Interval(x)
    except IntervalError as exn:
        raise IntervalError('expected an interval: {}'.format(describe(x))) from exn
