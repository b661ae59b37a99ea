"""Checked arithmetic on single values.

Every operation returns a CheckedResult: either the value, fitted to the
result representation, or an exception marker saying why no value could
be produced. Nothing is raised for arithmetic failures.

Operands are converted exactly to rationals, the operation is computed
exactly, and the result is fitted to the target representation once.
Fitting is implemented per category: integers truncate toward zero and
are range checked, floats are rounded to nearest even at the format's
precision (with subnormals) and checked for overflow and underflow.
"""

import logging
import operator

import gmpy2 as gmp
import numpy as np

from ..numeric.ops import EXC, OP, KIND, op_names
from ..numeric.tribool import Tribool
from ..numeric.utils import CheckedError, describe
from . import evalctx


logger = logging.getLogger(__name__)


class CheckedResult(object):
    """A value of some representation, or a tagged description of why
    there is no value.
    """

    _value = 0
    _exception: EXC = EXC.no_exception
    _msg: str = ''
    _sign: int = 0
    _ctx: evalctx.NumericCtx = evalctx.default_int_ctx

    # the internal state is not directly visible: expose it with properties

    @property
    def value(self):
        """The concrete value, or None for an exception marker."""
        return self._value

    @property
    def exception(self):
        """The exception kind; EXC.no_exception for a concrete value."""
        return self._exception

    @property
    def msg(self):
        """Diagnostic text for an exception marker."""
        return self._msg

    @property
    def sign(self):
        """Which side of the representation an overflow fell off: 1 above the
        largest value, -1 below the smallest, 0 when unknown or not an overflow.
        """
        return self._sign

    @property
    def ctx(self):
        """The representation this result belongs to."""
        return self._ctx

    def __init__(self, value=None, exception=None, msg=None, ctx=None, sign=None):
        """Creates a concrete result from `value`, stored verbatim, or an
        exception marker from `exception` and `msg`. The representation
        defaults to the one implied by the value.
        """
        if exception is not None and exception != EXC.no_exception:
            if value is not None:
                raise CheckedError('cannot specify both value={} and exception={}'
                                   .format(repr(value), repr(exception)))
            self._value = None
            self._exception = EXC(exception)
            self._msg = '' if msg is None else str(msg)
            self._sign = 0 if sign is None else (sign > 0) - (sign < 0)
            self._ctx = ctx if ctx is not None else type(self)._ctx

        elif isinstance(value, CheckedResult):
            self._value = value._value
            self._exception = value._exception
            self._msg = value._msg
            self._sign = value._sign
            self._ctx = ctx if ctx is not None else value._ctx

        elif value is None:
            self._value = type(self)._value
            self._ctx = ctx if ctx is not None else type(self)._ctx

        else:
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, gmp.mpz, gmp.mpfr, np.number)):
                raise CheckedError('expected a number: {}'.format(describe(value)))
            self._ctx = ctx if ctx is not None else evalctx.ctx_of(value)
            if isinstance(value, np.integer):
                value = int(value)
            self._value = value

    def __repr__(self):
        if self.is_valid():
            return '{}(value={}, ctx={})'.format(
                type(self).__name__, repr(self._value), repr(self._ctx))
        else:
            return '{}(exception={}, msg={}, ctx={})'.format(
                type(self).__name__, str(self._exception), repr(self._msg), repr(self._ctx))

    def __str__(self):
        if self.is_valid():
            return str(self._value)
        elif self._msg:
            return '{}: {}'.format(self._exception.name, self._msg)
        else:
            return self._exception.name

    def is_valid(self):
        """Is this a concrete value rather than an exception marker?"""
        return self._exception == EXC.no_exception

    # ordering is three-valued: nothing can be said about a missing value

    def _compare(self, other, cmp):
        if isinstance(other, CheckedResult):
            if not other.is_valid():
                return Tribool.INDETERMINATE
            other = other._value
        if not self.is_valid():
            return Tribool.INDETERMINATE
        return Tribool.of(bool(cmp(self._value, other)))

    def __lt__(self, other):
        return self._compare(other, operator.lt)

    def __le__(self, other):
        return self._compare(other, operator.le)

    def __gt__(self, other):
        return self._compare(other, operator.gt)

    def __ge__(self, other):
        return self._compare(other, operator.ge)

    def tri_eq(self, other):
        """Three-valued equality of the represented values."""
        return self._compare(other, operator.eq)

    # equality of descriptions is two-valued, so results can be hashed
    # and identical exception markers compare equal

    def __eq__(self, other):
        if isinstance(other, CheckedResult):
            if self.is_valid() and other.is_valid():
                return self._value == other._value
            else:
                return self._exception == other._exception
        elif isinstance(other, EXC):
            # kinds are ints; compare against .exception instead
            return NotImplemented
        elif isinstance(other, (int, float, gmp.mpz, gmp.mpfr, np.number)):
            return self.is_valid() and self._value == other
        else:
            return NotImplemented

    def __hash__(self):
        if self.is_valid():
            return hash(self._value)
        else:
            return hash((type(self).__name__, self._exception))


def _exception(kind, msg, ctx, sign=0):
    logger.debug('%s in %s: %s', kind.name, str(ctx), msg)
    return CheckedResult(exception=kind, msg=msg, ctx=ctx, sign=sign)


#
#   Exact operands
#

def _rational(x, ctx, op):
    """Convert an operand to an exact gmpy2.mpq, or return the marker
    it turns into in `ctx`.
    """
    if isinstance(x, CheckedResult):
        if not x.is_valid():
            return CheckedResult(exception=x.exception, msg=x.msg, ctx=ctx, sign=x.sign)
        x = x.value

    if isinstance(x, (bool, np.bool_)):
        raise CheckedError('expected a number: {}'.format(describe(x)))
    elif isinstance(x, (int, gmp.mpz, np.integer)):
        return gmp.mpq(int(x))
    elif isinstance(x, gmp.mpq):
        return x
    elif isinstance(x, (float, gmp.mpfr, np.floating)):
        if np.isnan(x) if isinstance(x, np.floating) else gmp.is_nan(x):
            return _exception(EXC.domain_error, 'NaN operand in {}'.format(op_names[op]), ctx)
        elif np.isinf(x) if isinstance(x, np.floating) else gmp.is_infinite(x):
            return _exception(EXC.overflow, 'infinite operand in {}'.format(op_names[op]), ctx, sign=(1 if x > 0 else -1))
        num, den = x.as_integer_ratio()
        return gmp.mpq(int(num), int(den))
    else:
        raise CheckedError('expected a number: {}'.format(describe(x)))


def _trunc(q):
    return int(gmp.t_div(q.numerator, q.denominator))

_half = gmp.mpq(1, 2)

def _round_nearest_even(q):
    a = abs(q)
    n = int(gmp.f_div(a.numerator, a.denominator))
    r = a - n
    if r > _half or (r == _half and n % 2 == 1):
        n += 1
    return -n if q < 0 else n


#
#   Fitting exact results to a representation
#

def _fit_integer(q, ctx, op):
    i = _trunc(q)
    if i > ctx.max_value:
        return _exception(EXC.overflow, '{} result too large for {}'.format(op_names[op], str(ctx)), ctx, sign=1)
    elif i < ctx.min_value:
        return _exception(EXC.overflow, '{} result too small for {}'.format(op_names[op], str(ctx)), ctx, sign=-1)
    else:
        return CheckedResult(i, ctx=ctx)

def _fit_float(q, ctx, op):
    with gmp.context(precision=ctx.p, round=gmp.RoundToNearest):
        if q == 0:
            result = gmp.mpfr(0)
        elif abs(q) < ctx.smallest_normal:
            # below the normal range the format has a fixed quantum
            quantum = gmp.mpq(1, 1 << -ctx.n)
            m = _round_nearest_even(q / quantum)
            if m == 0:
                return _exception(EXC.underflow, '{} result too small in magnitude for {}'
                                  .format(op_names[op], str(ctx)), ctx)
            result = gmp.mpfr(m * quantum)
        else:
            result = gmp.mpfr(q)

    if result > ctx.max_value:
        return _exception(EXC.overflow, '{} result too large for {}'.format(op_names[op], str(ctx)), ctx, sign=1)
    elif result < ctx.min_value:
        return _exception(EXC.overflow, '{} result too small for {}'.format(op_names[op], str(ctx)), ctx, sign=-1)
    else:
        return CheckedResult(result, ctx=ctx)

def _fit(q, ctx, op):
    if ctx.kind == KIND.FLOAT:
        return _fit_float(q, ctx, op)
    else:
        return _fit_integer(q, ctx, op)


#
#   Operations
#

def _binary(op, a, b, ctx):
    if ctx is None:
        ctx = evalctx.select_ctx(evalctx.ctx_of(a), evalctx.ctx_of(b))

    x = _rational(a, ctx, op)
    if isinstance(x, CheckedResult):
        return x
    y = _rational(b, ctx, op)
    if isinstance(y, CheckedResult):
        return y

    if op == OP.add:
        result = x + y
    elif op == OP.sub:
        result = x - y
    elif op == OP.mul:
        result = x * y
    elif op == OP.div:
        if y == 0:
            return _exception(EXC.domain_error, 'divide by zero', ctx)
        result = x / y
    elif op == OP.mod:
        if y == 0:
            return _exception(EXC.domain_error, 'modulus by zero', ctx)
        # C semantics: the quotient truncates, the remainder has the sign of x
        result = x - _trunc(x / y) * y
    else:
        raise ValueError('unsupported binary operation {}'.format(repr(op)))

    return _fit(result, ctx, op)


def add(a, b, ctx=None):
    """a + b in `ctx` (by default the representation selected from the operands)."""
    return _binary(OP.add, a, b, ctx)

def subtract(a, b, ctx=None):
    """a - b in `ctx`."""
    return _binary(OP.sub, a, b, ctx)

def multiply(a, b, ctx=None):
    """a * b in `ctx`."""
    return _binary(OP.mul, a, b, ctx)

def divide(a, b, ctx=None):
    """a / b in `ctx`. Integer quotients truncate toward zero."""
    return _binary(OP.div, a, b, ctx)

def modulus(a, b, ctx=None):
    """Remainder of a / b in `ctx`, with the sign of a."""
    return _binary(OP.mod, a, b, ctx)

def cast(x, ctx=None):
    """Convert `x` to `ctx`, capturing values the representation cannot hold."""
    if ctx is None:
        ctx = evalctx.ctx_of(x)
    q = _rational(x, ctx, OP.cast)
    if isinstance(q, CheckedResult):
        return q
    return _fit(q, ctx, OP.cast)
