"""Numeric representations, shared by the checked arithmetic and intervals.

A context describes the type R that a bound is stored in: a signed or
unsigned integer of some width, or an IEEE 754-like binary float with
some exponent size and total width. Contexts are immutable and cached,
so they can be compared and hashed freely.
"""

import re

import gmpy2 as gmp
import numpy as np

from ..numeric.ops import KIND
from ..numeric.utils import ContextError


int8_synonyms = {'int8', 'int8_t', 'char', 'signed char'}
int16_synonyms = {'int16', 'int16_t', 'short'}
int32_synonyms = {'int32', 'int32_t', 'int'}
int64_synonyms = {'int64', 'int64_t', 'long', 'long long'}

uint8_synonyms = {'uint8', 'uint8_t', 'unsigned char', 'byte'}
uint16_synonyms = {'uint16', 'uint16_t', 'unsigned short'}
uint32_synonyms = {'uint32', 'uint32_t', 'unsigned', 'unsigned int'}
uint64_synonyms = {'uint64', 'uint64_t', 'unsigned long', 'size_t'}

binary16_synonyms = {'binary16', 'float16', 'float16_t', 'half'}
binary32_synonyms = {'binary32', 'float32', 'float32_t', 'single', 'float'}
binary64_synonyms = {'binary64', 'float64', 'float64_t', 'double'}
binary80_synonyms = {'binary80', 'float80', 'extended', 'longdouble', 'long double'}
binary128_synonyms = {'binary128', 'float128', 'float128_t', 'quadruple'}


class NumericCtx(object):
    """Common interface of all representations."""

    kind: KIND = KIND.SIGNED
    nbits: int = 64

    @property
    def min_value(self):
        """Lowest representable value."""
        raise ValueError('virtual method: unimplemented')

    @property
    def max_value(self):
        """Highest representable value."""
        raise ValueError('virtual method: unimplemented')

    def is_integer(self):
        return self.kind != KIND.FLOAT

    def _key(self):
        raise ValueError('virtual method: unimplemented')

    def __eq__(self, other):
        if isinstance(other, NumericCtx):
            return self._key() == other._key()
        else:
            return NotImplemented

    def __hash__(self):
        return hash(self._key())


class IntCtx(NumericCtx):
    """Context for fixed width two's complement (or unsigned) integers."""

    def __init__(self, nbits=64, signed=True):
        if not isinstance(nbits, int) or nbits < 1:
            raise ContextError('integer width must be a positive integer, got {}'.format(repr(nbits)))
        self.nbits = nbits
        self.signed = bool(signed)
        if self.signed:
            self.kind = KIND.SIGNED
            self._min = -(1 << (nbits - 1))
            self._max = (1 << (nbits - 1)) - 1
        else:
            self.kind = KIND.UNSIGNED
            self._min = 0
            self._max = (1 << nbits) - 1

    @property
    def min_value(self):
        return self._min

    @property
    def max_value(self):
        return self._max

    def _key(self):
        return (self.kind, self.nbits)

    def __repr__(self):
        return '{}(nbits={}, signed={})'.format(type(self).__name__, repr(self.nbits), repr(self.signed))

    def __str__(self):
        return '{}int{:d}'.format('' if self.signed else 'u', self.nbits)


class FloatCtx(NumericCtx):
    """Context for IEEE 754-like binary floating point, with subnormals.
    p counts the implicit bit, so binary64 is es=11, nbits=64, p=53.
    """

    kind = KIND.FLOAT

    def __init__(self, es=11, nbits=64):
        if not isinstance(es, int) or not isinstance(nbits, int) or es < 2 or nbits - es < 2:
            raise ContextError('unsupported float format es={}, nbits={}'.format(repr(es), repr(nbits)))
        self.es = es
        self.nbits = nbits
        self.p = nbits - es
        self.emax = (1 << (es - 1)) - 1
        self.emin = 1 - self.emax
        # exponent of the smallest subnormal, the rounding quantum below emin
        self.n = self.emin - self.p + 1

        with gmp.context(precision=self.p + 1):
            self._max = gmp.mpfr((1 << self.p) - 1) * gmp.exp2(self.emax - self.p + 1)
            self._min = -self._max
            self._smallest_normal = gmp.exp2(self.emin)

    @property
    def min_value(self):
        return self._min

    @property
    def max_value(self):
        return self._max

    @property
    def smallest_normal(self):
        return self._smallest_normal

    def _key(self):
        return (self.kind, self.es, self.nbits)

    def __repr__(self):
        return '{}(es={}, nbits={})'.format(type(self).__name__, repr(self.es), repr(self.nbits))

    def __str__(self):
        return 'float({:d},{:d})'.format(self.es, self.nbits)


used_ctxs = {}
def int_ctx(nbits, signed=True):
    try:
        return used_ctxs[(KIND.SIGNED if signed else KIND.UNSIGNED, nbits)]
    except KeyError:
        ctx = IntCtx(nbits=nbits, signed=signed)
        used_ctxs[ctx._key()] = ctx
        return ctx

def float_ctx(es, nbits):
    try:
        return used_ctxs[(KIND.FLOAT, es, nbits)]
    except KeyError:
        ctx = FloatCtx(es=es, nbits=nbits)
        used_ctxs[ctx._key()] = ctx
        return ctx


int8 = int_ctx(8)
int16 = int_ctx(16)
int32 = int_ctx(32)
int64 = int_ctx(64)
uint8 = int_ctx(8, signed=False)
uint16 = int_ctx(16, signed=False)
uint32 = int_ctx(32, signed=False)
uint64 = int_ctx(64, signed=False)
binary16 = float_ctx(5, 16)
binary32 = float_ctx(8, 32)
binary64 = float_ctx(11, 64)

default_int_ctx = int64
default_float_ctx = binary64


named_ctxs = {}
named_ctxs.update((k, (KIND.SIGNED, 8)) for k in int8_synonyms)
named_ctxs.update((k, (KIND.SIGNED, 16)) for k in int16_synonyms)
named_ctxs.update((k, (KIND.SIGNED, 32)) for k in int32_synonyms)
named_ctxs.update((k, (KIND.SIGNED, 64)) for k in int64_synonyms)
named_ctxs.update((k, (KIND.UNSIGNED, 8)) for k in uint8_synonyms)
named_ctxs.update((k, (KIND.UNSIGNED, 16)) for k in uint16_synonyms)
named_ctxs.update((k, (KIND.UNSIGNED, 32)) for k in uint32_synonyms)
named_ctxs.update((k, (KIND.UNSIGNED, 64)) for k in uint64_synonyms)
named_ctxs.update((k, (KIND.FLOAT, 5, 16)) for k in binary16_synonyms)
named_ctxs.update((k, (KIND.FLOAT, 8, 32)) for k in binary32_synonyms)
named_ctxs.update((k, (KIND.FLOAT, 11, 64)) for k in binary64_synonyms)
named_ctxs.update((k, (KIND.FLOAT, 15, 79)) for k in binary80_synonyms)
named_ctxs.update((k, (KIND.FLOAT, 15, 128)) for k in binary128_synonyms)

_int_name_re = re.compile(r'(u?)int(\d+)(_t)?')
_float_name_re = re.compile(r'float\((\d+),\s*(\d+)\)')

def lookup_ctx(name):
    """Find the context for a type name such as 'int8', 'uint32_t', 'double'
    or 'float(5,16)'. Names are case insensitive.
    """
    key = ' '.join(str(name).lower().split())
    if key in named_ctxs:
        entry = named_ctxs[key]
        if entry[0] == KIND.FLOAT:
            return float_ctx(entry[1], entry[2])
        else:
            return int_ctx(entry[1], signed=(entry[0] == KIND.SIGNED))

    m = _int_name_re.fullmatch(key)
    if m:
        return int_ctx(int(m.group(2)), signed=(m.group(1) == ''))
    m = _float_name_re.fullmatch(key)
    if m:
        return float_ctx(int(m.group(1)), int(m.group(2)))

    raise ContextError('unsupported type name {}'.format(repr(name)))


def ctx_from_dtype(dtype):
    """Map a numpy integer or floating dtype (or scalar type) to a context."""
    try:
        dtype = np.dtype(dtype)
    except TypeError:
        raise ContextError('not a numpy dtype: {}'.format(repr(dtype)))

    if dtype.kind == 'i' or dtype.kind == 'u':
        info = np.iinfo(dtype)
        return int_ctx(info.bits, signed=(dtype.kind == 'i'))
    elif dtype.kind == 'f':
        info = np.finfo(dtype)
        # nmant does not count the implicit bit
        return float_ctx(info.nexp, info.nexp + info.nmant + 1)
    elif dtype.kind == 'b':
        return int_ctx(1, signed=False)
    else:
        raise ContextError('unsupported numpy dtype {}'.format(str(dtype)))


def ctx_of(x):
    """The context implied by a value."""
    ctx = getattr(x, 'ctx', None)
    if isinstance(ctx, NumericCtx):
        return ctx
    elif isinstance(x, np.generic):
        return ctx_from_dtype(x.dtype)
    elif isinstance(x, (bool, int, gmp.mpz)):
        return default_int_ctx
    elif isinstance(x, (float, gmp.mpfr)):
        return default_float_ctx
    else:
        raise ContextError('cannot determine the representation of {}'.format(repr(x)))


def select_ctx(*ctxs):
    """Default result representation for an operation on values
    of the given representations.
    """
    ctxs = [ctx for ctx in ctxs if ctx is not None]
    if not ctxs:
        return default_int_ctx

    floats = [ctx for ctx in ctxs if ctx.kind == KIND.FLOAT]
    if floats:
        return max(floats, key=lambda ctx: (ctx.nbits, ctx.p))

    signed_bits = [ctx.nbits for ctx in ctxs if ctx.kind == KIND.SIGNED]
    unsigned_bits = [ctx.nbits for ctx in ctxs if ctx.kind == KIND.UNSIGNED]
    if not signed_bits:
        return int_ctx(max(unsigned_bits), signed=False)
    elif not unsigned_bits:
        return int_ctx(max(signed_bits))
    else:
        # enough signed bits to hold every value of the unsigned type
        return int_ctx(max(max(signed_bits), max(unsigned_bits) + 1))
