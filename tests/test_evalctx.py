"""
Tests for numeric representations.
"""

import numpy as np
import pytest

from safebounds.arithmetic import evalctx
from safebounds.numeric.ops import KIND
from safebounds.numeric.utils import ContextError


class TestIntCtx:

    def test_signed_range(self):
        ctx = evalctx.int_ctx(8)
        assert ctx.kind == KIND.SIGNED
        assert ctx.min_value == -128
        assert ctx.max_value == 127
        assert str(ctx) == 'int8'

    def test_unsigned_range(self):
        ctx = evalctx.int_ctx(16, signed=False)
        assert ctx.kind == KIND.UNSIGNED
        assert ctx.min_value == 0
        assert ctx.max_value == 65535
        assert str(ctx) == 'uint16'

    def test_odd_width(self):
        ctx = evalctx.int_ctx(12)
        assert ctx.max_value == 2047

    def test_cached(self):
        assert evalctx.int_ctx(32) is evalctx.int32
        assert evalctx.int_ctx(8, signed=False) is evalctx.uint8
        assert evalctx.IntCtx(8) == evalctx.int8
        assert hash(evalctx.IntCtx(8)) == hash(evalctx.int8)
        assert evalctx.int8 != evalctx.uint8

    def test_invalid_width(self):
        with pytest.raises(ContextError):
            evalctx.int_ctx(0)


class TestFloatCtx:

    def test_binary64(self):
        ctx = evalctx.binary64
        assert ctx.p == 53
        assert ctx.emax == 1023
        assert ctx.emin == -1022
        assert float(ctx.max_value) == np.finfo(np.float64).max
        assert float(ctx.min_value) == -np.finfo(np.float64).max
        assert float(ctx.smallest_normal) == np.finfo(np.float64).tiny

    def test_binary16(self):
        ctx = evalctx.binary16
        assert ctx.max_value == 65504
        assert str(ctx) == 'float(5,16)'

    def test_invalid_format(self):
        with pytest.raises(ContextError):
            evalctx.float_ctx(8, 9)


@pytest.mark.parametrize('name, expected', [
    ('int8', evalctx.int8),
    ('INT8_T', evalctx.int8),
    ('short', evalctx.int16),
    ('int', evalctx.int32),
    ('unsigned   char', evalctx.uint8),
    ('uint64_t', evalctx.uint64),
    ('int24', evalctx.int_ctx(24)),
    ('uint7', evalctx.int_ctx(7, signed=False)),
    ('float', evalctx.binary32),
    ('double', evalctx.binary64),
    ('half', evalctx.binary16),
    ('float(8, 32)', evalctx.binary32),
])
def test_lookup(name, expected):
    assert evalctx.lookup_ctx(name) == expected


def test_lookup_unknown():
    with pytest.raises(ContextError):
        evalctx.lookup_ctx('decimal32')


@pytest.mark.parametrize('dtype, expected', [
    (np.int8, evalctx.int8),
    (np.int64, evalctx.int64),
    (np.uint16, evalctx.uint16),
    (np.float16, evalctx.binary16),
    (np.float32, evalctx.binary32),
    ('float64', evalctx.binary64),
])
def test_ctx_from_dtype(dtype, expected):
    assert evalctx.ctx_from_dtype(dtype) == expected


def test_ctx_from_dtype_rejects_other_kinds():
    with pytest.raises(ContextError):
        evalctx.ctx_from_dtype(np.complex128)
    with pytest.raises(ContextError):
        evalctx.ctx_from_dtype('not a dtype')


def test_ctx_of():
    assert evalctx.ctx_of(3) == evalctx.int64
    assert evalctx.ctx_of(1.5) == evalctx.binary64
    assert evalctx.ctx_of(np.int8(3)) == evalctx.int8
    assert evalctx.ctx_of(np.float32(1.5)) == evalctx.binary32
    with pytest.raises(ContextError):
        evalctx.ctx_of('3')


class TestSelectCtx:

    def test_wider_integer(self):
        assert evalctx.select_ctx(evalctx.int8, evalctx.int32) == evalctx.int32
        assert evalctx.select_ctx(evalctx.uint8, evalctx.uint16) == evalctx.uint16

    def test_mixed_signedness(self):
        assert evalctx.select_ctx(evalctx.int32, evalctx.uint8) == evalctx.int32
        assert evalctx.select_ctx(evalctx.int8, evalctx.uint8) == evalctx.int_ctx(9)

    def test_float_wins(self):
        assert evalctx.select_ctx(evalctx.int64, evalctx.binary32) == evalctx.binary32
        assert evalctx.select_ctx(evalctx.binary16, evalctx.binary64) == evalctx.binary64

    def test_default(self):
        assert evalctx.select_ctx() == evalctx.int64
