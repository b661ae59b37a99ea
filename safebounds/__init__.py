from .numeric import utils, ops, tribool
from .arithmetic import evalctx, checked, interval

EXC = ops.EXC
Tribool = tribool.Tribool
indeterminate = tribool.indeterminate

IntCtx = evalctx.IntCtx
FloatCtx = evalctx.FloatCtx
int_ctx = evalctx.int_ctx
float_ctx = evalctx.float_ctx
lookup_ctx = evalctx.lookup_ctx

CheckedResult = checked.CheckedResult
Interval = interval.Interval
vmin = interval.vmin
vmax = interval.vmax
