# aad_lift/ops/derivatives.py
"""
Derivative table: operation name -> output kind -> backward formula(s).

Unary entries hold one formula `f(out, parent)`; binary entries hold a pair
`(f1(out, x_node, y_raw), f2(out, x_raw, y_node))`. Every formula *adds*
`d(out)/d(arg) * out.dx` into the argument's accumulator through
`Node.accumulate`, so contributions from several consumers sum up.

Formulas that only need arithmetic on forward values work unchanged for
Python floats and numpy arrays and are shared by both kinds; the others are
written once with `math` (scalar) and once with numpy (tensor).
A tensor formula may write into a scalar-kind parent (scalar operand of a
tensor op); `ScalarKind.accumulate` sums the contribution in that case.
"""

import math

import numpy as np

SQRT_TWO_PI = math.sqrt(2.0 * math.pi)
TWO_OVER_SQRT_PI = 2.0 / math.sqrt(math.pi)


# ------------------------------- shared ------------------------------------ #
def _add_1(out, x, y):
    x.accumulate(out.dx)

def _add_2(out, x, y):
    y.accumulate(out.dx)

def _sub_2(out, x, y):
    y.accumulate(-out.dx)

def _mul_1(out, x, y):
    x.accumulate(y * out.dx)

def _mul_2(out, x, y):
    y.accumulate(x * out.dx)

def _div_1(out, x, y):
    x.accumulate(out.dx / y)

def _div_2(out, x, y):
    y.accumulate(-x * out.dx / (y.x * y.x))

def _atan2_1(out, a, b):
    # d atan2(a, b) / da = b / (a^2 + b^2)
    a.accumulate(b * out.dx / (a.x * a.x + b * b))

def _atan2_2(out, a, b):
    # d atan2(a, b) / db = -a / (a^2 + b^2)
    b.accumulate(-a * out.dx / (a * a + b.x * b.x))


def _non_differentiable(out, p):
    # floor / ceil / round: zero almost everywhere, contribute nothing
    pass

def _neg(out, p):
    p.accumulate(-out.dx)

def _sqrt(out, p):
    p.accumulate(out.dx / (2.0 * out.x))

def _exp(out, p):
    p.accumulate(out.x * out.dx)

def _log(out, p):
    p.accumulate(out.dx / p.x)

def _tan(out, p):
    # sec^2 = 1 + tan^2
    p.accumulate((1.0 + out.x * out.x) * out.dx)

def _atan(out, p):
    p.accumulate(out.dx / (1.0 + p.x * p.x))

def _tanh(out, p):
    p.accumulate((1.0 - out.x * out.x) * out.dx)

def _atanh(out, p):
    p.accumulate(out.dx / (1.0 - p.x * p.x))

def _sigmoid(out, p):
    p.accumulate(out.x * (1.0 - out.x) * out.dx)


# ------------------------------- scalar ------------------------------------ #
def _scalar_abs(out, p):
    sign = (p.x > 0) - (p.x < 0)
    p.accumulate(sign * out.dx)

def _scalar_sin(out, p):
    p.accumulate(math.cos(p.x) * out.dx)

def _scalar_cos(out, p):
    p.accumulate(-math.sin(p.x) * out.dx)

def _scalar_asin(out, p):
    p.accumulate(out.dx / math.sqrt(1.0 - p.x * p.x))

def _scalar_acos(out, p):
    p.accumulate(-out.dx / math.sqrt(1.0 - p.x * p.x))

def _scalar_sinh(out, p):
    p.accumulate(math.cosh(p.x) * out.dx)

def _scalar_cosh(out, p):
    p.accumulate(math.sinh(p.x) * out.dx)

def _scalar_asinh(out, p):
    p.accumulate(out.dx / math.sqrt(p.x * p.x + 1.0))

def _scalar_acosh(out, p):
    p.accumulate(out.dx / math.sqrt(p.x * p.x - 1.0))

def _scalar_erf(out, p):
    p.accumulate(TWO_OVER_SQRT_PI * math.exp(-p.x * p.x) * out.dx)

def _scalar_norm_cdf(out, p):
    p.accumulate(math.exp(-0.5 * p.x * p.x) / SQRT_TWO_PI * out.dx)


def _scalar_pow_base_partial(x, y):
    """d(x^y)/dx = y * x^(y-1), with the x == 0 singularities spelled out."""
    if y == 0:
        return 0.0
    if x == 0 and y < 1:
        return math.copysign(math.inf, y)
    return y * math.pow(x, y - 1.0)

def _scalar_pow_1(out, x, y):
    x.accumulate(_scalar_pow_base_partial(x.x, y) * out.dx)

def _scalar_pow_2(out, x, y):
    # d(x^y)/dy = x^y * log(x); undefined for x <= 0, contribute nothing there
    if x > 0:
        y.accumulate(out.x * math.log(x) * out.dx)

def _scalar_min_1(out, x, y):
    if x.x <= y:
        x.accumulate(out.dx)

def _scalar_min_2(out, x, y):
    if y.x < x:
        y.accumulate(out.dx)

def _scalar_max_1(out, x, y):
    if x.x >= y:
        x.accumulate(out.dx)

def _scalar_max_2(out, x, y):
    if y.x > x:
        y.accumulate(out.dx)


# ------------------------------- tensor ------------------------------------ #
def _tensor_abs(out, p):
    p.accumulate(np.sign(p.x) * out.dx)

def _tensor_sin(out, p):
    p.accumulate(np.cos(p.x) * out.dx)

def _tensor_cos(out, p):
    p.accumulate(-np.sin(p.x) * out.dx)

def _tensor_asin(out, p):
    p.accumulate(out.dx / np.sqrt(1.0 - p.x * p.x))

def _tensor_acos(out, p):
    p.accumulate(-out.dx / np.sqrt(1.0 - p.x * p.x))

def _tensor_sinh(out, p):
    p.accumulate(np.cosh(p.x) * out.dx)

def _tensor_cosh(out, p):
    p.accumulate(np.sinh(p.x) * out.dx)

def _tensor_asinh(out, p):
    p.accumulate(out.dx / np.sqrt(p.x * p.x + 1.0))

def _tensor_acosh(out, p):
    p.accumulate(out.dx / np.sqrt(p.x * p.x - 1.0))

def _tensor_erf(out, p):
    p.accumulate(TWO_OVER_SQRT_PI * np.exp(-p.x * p.x) * out.dx)

def _tensor_norm_cdf(out, p):
    p.accumulate(np.exp(-0.5 * p.x * p.x) / SQRT_TWO_PI * out.dx)


def _tensor_pow_1(out, x, y):
    with np.errstate(divide='ignore', invalid='ignore'):
        partial = np.where(np.asarray(y) == 0, 0.0, y * np.power(x.x, np.subtract(y, 1.0)))
    x.accumulate(partial * out.dx)

def _tensor_pow_2(out, x, y):
    x = np.asarray(x, dtype=float)
    positive = x > 0
    log_x = np.log(np.where(positive, x, 1.0))
    y.accumulate(np.where(positive, out.x * log_x, 0.0) * out.dx)

def _tensor_min_1(out, x, y):
    x.accumulate(np.where(x.x <= y, out.dx, 0.0))

def _tensor_min_2(out, x, y):
    y.accumulate(np.where(y.x < x, out.dx, 0.0))

def _tensor_max_1(out, x, y):
    x.accumulate(np.where(x.x >= y, out.dx, 0.0))

def _tensor_max_2(out, x, y):
    y.accumulate(np.where(y.x > x, out.dx, 0.0))


DERIVATIVES = {
    # Operators
    'add':     {'scalar': (_add_1, _add_2),  'tensor': (_add_1, _add_2)},
    'sub':     {'scalar': (_add_1, _sub_2),  'tensor': (_add_1, _sub_2)},
    'mul':     {'scalar': (_mul_1, _mul_2),  'tensor': (_mul_1, _mul_2)},
    'div':     {'scalar': (_div_1, _div_2),  'tensor': (_div_1, _div_2)},
    # Unary functions
    'neg':     {'scalar': _neg,                'tensor': _neg},
    'floor':   {'scalar': _non_differentiable, 'tensor': _non_differentiable},
    'ceil':    {'scalar': _non_differentiable, 'tensor': _non_differentiable},
    'round':   {'scalar': _non_differentiable, 'tensor': _non_differentiable},
    'sqrt':    {'scalar': _sqrt,               'tensor': _sqrt},
    'exp':     {'scalar': _exp,                'tensor': _exp},
    'log':     {'scalar': _log,                'tensor': _log},
    'abs':     {'scalar': _scalar_abs,         'tensor': _tensor_abs},
    'sin':     {'scalar': _scalar_sin,         'tensor': _tensor_sin},
    'cos':     {'scalar': _scalar_cos,         'tensor': _tensor_cos},
    'tan':     {'scalar': _tan,                'tensor': _tan},
    'asin':    {'scalar': _scalar_asin,        'tensor': _tensor_asin},
    'acos':    {'scalar': _scalar_acos,        'tensor': _tensor_acos},
    'atan':    {'scalar': _atan,               'tensor': _atan},
    'sinh':    {'scalar': _scalar_sinh,        'tensor': _tensor_sinh},
    'cosh':    {'scalar': _scalar_cosh,        'tensor': _tensor_cosh},
    'tanh':    {'scalar': _tanh,               'tensor': _tanh},
    'asinh':   {'scalar': _scalar_asinh,       'tensor': _tensor_asinh},
    'acosh':   {'scalar': _scalar_acosh,       'tensor': _tensor_acosh},
    'atanh':   {'scalar': _atanh,              'tensor': _atanh},
    'sigmoid': {'scalar': _sigmoid,            'tensor': _sigmoid},
    'erf':     {'scalar': _scalar_erf,         'tensor': _tensor_erf},
    'norm_cdf': {'scalar': _scalar_norm_cdf,   'tensor': _tensor_norm_cdf},
    # Binary functions
    'pow':     {'scalar': (_scalar_pow_1, _scalar_pow_2), 'tensor': (_tensor_pow_1, _tensor_pow_2)},
    'min':     {'scalar': (_scalar_min_1, _scalar_min_2), 'tensor': (_tensor_min_1, _tensor_min_2)},
    'max':     {'scalar': (_scalar_max_1, _scalar_max_2), 'tensor': (_tensor_max_1, _tensor_max_2)},
    'atan2':   {'scalar': (_atan2_1, _atan2_2),           'tensor': (_atan2_1, _atan2_2)},
}


def backward_for(op_name: str, kind_name: str):
    """Formula(s) registered for `op_name` under 'scalar' or 'tensor'."""
    return DERIVATIVES[op_name][kind_name]
