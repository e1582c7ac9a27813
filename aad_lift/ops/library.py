# aad_lift/ops/library.py
"""
Built-in function library.

`scalar` and `tensor` are namespaces of lifted primitives, one per output
kind, e.g. `scalar.add`, `tensor.exp`. Primitive names ("scalar.add",
"tensor.exp", ...) are a fixed vocabulary used for diagnostics.
"""

import math
import operator
from types import SimpleNamespace

import numpy as np
from scipy import special

from ..core.errors import ShapeError
from ..core.func import (
    lift_binary_function,
    new_binary_function,
    new_unary_function,
)
from ..core.kind import get_kind
from .derivatives import backward_for
from .linalg import mvmuladd
from .tensors import (
    scalar_sum,
    scalars_to_tensor,
    tensor_concat,
    tensor_entry,
    tensor_range,
    tensor_split,
    tensor_to_scalars,
)


def _scalar_sigmoid(x):
    # Branch on sign so math.exp never overflows
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _tensor_sigmoid(x):
    x = np.asarray(x, dtype=float)
    return np.exp(-np.logaddexp(0.0, -x))


def _scalar_norm_cdf(x):
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))


def _elementwise(name, ufunc):
    """Tensor binary forward: equal shapes, or one side a scalar. No other broadcasting."""
    def forward(x, y):
        x_shape, y_shape = np.shape(x), np.shape(y)
        if x_shape and y_shape and x_shape != y_shape:
            raise ShapeError(
                f"tensor.{name}: operand shapes {x_shape} and {y_shape} differ"
            )
        return ufunc(x, y)
    forward.__name__ = f"tensor_{name}"
    return forward


# Forward formulas: name -> (scalar formula, tensor formula)
BINARY_FORWARDS = {
    'add':   (operator.add, _elementwise('add', np.add)),
    'sub':   (operator.sub, _elementwise('sub', np.subtract)),
    'mul':   (operator.mul, _elementwise('mul', np.multiply)),
    'div':   (operator.truediv, _elementwise('div', np.divide)),
    'pow':   (math.pow, _elementwise('pow', np.power)),
    'min':   (min, _elementwise('min', np.minimum)),
    'max':   (max, _elementwise('max', np.maximum)),
    'atan2': (math.atan2, _elementwise('atan2', np.arctan2)),
}

UNARY_FORWARDS = {
    'neg':     (operator.neg, np.negative),
    'floor':   (lambda x: float(math.floor(x)), np.floor),
    'ceil':    (lambda x: float(math.ceil(x)), np.ceil),
    # Round half up (2.5 -> 3, -2.5 -> -2) for both kinds
    'round':   (lambda x: float(math.floor(x + 0.5)), lambda x: np.floor(np.add(x, 0.5))),
    'sqrt':    (math.sqrt, np.sqrt),
    'exp':     (math.exp, np.exp),
    'log':     (math.log, np.log),
    'abs':     (abs, np.abs),
    'sin':     (math.sin, np.sin),
    'cos':     (math.cos, np.cos),
    'tan':     (math.tan, np.tan),
    'asin':    (math.asin, np.arcsin),
    'acos':    (math.acos, np.arccos),
    'atan':    (math.atan, np.arctan),
    'sinh':    (math.sinh, np.sinh),
    'cosh':    (math.cosh, np.cosh),
    'tanh':    (math.tanh, np.tanh),
    'asinh':   (math.asinh, np.arcsinh),
    'acosh':   (math.acosh, np.arccosh),
    'atanh':   (math.atanh, np.arctanh),
    'sigmoid': (_scalar_sigmoid, _tensor_sigmoid),
    'erf':     (math.erf, special.erf),
    'norm_cdf': (_scalar_norm_cdf, special.ndtr),
}

OPERATORS = ('add', 'sub', 'mul', 'div')
UNARY_FUNCTIONS = tuple(UNARY_FORWARDS)
BINARY_FUNCTIONS = ('pow', 'min', 'max', 'atan2')


def make_functions(output_kind):
    """Lifted operators and math functions for one output kind, keyed by short name."""
    kind = get_kind(output_kind)
    slot = 0 if kind.name == 'scalar' else 1
    name_prefix = kind.name + '.'

    fns = {}
    for op in OPERATORS + BINARY_FUNCTIONS:
        backward1, backward2 = backward_for(op, kind.name)
        fns[op] = new_binary_function(
            output_kind=kind,
            name=name_prefix + op,
            forward=BINARY_FORWARDS[op][slot],
            backward1=backward1,
            backward2=backward2,
        )
    for fnname in UNARY_FUNCTIONS:
        fns[fnname] = new_unary_function(
            output_kind=kind,
            name=name_prefix + fnname,
            forward=UNARY_FORWARDS[fnname][slot],
            backward=backward_for(fnname, kind.name),
        )
    return fns


# Scalar comparators: accept lifted values, return plain booleans
COMPARATORS = {
    'eq': operator.eq,
    'neq': operator.ne,
    'gt': operator.gt,
    'lt': operator.lt,
    'geq': operator.ge,
    'leq': operator.le,
}


scalar = SimpleNamespace(
    **make_functions('scalar'),
    **{name: lift_binary_function(f) for name, f in COMPARATORS.items()},
    sum=scalar_sum,
)

tensor = SimpleNamespace(
    **make_functions('tensor'),
    range=tensor_range,
    split=tensor_split,
    concat=tensor_concat,
    mvmuladd=mvmuladd,
)

__all__ = [
    'scalar', 'tensor', 'make_functions',
    'tensor_entry', 'tensor_to_scalars', 'scalars_to_tensor',
]
