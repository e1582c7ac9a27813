# aad_lift/ops/__init__.py

from .library import (
    scalar,
    tensor,
    make_functions,
    tensor_entry,
    tensor_to_scalars,
    scalars_to_tensor,
)
from .derivatives import DERIVATIVES

# Convenience re-exports so users can do: from aad_lift.ops import mul, exp, ...
from .arithmetic import add, sub, mul, div, neg, pow, minimum, maximum, atan2
from .transcendental import (
    floor, ceil, round, sqrt, exp, log, abs,
    sin, cos, tan, asin, acos, atan,
    sinh, cosh, tanh, asinh, acosh, atanh,
    sigmoid, erf, norm_cdf,
)

__all__ = [
    "scalar", "tensor", "make_functions", "DERIVATIVES",
    "tensor_entry", "tensor_to_scalars", "scalars_to_tensor",
    "add", "sub", "mul", "div", "neg", "pow", "minimum", "maximum", "atan2",
    "floor", "ceil", "round", "sqrt", "exp", "log", "abs",
    "sin", "cos", "tan", "asin", "acos", "atan",
    "sinh", "cosh", "tanh", "asinh", "acosh", "atanh",
    "sigmoid", "erf", "norm_cdf",
]
