# aad_lift/ops/linalg.py
import numpy as np

from ..config import config
from ..core.errors import ShapeError
from ..core.func import nary_get_parents, new_function
from ..core.node import is_node
from ..core.seeds import value


def _mvmuladd_forward(A, x, b):
    """y = A @ x + b, with A of shape (h, w), x of length w and b of length h."""
    A = np.asarray(value(A), dtype=config.dtype)
    x = np.asarray(value(x), dtype=config.dtype)
    b = np.asarray(value(b), dtype=config.dtype)
    if A.ndim != 2 or x.ndim != 1 or b.ndim != 1:
        raise ShapeError(
            f"mvmuladd: expected a matrix and two vectors, got shapes "
            f"{A.shape}, {x.shape}, {b.shape}"
        )
    h, w = A.shape
    if x.size != w:
        raise ShapeError(f"mvmuladd: input size is {x.size} but should be {w}")
    if b.size != h:
        raise ShapeError(f"mvmuladd: bias size is {b.size} but should be {h}")
    return A @ x + b


def _mvmuladd_backward(out, A, x, b):
    g = out.dx
    if is_node(A):
        A.accumulate(np.outer(g, value(x)))
    if is_node(x):
        x.accumulate(np.asarray(value(A)).T @ g)
    if is_node(b):
        b.accumulate(g)


mvmuladd = new_function(
    output_kind='tensor',
    name='tensor.mvmuladd',
    forward=_mvmuladd_forward,
    backward=_mvmuladd_backward,
    get_parents=nary_get_parents,
)
