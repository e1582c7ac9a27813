# aad_lift/core/seeds.py

#-----------------------------------------------------------------------------
# Lift values into the graph, read them back out, and "plant" a seed
# (dy/dy = 1) at a scalar output to let gradients grow backwards.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import numpy as np

from .errors import NotLiftedError, ShapeError
from .kind import kind_of
from .node import LeafNode, Node, is_node
from .tape import use_tape
from .engine import reverse


def lift(x: Any, name: Optional[str] = None) -> Node:
    """
    Wrap a raw scalar or tensor so it participates in differentiation.
    Identity on values that are already lifted.
    """
    if is_node(x):
        return x
    kind = kind_of(x)
    if kind is None:
        raise TypeError(
            f"lift() only accepts numeric types (int, float, list, tuple, ndarray), "
            f"but got {type(x)}"
        )
    return LeafNode(x, kind, name=name)


def is_lifted(x: Any) -> bool:
    return is_node(x)


def value(x: Any) -> Any:
    """Return the forward value of a Node; pass through raw values unchanged."""
    return x.x if is_node(x) else x


def derivative(x: Node) -> Any:
    """Return the gradient accumulator of a Node."""
    if not is_node(x):
        raise NotLiftedError(
            f"derivative() needs a lifted value, got raw {type(x).__name__}"
        )
    return x.dx


def _zero_like(x: Node) -> Any:
    return x.kind.zeros(x.x)


def _check_scalar_output(y: Any, fname: str) -> None:
    if np.ndim(value(y)) != 0:
        raise ShapeError(f"{fname} expects scalar output, got shape {np.shape(value(y))}")


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Node], Node],
         x0: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Gradient of a scalar-output function y=f(x) at x0 (single input).
    Runs one reverse pass within a fresh, isolated tape.
    """
    with use_tape():
        x = lift(x0, name="x")
        y = f(x)
        _check_scalar_output(y, "grad(f, x0)")
        if not is_node(y):
            # f ignored its input: the gradient is identically zero
            return _zero_like(x)
        reverse(y)
        return x.dx


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Node]], Node],
          inputs: Dict[str, Union[float, np.ndarray]]) -> Dict[str, Union[float, np.ndarray]]:
    """
    Gradient of a scalar-output function y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE reverse pass to obtain all dy/dvar simultaneously.

    Parameters
    ----------
    f       : function taking a dict {name: Node} and returning a scalar Node
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: numeric}  # gradients in the same key order as `inputs`
    """
    with use_tape():
        vars_ad: Dict[str, Node] = {k: lift(v, name=k) for k, v in inputs.items()}
        y = f(vars_ad)
        _check_scalar_output(y, "grads(f, inputs)")
        if not is_node(y):
            return {k: _zero_like(v) for k, v in vars_ad.items()}
        reverse(y)
        # A node reached by no path still holds its creation-time zero
        return {k: vars_ad[k].dx for k in inputs.keys()}


def grads_list(f: Callable[[List[Node]], Node],
               x0_list: Iterable[Union[float, np.ndarray]]) -> List[Union[float, np.ndarray]]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_tape():
        xs: List[Node] = [lift(v, name=f"x{i}") for i, v in enumerate(x0_list)]
        y = f(xs)
        _check_scalar_output(y, "grads_list(f, x0_list)")
        if not is_node(y):
            return [_zero_like(x) for x in xs]
        reverse(y)
        return [x.dx for x in xs]
