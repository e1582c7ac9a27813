# aad_lift/core/func.py
"""
Function factory: turn a forward formula plus partial-derivative formula(s)
into a graph-aware primitive.

Every primitive
  - returns the plain forward result when none of its arguments is lifted
    (no node, nothing recorded), and
  - otherwise computes the forward result eagerly, builds the node variant
    matching the lifted arguments actually present, and keeps the original
    (mixed raw / Node) arguments on the node so the backward formulas can see
    every input's forward value.

Backward formulas receive the output node first (its `dx` is final when they
run) and must *add* into the parents' `dx` via `parent.accumulate(...)` or an
in-place update; never overwrite.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, List, Sequence

from .kind import get_kind
from .node import BinaryNode, NaryNode, Node, UnaryNode, is_node

logger = logging.getLogger(__name__)


def unpack_varargs(args: Sequence[Any]) -> Sequence[Any]:
    """Functions taking 'a list or a variable number of args' see one flat sequence."""
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        return args[0]
    return args


def nary_get_parents(*args) -> List[Node]:
    """
    'get_parents' implementation for functions which take a list or a variable
    number of args, any of which might be Nodes. Keeps argument order.
    """
    return [a for a in unpack_varargs(args) if is_node(a)]


class Primitive:
    """Common part of the three primitive shapes: output kind and stable name."""

    def __init__(self, output_kind: Any, name: str):
        self.kind = get_kind(output_kind)
        self.name = name

    def backward_node(self, node: Node) -> None:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, kind={self.kind.name!r})"


class UnaryPrimitive(Primitive):

    def __init__(self, output_kind, name, forward: Callable, backward: Callable):
        super().__init__(output_kind, name)
        self.forward = forward
        self.backward = backward

    def __call__(self, x):
        if is_node(x):
            return UnaryNode(self.forward(x.x), self.kind, self.name, x, fn=self, args=(x,))
        return self.forward(x)

    def backward_node(self, node):
        self.backward(node, node.parent)


class BinaryPrimitive(Primitive):
    """
    Three node shapes: both inputs lifted ("11"), only the first ("10"), only
    the second ("01"). Each backward formula gets the *raw* value of the other
    side, so a one-sided call is recorded as a unary node with the constant
    side captured in `args`.
    """

    def __init__(self, output_kind, name, forward: Callable,
                 backward1: Callable, backward2: Callable):
        super().__init__(output_kind, name)
        self.forward = forward
        self.backward1 = backward1
        self.backward2 = backward2

    def __call__(self, x, y):
        x_is_node = is_node(x)
        y_is_node = is_node(y)
        if x_is_node and y_is_node:
            return BinaryNode(self.forward(x.x, y.x), self.kind, self.name, x, y,
                              fn=self, args=(x, y), pattern="11")
        elif x_is_node:
            return UnaryNode(self.forward(x.x, y), self.kind, self.name, x,
                             fn=self, args=(x, y), pattern="10")
        elif y_is_node:
            return UnaryNode(self.forward(x, y.x), self.kind, self.name, y,
                             fn=self, args=(x, y), pattern="01")
        else:
            return self.forward(x, y)

    def backward_node(self, node):
        x, y = node.args
        if node.pattern == "11":
            self.backward1(node, x, y.x)
            self.backward2(node, x.x, y)
        elif node.pattern == "10":
            self.backward1(node, x, y)
        else:
            self.backward2(node, x, y)


class NaryPrimitive(Primitive):
    """
    Arbitrary-arity primitive. `forward` and `backward` receive the call's
    arguments unchanged (mixed raw values and Nodes) and unwrap them
    themselves; `get_parents` picks the lifted ones.

    The node shape is chosen from how many parents the call actually has, so a
    vararg function called with exactly one or two lifted args builds a unary
    or binary node.
    """

    def __init__(self, output_kind, name, forward: Callable, backward: Callable,
                 get_parents: Callable = nary_get_parents):
        super().__init__(output_kind, name)
        self.forward = forward
        self.backward = backward
        self.get_parents = get_parents

    def __call__(self, *args):
        output = self.forward(*args)
        parents = self.get_parents(*args)
        n = len(parents)
        if n == 0:
            return output
        # Expect that n > 2 is the common case (else a unary/binary primitive fits)
        elif n > 2:
            return NaryNode(output, self.kind, self.name, parents, fn=self, args=args)
        elif n == 2:
            return BinaryNode(output, self.kind, self.name, parents[0], parents[1],
                              fn=self, args=args)
        else:
            return UnaryNode(output, self.kind, self.name, parents[0], fn=self, args=args)

    def backward_node(self, node):
        self.backward(node, *node.args)


def new_unary_function(output_kind, name: str, forward: Callable, backward: Callable) -> UnaryPrimitive:
    """
    Create a new unary AD primitive.

    Parameters
    ----------
    output_kind : 'scalar' | 'tensor'
    name        : stable operation name, e.g. "scalar.exp"
    forward     : raw x -> raw output
    backward    : (out_node, parent_node) -> None, adds d(out)/d(parent) * out.dx into parent.dx
    """
    fn = UnaryPrimitive(output_kind, name, forward, backward)
    logger.debug("Registered unary primitive %s (%s)", name, fn.kind.name)
    return fn


def new_binary_function(output_kind, name: str, forward: Callable,
                        backward1: Callable, backward2: Callable) -> BinaryPrimitive:
    """
    Create a new binary AD primitive.

    backward1 : (out_node, x_node, y_raw) -> None
    backward2 : (out_node, x_raw, y_node) -> None
    """
    fn = BinaryPrimitive(output_kind, name, forward, backward1, backward2)
    logger.debug("Registered binary primitive %s (%s)", name, fn.kind.name)
    return fn


def new_function(output_kind, name: str, forward: Callable, backward: Callable,
                 get_parents: Callable = nary_get_parents) -> NaryPrimitive:
    """
    Create a new arbitrary-arity AD primitive.

    forward     : (*args) -> raw output; args may contain Nodes
    backward    : (out_node, *args) -> None; derivatives for every Node in args
    get_parents : (*args) -> list of the Node args, in argument order
    """
    fn = NaryPrimitive(output_kind, name, forward, backward, get_parents)
    logger.debug("Registered n-ary primitive %s (%s)", name, fn.kind.name)
    return fn


# Lifting functions which take numbers but don't return differentiable
# values (e.g. comparisons) to also work on Nodes.
def lift_unary_function(f: Callable) -> Callable:
    @wraps(f)
    def lifted(x):
        return f(x.x if is_node(x) else x)
    return lifted


def lift_binary_function(f: Callable) -> Callable:
    @wraps(f)
    def lifted(x, y):
        return f(x.x if is_node(x) else x, y.x if is_node(y) else y)
    return lifted
