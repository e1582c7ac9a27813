# aad_lift/core/node.py
from __future__ import annotations

import itertools
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from . import tape as tape_mod  # Use module access for use_tape() compatibility
from .kind import Kind

# Process-wide creation counter: creation order is a topological order of the graph
_creation_index = itertools.count()


class Node:
    """
    A lifted value: one primitive forward value plus its gradient accumulator
    and provenance.

    Attributes
    ----------
    x : float | np.ndarray
        Forward (primal) value. Read-only once the node exists.
    dx : float | np.ndarray
        Gradient accumulator; same shape as `x`, zero at creation.
    kind : Kind
        Scalar or tensor; decides how `dx` is zeroed and accumulated.
    op_name : str
        Name of the producing operation ("lift" for leaves).
    parents : tuple[Node, ...]
        The lifted inputs of the producing operation, in argument order.
        Raw (constant) inputs are never parents.
    fn : Primitive | None
        The primitive that produced the node; `fn.backward_node(self)` runs the
        matching derivative formula(s).
    args : tuple
        Captured call arguments (mixed raw values and Nodes).
    pattern : str | None
        Dispatch tag picked by the primitive at call time ("11", "10", "01"
        for binary primitives).
    index : int
        Creation index, strictly larger than every parent's index.
    name : str | None
        Optional debug name.
    """

    arity: Optional[int] = None

    # Let `ndarray <op> node` defer to the node's reflected operators
    __array_ufunc__ = None

    def __init__(self, x: Any, kind: Kind, op_name: str, parents: Sequence["Node"] = (),
                 *, fn=None, args: Tuple = (), pattern: Optional[str] = None,
                 name: Optional[str] = None):
        self.kind = kind
        self.x = kind.convert(x)
        if isinstance(self.x, np.ndarray):
            self.x.flags.writeable = False
        self.dx = kind.zeros(self.x)
        self.op_name = op_name
        self.parents = tuple(parents)
        self.fn = fn
        self.args = args
        self.pattern = pattern
        self.name = name
        self.index = next(_creation_index)
        tape_mod.global_tape.push_node(self)

    def backward(self) -> None:
        """Add this node's contribution (`self.dx` times local partials) into its parents' `dx`."""
        if self.fn is not None:
            self.fn.backward_node(self)

    def reset(self) -> None:
        self.dx = self.kind.zeros(self.x)

    def accumulate(self, g) -> None:
        self.dx = self.kind.accumulate(self.dx, g)

    @property
    def shape(self):
        return np.shape(self.x)

    def __repr__(self):
        label = f", name={self.name!r}" if self.name else ""
        return f"{type(self).__name__}({self.op_name}, x={self.x!r}, dx={self.dx!r}{label})"

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)


class LeafNode(Node):
    """A lifted input: no parents, no backward formula."""
    arity = 0

    def __init__(self, x: Any, kind: Kind, name: Optional[str] = None):
        super().__init__(x, kind, "lift", (), name=name)


class UnaryNode(Node):
    arity = 1

    def __init__(self, x, kind, op_name, parent: Node, **kwargs):
        super().__init__(x, kind, op_name, (parent,), **kwargs)

    @property
    def parent(self) -> Node:
        return self.parents[0]


class BinaryNode(Node):
    arity = 2

    def __init__(self, x, kind, op_name, parent1: Node, parent2: Node, **kwargs):
        super().__init__(x, kind, op_name, (parent1, parent2), **kwargs)

    @property
    def parent1(self) -> Node:
        return self.parents[0]

    @property
    def parent2(self) -> Node:
        return self.parents[1]


class NaryNode(Node):
    """Variable parent count; chosen only when more than two inputs are lifted."""

    def __init__(self, x, kind, op_name, parents: Sequence[Node], **kwargs):
        super().__init__(x, kind, op_name, parents, **kwargs)

    @property
    def arity(self) -> int:
        return len(self.parents)


def is_node(x: Any) -> bool:
    return isinstance(x, Node)
