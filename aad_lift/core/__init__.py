# aad_lift/core/__init__.py

"""
Core public API for the aad_lift package.

Exports:
    lift / is_lifted / value / derivative : the lifted-value API
    Node and its variants                 : graph nodes (leaf, unary, binary, n-ary)
    Tape, global_tape, use_tape           : differentiation sessions
    new_unary_function, new_binary_function, new_function : the function factory
    reverse, zero_adjoints                : the backward pass
    grad, grads, grads_list               : one-call gradient helpers
"""

from .errors import (
    ADError,
    BackwardInFlightError,
    ConfigurationError,
    NotLiftedError,
    ShapeError,
)
from .kind import Kind, SCALAR, TENSOR, get_kind, kind_of
from .node import Node, LeafNode, UnaryNode, BinaryNode, NaryNode
from .tape import Tape, global_tape, use_tape
from .func import (
    new_unary_function,
    new_binary_function,
    new_function,
    nary_get_parents,
    lift_unary_function,
    lift_binary_function,
)
from .engine import reverse, zero_adjoints
from .seeds import lift, is_lifted, value, derivative, grad, grads, grads_list
from .graph_utils import graph_summary

__all__ = [
    "ADError", "BackwardInFlightError", "ConfigurationError", "NotLiftedError", "ShapeError",
    "Kind", "SCALAR", "TENSOR", "get_kind", "kind_of",
    "Node", "LeafNode", "UnaryNode", "BinaryNode", "NaryNode",
    "Tape", "global_tape", "use_tape",
    "new_unary_function", "new_binary_function", "new_function",
    "nary_get_parents", "lift_unary_function", "lift_binary_function",
    "reverse", "zero_adjoints",
    "lift", "is_lifted", "value", "derivative", "grad", "grads", "grads_list",
    "graph_summary",
]
