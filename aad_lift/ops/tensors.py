# aad_lift/ops/tensors.py
"""
Scalar/tensor split and merge operations, plus the variadic scalar sum.

Tensors are addressed by flat (C-order) index, so a tensor of any rank splits
into scalars / 1-D ranges and merges back into 1-D tensors.
"""

from typing import List, Sequence

import numpy as np

from ..config import config
from ..core.errors import ShapeError
from ..core.func import nary_get_parents, new_function, unpack_varargs
from ..core.kind import TENSOR
from ..core.node import is_node
from ..core.seeds import value


def _require_tensor_node(fname, t):
    if is_node(t) and t.kind is not TENSOR:
        raise ShapeError(f"{fname} expects a tensor, got a lifted scalar")


# Select one entry out of a tensor (by flat indexing)
def _entry_forward(t, i):
    _require_tensor_node('tensor_entry', t)
    flat = np.ravel(value(t))
    if not -flat.size <= i < flat.size:
        raise ShapeError(f"tensor_entry: index {i} out of range for {flat.size} elements")
    return float(flat[i])


def _entry_backward(out, t, i):
    if is_node(t):
        t.dx.flat[i] += out.dx


def _entry_parents(t, i):
    return [t] if is_node(t) else []


tensor_entry = new_function(
    output_kind='scalar',
    name='tensor_entry',
    forward=_entry_forward,
    backward=_entry_backward,
    get_parents=_entry_parents,
)


def tensor_to_scalars(t) -> List:
    """Split a tensor into a list of its scalar entries."""
    n = np.size(value(t))
    return [tensor_entry(t, i) for i in range(n)]


# Select a contiguous run of flat entries as a new 1-D tensor
def _range_forward(t, start, end):
    _require_tensor_node('tensor.range', t)
    flat = np.ravel(value(t))
    if not 0 <= start <= end <= flat.size:
        raise ShapeError(
            f"tensor.range: [{start}, {end}) is not a valid range for {flat.size} elements"
        )
    return np.array(flat[start:end], dtype=config.dtype)


def _range_backward(out, t, start, end):
    if is_node(t):
        t.dx.flat[start:end] += out.dx


def _range_parents(t, start, end):
    return [t] if is_node(t) else []


tensor_range = new_function(
    output_kind='tensor',
    name='tensor.range',
    forward=_range_forward,
    backward=_range_backward,
    get_parents=_range_parents,
)


def tensor_split(t, lengths: Sequence[int]) -> List:
    """Split a tensor into consecutive 1-D tensors of the given lengths."""
    total = np.size(value(t))
    if sum(lengths) > total:
        raise ShapeError(
            f"tensor.split: lengths {list(lengths)} need {sum(lengths)} elements, "
            f"tensor has {total}"
        )
    pieces = []
    start = 0
    for length in lengths:
        pieces.append(tensor_range(t, start, start + length))
        start += length
    return pieces


# Concatenate multiple scalars into a tensor
# Can either take a list of scalars or a variable number of arguments
def _scalars_forward(*args):
    args = unpack_varargs(args)
    return np.array([float(value(a)) for a in args], dtype=config.dtype)


def _scalars_backward(out, *args):
    args = unpack_varargs(args)
    for i, arg in enumerate(args):
        if is_node(arg):
            arg.accumulate(out.dx[i])


scalars_to_tensor = new_function(
    output_kind='tensor',
    name='scalars_to_tensor',
    forward=_scalars_forward,
    backward=_scalars_backward,
    get_parents=nary_get_parents,
)


# Concatenate multiple tensors (flattened) into one 1-D tensor
# Can either take a list of tensors or a variable number of arguments
def _concat_forward(*args):
    args = unpack_varargs(args)
    parts = [np.ravel(value(a)) for a in args]
    if not parts:
        return np.zeros(0, dtype=config.dtype)
    return np.concatenate(parts).astype(config.dtype, copy=False)


def _concat_backward(out, *args):
    args = unpack_varargs(args)
    offset = 0
    for arg in args:
        size = np.size(value(arg))
        if is_node(arg):
            arg.accumulate(out.dx[offset:offset + size].reshape(arg.shape))
        offset += size


tensor_concat = new_function(
    output_kind='tensor',
    name='tensor.concat',
    forward=_concat_forward,
    backward=_concat_backward,
    get_parents=nary_get_parents,
)


# Sum an arbitrary number of scalars
# Can either take a list of scalars or a variable number of arguments
def _sum_forward(*args):
    total = 0.0
    for arg in unpack_varargs(args):
        total += value(arg)
    return total


def _sum_backward(out, *args):
    for arg in unpack_varargs(args):
        if is_node(arg):
            arg.accumulate(out.dx)


scalar_sum = new_function(
    output_kind='scalar',
    name='scalar.sum',
    forward=_sum_forward,
    backward=_sum_backward,
    get_parents=nary_get_parents,
)
