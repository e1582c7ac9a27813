# aad_lift/ops/arithmetic.py
"""
Kind-dispatching arithmetic: pick the `tensor` library when any operand is
tensor-kind (ndarray, list or tuple, lifted or raw), the `scalar` library
otherwise. These back the Python operators on Node.
"""
import numpy as np

from ..config import config
from ..core.kind import TENSOR, kind_of
from ..core.seeds import value
from .library import scalar, tensor


def _as_operand(a):
    # Raw sequences become arrays, the same conversion lift() applies
    if isinstance(a, (list, tuple)):
        return np.array(a, dtype=config.dtype)
    return a


def _library(*args):
    """`tensor` if any operand is (or wraps) a tensor-kind value, else `scalar`."""
    if any(kind_of(value(a)) is TENSOR for a in args):
        return tensor
    return scalar


def _call(name, *args):
    args = tuple(_as_operand(a) for a in args)
    return getattr(_library(*args), name)(*args)


def add(x, y): return _call('add', x, y)
def sub(x, y): return _call('sub', x, y)
def mul(x, y): return _call('mul', x, y)
def div(x, y): return _call('div', x, y)
def pow(x, y): return _call('pow', x, y)
def neg(x):    return _call('neg', x)

def minimum(x, y): return _call('min', x, y)
def maximum(x, y): return _call('max', x, y)
def atan2(x, y):   return _call('atan2', x, y)
