# aad_lift/core/kind.py
from __future__ import annotations

import numbers
from typing import Any, Optional

import numpy as np

from ..config import config
from .errors import ConfigurationError, ShapeError


class Kind:
    """
    Base-kind capability shared by every node variant.

    A kind knows how to convert a raw forward value into its canonical form,
    how to build the additive identity ("zero") and the default seed for the
    gradient accumulator, and how to accumulate (`+=`) a contribution into it.
    """
    name = None

    def convert(self, x):
        raise NotImplementedError

    def zeros(self, x):
        raise NotImplementedError

    def seed(self, x, seed=None):
        raise NotImplementedError

    def accumulate(self, dx, g):
        raise NotImplementedError

    def __repr__(self):
        return f"Kind({self.name!r})"


class ScalarKind(Kind):
    name = "scalar"

    def convert(self, x):
        return float(x)

    def zeros(self, x):
        return 0.0

    def seed(self, x, seed=None):
        if seed is None:
            return 1.0
        if np.ndim(seed) != 0:
            raise ShapeError(f"Scalar output needs a scalar seed, got shape {np.shape(seed)}")
        return float(seed)

    def accumulate(self, dx, g):
        # A scalar feeding a tensor-valued op receives the summed cotangent
        if isinstance(g, np.ndarray):
            g = g.sum()
        return dx + float(g)


class TensorKind(Kind):
    name = "tensor"

    def convert(self, x):
        # C-contiguous private copy: flat-index scatter/gather relies on it
        return np.array(x, dtype=config.dtype, order="C")

    def zeros(self, x):
        return np.zeros(np.shape(x), dtype=config.dtype)

    def seed(self, x, seed=None):
        if seed is None:
            return np.ones(np.shape(x), dtype=config.dtype)
        seed = np.array(seed, dtype=config.dtype, order="C")
        if seed.shape != np.shape(x):
            raise ShapeError(
                f"Seed shape {seed.shape} does not match output shape {np.shape(x)}"
            )
        return seed

    def accumulate(self, dx, g):
        # A 0-d tensor on the scalar side of a tensor op receives the summed cotangent
        if dx.ndim == 0 and np.ndim(g) > 0:
            g = np.sum(g)
        if np.shape(g) != dx.shape:
            raise ShapeError(
                f"Gradient contribution of shape {np.shape(g)} cannot accumulate into "
                f"a tensor of shape {dx.shape}"
            )
        dx += g
        return dx


SCALAR = ScalarKind()
TENSOR = TensorKind()

_KINDS = {"scalar": SCALAR, "tensor": TENSOR}


def get_kind(output_kind: Any) -> Kind:
    """Resolve 'scalar' / 'tensor' (or a Kind instance); anything else is a configuration error."""
    if isinstance(output_kind, Kind):
        return output_kind
    kind = _KINDS.get(output_kind) if isinstance(output_kind, str) else None
    if kind is None:
        raise ConfigurationError(
            f"Attempting to create AD function with invalid output kind {output_kind!r}; "
            f"valid options are 'scalar' and 'tensor'"
        )
    return kind


def kind_of(x: Any) -> Optional[Kind]:
    """
    Kind of a raw value, or None if the value is not numeric.

    ndarray / list / tuple -> tensor; int / float / numpy real scalar -> scalar.
    bool is deliberately not numeric here.
    """
    if isinstance(x, (np.ndarray, list, tuple)):
        return TENSOR
    if isinstance(x, (bool, np.bool_)):
        return None
    if isinstance(x, numbers.Real):
        return SCALAR
    return None
