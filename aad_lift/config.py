# aad_lift/config.py
"""
Engine configuration

A single mutable `ADConfig` instance (`config`) is read by the tensor kind
(dtype of lifted tensors and gradient buffers), by the tape (whether created
nodes are kept in `tape.nodes`) and by the backward engine (finite checks).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict

import numpy as np

from .core.errors import ConfigurationError


@dataclass
class ADConfig:
    """
    Attributes
    ----------
    dtype : numpy dtype
        Floating dtype used for lifted tensors and tensor gradient buffers.
    record_nodes : bool
        Keep every created node in the active tape's `nodes` list. Turn off in
        long training loops if the tape is never reset; the backward pass does
        not need the list.
    check_finite : bool
        After each backward pass, log a warning for any reachable node whose
        gradient contains inf/nan.
    """
    dtype: Any = np.float64
    record_nodes: bool = True
    check_finite: bool = False


config = ADConfig()


def configure(**overrides) -> Dict[str, Any]:
    """
    Update the global configuration in place.

    Returns the previous values of the overridden fields, so callers can do
        old = configure(check_finite=True)
        ...
        configure(**old)
    """
    known = {f.name for f in fields(ADConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration option(s) {unknown}; valid options are {sorted(known)}"
        )

    if "dtype" in overrides:
        dtype = np.dtype(overrides["dtype"])
        if not np.issubdtype(dtype, np.floating):
            raise ConfigurationError(f"dtype must be a floating dtype, got {dtype}")
        overrides["dtype"] = dtype.type

    previous = {name: getattr(config, name) for name in overrides}
    for name, val in overrides.items():
        setattr(config, name, val)
    return previous
