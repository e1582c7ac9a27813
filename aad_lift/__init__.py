# aad_lift/__init__.py
# Reverse-mode automatic differentiation over lifted scalars and numpy tensors

import logging

from .core import (
    ADError,
    BackwardInFlightError,
    ConfigurationError,
    NotLiftedError,
    ShapeError,
    Node,
    Tape,
    global_tape,
    use_tape,
    lift,
    is_lifted,
    value,
    derivative,
    new_unary_function,
    new_binary_function,
    new_function,
    nary_get_parents,
    lift_unary_function,
    lift_binary_function,
    reverse,
    zero_adjoints,
    grad,
    grads,
    grads_list,
    graph_summary,
)
from .config import ADConfig, config, configure

# Built-in function library
from . import ops
from .ops import scalar, tensor, tensor_entry, tensor_to_scalars, scalars_to_tensor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Errors
    'ADError',
    'BackwardInFlightError',
    'ConfigurationError',
    'NotLiftedError',
    'ShapeError',
    # Lifted values
    'Node',
    'lift',
    'is_lifted',
    'value',
    'derivative',
    # Sessions
    'Tape',
    'global_tape',
    'use_tape',
    # Function factory
    'new_unary_function',
    'new_binary_function',
    'new_function',
    'nary_get_parents',
    'lift_unary_function',
    'lift_binary_function',
    # Engine
    'reverse',
    'zero_adjoints',
    'grad',
    'grads',
    'grads_list',
    'graph_summary',
    # Configuration
    'ADConfig',
    'config',
    'configure',
    # Library
    'ops',
    'scalar',
    'tensor',
    'tensor_entry',
    'tensor_to_scalars',
    'scalars_to_tensor',
]
