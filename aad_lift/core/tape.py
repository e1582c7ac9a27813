# aad_lift/core/tape.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import List, Optional

from ..config import config
from .errors import BackwardInFlightError

logger = logging.getLogger(__name__)


class Tape:
    """
    A differentiation session: records Nodes in creation order and guards
    against overlapping backward passes.

    Creation order is a topological order of the dependency graph, since a
    node can only be built after all of its parents exist.

    The recorded list only grows. A training loop on `global_tape` keeps every
    node of every iteration alive; run each iteration inside `use_tape()`,
    call `reset()` between iterations, or turn off `config.record_nodes`.
    """
    def __init__(self):
        self.nodes: List = []
        self._in_flight = False

    def __len__(self):
        return len(self.nodes)

    def reset(self):
        """Forget every recorded node (they are reclaimed once client code drops them)."""
        logger.debug("Resetting tape %#x (%d nodes)", id(self), len(self.nodes))
        self.nodes.clear()

    def push_node(self, node):
        """
        Append `node` to the tape when recording is enabled.
        Returns its position on this tape, or None when not recorded.
        """
        if not config.record_nodes:
            return None
        self.nodes.append(node)
        return len(self.nodes) - 1

    @property
    def in_backward(self) -> bool:
        return self._in_flight

    @contextmanager
    def backward_pass(self):
        """Hold the single-in-flight guard for the duration of one backward pass."""
        if self._in_flight:
            raise BackwardInFlightError(
                "A backward pass is already running on this tape; "
                "gradient computations sharing nodes must be serialized"
            )
        self._in_flight = True
        try:
            yield self
        finally:
            self._in_flight = False


# Process-default tape
global_tape = Tape()


@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily use a fresh (or the given) tape:
        with use_tape() as t:
            ... build computation ...
            reverse(y)
    """
    from . import tape as _tape_mod  # local import to avoid cycles
    prev = _tape_mod.global_tape
    try:
        _tape_mod.global_tape = tape if tape is not None else Tape()
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = prev
