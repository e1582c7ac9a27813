# aad_lift/core/engine.py
from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from ..config import config
from . import tape as tape_mod  # Use module access for use_tape() compatibility
from .errors import NotLiftedError
from .node import Node, is_node

logger = logging.getLogger(__name__)


def reachable_nodes(output: Node) -> List[Node]:
    """
    Every node reachable from `output` through `parents` (output included),
    sorted by strictly decreasing creation index.
    """
    seen = {id(output)}
    found = [output]
    stack = [output]
    while stack:
        node = stack.pop()
        for p in node.parents:
            if id(p) not in seen:
                seen.add(id(p))
                found.append(p)
                stack.append(p)
    found.sort(key=lambda n: n.index, reverse=True)
    return found


def reverse(output: Node, seed=None) -> Node:
    """
    Run a single reverse pass from `output`.

    Phases
    ------
    1. Seed       : output.dx = 1 (scalar) or `seed` / ones (tensor).
    2. Reset      : zero the dx of every other node reachable from `output`,
                    so nothing leaks from a previous pass over shared nodes.
    3. Accumulate : visit reachable nodes in decreasing creation order and run
                    each node's backward formula. Creation order is
                    topological, so a node's dx is final when it is visited.

    Only one pass may run per tape at a time (BackwardInFlightError).
    """
    if not is_node(output):
        raise NotLiftedError(
            f"reverse() needs a lifted output, got raw {type(output).__name__}"
        )

    tape = tape_mod.global_tape
    with tape.backward_pass():
        order = reachable_nodes(output)
        logger.debug("Backward pass from %s over %d reachable nodes", output.op_name, len(order))

        # order[0] is `output`: every parent was created before its child
        output.dx = output.kind.seed(output.x, seed)
        for node in order[1:]:
            node.reset()

        for node in order:
            node.backward()

        if config.check_finite:
            _warn_non_finite(order)
    return output


def zero_adjoints(tape: Optional[tape_mod.Tape] = None) -> None:
    """
    Set the gradient accumulator of every node recorded on `tape` (default:
    the active tape) back to zero.
    """
    tape = tape if tape is not None else tape_mod.global_tape
    for node in tape.nodes:
        node.reset()


def _warn_non_finite(nodes: List[Node]) -> None:
    for node in nodes:
        if not np.all(np.isfinite(node.dx)):
            logger.warning(
                "Non-finite gradient on node %s (op %s, name %r)",
                node.index, node.op_name, node.name,
            )
