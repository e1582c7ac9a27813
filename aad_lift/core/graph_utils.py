"""
Computation graph utilities
Summarize the structure of the nodes recorded on a tape.
"""

import logging
from collections import Counter
from typing import Dict, Optional

import numpy as np

from . import tape as tape_mod

logger = logging.getLogger(__name__)


def graph_summary(tape: Optional[tape_mod.Tape] = None, detailed: bool = False) -> Dict:
    """
    Summarize the computation graph recorded on a tape.

    Args:
        tape: Tape to inspect (default: the active tape)
        detailed: Also log one line per node (first 100 nodes only)

    Returns:
        Dict with node/edge counts, fan-in/fan-out statistics and the
        per-operation breakdown (op name -> count)
    """
    tape = tape if tape is not None else tape_mod.global_tape
    nodes = tape.nodes
    if not nodes:
        logger.info("Empty computation graph")
        return {}

    n_nodes = len(nodes)
    n_edges = sum(len(node.parents) for node in nodes)

    fan_ins = [len(node.parents) for node in nodes]

    # Fan-out: count how many recorded nodes consume each node
    fan_out_by_id = Counter(id(p) for node in nodes for p in node.parents)
    fan_outs = [fan_out_by_id.get(id(node), 0) for node in nodes]

    op_counter = Counter(node.op_name for node in nodes)

    summary = {
        'nodes': n_nodes,
        'edges': n_edges,
        'leaves': sum(1 for node in nodes if not node.parents),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'op_counts': dict(op_counter),
    }

    logger.info(
        "Computation graph: %d nodes, %d edges, max fan-in %d, max fan-out %d",
        n_nodes, n_edges, summary['max_fan_in'], summary['max_fan_out'],
    )
    for op_name, count in op_counter.most_common(10):
        pct = 100.0 * count / n_nodes
        logger.info("  %-16s: %6d (%5.1f%%)", op_name, count, pct)

    if detailed:
        position = {id(node): i for i, node in enumerate(nodes)}
        for i, node in enumerate(nodes[:100]):
            parent_info = ", ".join(
                f"Node{position.get(id(p), '?')}" for p in node.parents
            )
            logger.info("Node %3d: %-16s <- [%s]", i, node.op_name, parent_info)

    return summary
