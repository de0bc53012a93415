from typing import Any, Dict


def init_metrics() -> Dict[str, Any]:
    return {
        'leaves': 0,
        'internal_nodes': 0,
        'max_depth': 0,
        'splits_abandoned': 0,
        'axis_flips': 0,
        'adjacency_edges': 0,
        'doors_placed': 0,
        'boundary_doors_removed': 0,
        'runtime_ms': 0,
        'phase_ms': {},
    }
