"""
Hierarchical layout engine.

- HierarchicalLayout: Layered layout for sized nodes with orthogonal routing
"""

from .layout import HierarchicalLayout, compute_bounds

__all__ = [
    "HierarchicalLayout",
    "compute_bounds",
]
