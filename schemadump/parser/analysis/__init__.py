"""
Analysis layer for table dependency ordering.
"""

from .dependency_graph import TableDependencyGraph

__all__ = [
    "TableDependencyGraph",
]
