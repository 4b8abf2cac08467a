"""JSON views used by the CLI and API."""

from .views import block_view, bounds_view, node_view, selection_view

__all__ = ["block_view", "bounds_view", "node_view", "selection_view"]
