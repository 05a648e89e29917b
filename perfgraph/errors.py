from __future__ import annotations


class GraphDataError(ValueError):
    """Raised when curve or chart input cannot be plotted."""
