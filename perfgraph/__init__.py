from perfgraph.chart import Chart, ChartGeometry, CurveGeometry
from perfgraph.config import DEFAULT_CONFIG, ChartConfig, load_chart_config, validate_chart_config
from perfgraph.curve import Curve, CurveVisual
from perfgraph.domains import DomainAggregator, aggregate, extend_y_domain, y_extension_factor
from perfgraph.errors import GraphDataError
from perfgraph.focus import FocusState, FocusTracker, InfoRow
from perfgraph.instructions import ChartRenderer, DrawBatch
from perfgraph.layout import ChartLayout, Margin
from perfgraph.scales import LinearScale, TimeScale

__all__ = [
    "Chart",
    "ChartConfig",
    "ChartGeometry",
    "ChartLayout",
    "ChartRenderer",
    "Curve",
    "CurveGeometry",
    "CurveVisual",
    "DEFAULT_CONFIG",
    "DomainAggregator",
    "DrawBatch",
    "FocusState",
    "FocusTracker",
    "GraphDataError",
    "InfoRow",
    "LinearScale",
    "Margin",
    "TimeScale",
    "aggregate",
    "extend_y_domain",
    "load_chart_config",
    "validate_chart_config",
    "y_extension_factor",
]
