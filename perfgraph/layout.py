from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from perfgraph.config import DEFAULT_CONFIG, ChartConfig
from perfgraph.curve import Domain
from perfgraph.scales import LinearScale


@dataclass(frozen=True)
class Margin:
    top: int = 0
    right: int = 20
    bottom: int = 30
    left: int = 50

    def __post_init__(self) -> None:
        if min(self.top, self.right, self.bottom, self.left) < 0:
            raise ValueError("margins must be >= 0")

    @classmethod
    def from_config(cls, config: ChartConfig) -> "Margin":
        return cls(
            top=config.margin_top,
            right=config.margin_right,
            bottom=config.margin_bottom,
            left=config.margin_left,
        )


def resolve_total_width(container_width: int, *, min_width: int = 500, allowance: int = 100) -> int:
    return max(min_width, int(container_width) - allowance)


@dataclass
class ChartLayout:
    """Pixel geometry of one draw cycle and the scales that feed it.

    Plot width/height are always derived from the current margin; the scale
    ranges are re-pinned whenever domains are set.
    """

    total_width: int
    total_height: int
    margin: Margin = field(default_factory=Margin)
    x_scale: LinearScale = field(default_factory=LinearScale)
    y_scale: LinearScale = field(default_factory=LinearScale)

    def __post_init__(self) -> None:
        if self.total_width <= 0 or self.total_height <= 0:
            raise ValueError("total width and height must be > 0")
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ValueError("margins leave no room for the plot area")
        self._pin_ranges()

    @classmethod
    def from_container(
        cls,
        container_width: int,
        *,
        height: int | None = None,
        config: ChartConfig = DEFAULT_CONFIG,
        x_scale: LinearScale | None = None,
    ) -> "ChartLayout":
        width = resolve_total_width(
            container_width,
            min_width=config.min_width,
            allowance=config.width_allowance,
        )
        return cls(
            total_width=width,
            total_height=config.height if height is None else int(height),
            margin=Margin.from_config(config),
            x_scale=x_scale if x_scale is not None else LinearScale(),
            y_scale=LinearScale(),
        )

    @property
    def plot_width(self) -> int:
        return self.total_width - self.margin.left - self.margin.right

    @property
    def plot_height(self) -> int:
        return self.total_height - self.margin.top - self.margin.bottom

    def _pin_ranges(self) -> None:
        self.x_scale.set_range((0.0, float(self.plot_width)))
        self.y_scale.set_range((float(self.plot_height), 0.0))

    def set_margin(self, margin: Margin) -> "ChartLayout":
        self.margin = margin
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ValueError("margins leave no room for the plot area")
        self._pin_ranges()
        return self

    def with_domains(self, x_domain: Domain, y_domain: Domain) -> "ChartLayout":
        self._pin_ranges()
        self.x_scale.set_domain(x_domain)
        self.y_scale.set_domain(y_domain)
        return self

    def project(self, x: Any, y: Any) -> tuple[float, float]:
        return (self.x_scale(x), self.y_scale(y))

    def contains(self, px: float, py: float) -> bool:
        return 0.0 <= px <= self.plot_width and 0.0 <= py <= self.plot_height
