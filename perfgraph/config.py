from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
import tomllib
from typing import Any, Mapping

from PIL import ImageColor


@dataclass(frozen=True)
class ChartConfig:
    """Default chart geometry, labels and palette."""

    height: int = 270
    min_width: int = 500
    width_allowance: int = 100
    margin_top: int = 0
    margin_right: int = 20
    margin_bottom: int = 30
    margin_left: int = 50
    palette: tuple[str, ...] = ("red", "green", "blue", "violet", "cyan")
    x_label: str = "Date"
    y_label: str = "Execution time (ms)"
    tick_count: int = 5
    marker_radius: float = 2.0
    focus_radius: float = 4.0
    info_panel_width: int = 220
    info_panel_height: int = 140
    info_panel_offset: int = 10
    legend_x: int = 10
    legend_row_height: int = 10
    legend_swatch_width: int = 25
    legend_swatch_height: int = 3
    x_label_gap: int = 30


DEFAULT_CONFIG = ChartConfig()

_INT_FIELDS = (
    "height",
    "min_width",
    "info_panel_width",
    "info_panel_height",
    "legend_row_height",
    "legend_swatch_width",
    "legend_swatch_height",
    "tick_count",
)
_NON_NEGATIVE_INT_FIELDS = (
    "width_allowance",
    "margin_top",
    "margin_right",
    "margin_bottom",
    "margin_left",
    "info_panel_offset",
    "legend_x",
    "x_label_gap",
)


def validate_chart_config(overrides: Mapping[str, Any] | None = None) -> ChartConfig:
    """Merge overrides over the defaults, rejecting unknown keys and bad values."""

    raw: dict[str, Any] = asdict(DEFAULT_CONFIG)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown chart setting: {key}")
            raw[key] = value

    for key in _INT_FIELDS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], int) or raw[key] <= 0:
            raise ValueError(f"Setting `{key}` must be a positive integer")
    for key in _NON_NEGATIVE_INT_FIELDS:
        if isinstance(raw[key], bool) or not isinstance(raw[key], int) or raw[key] < 0:
            raise ValueError(f"Setting `{key}` must be a non-negative integer")
    for key in ("marker_radius", "focus_radius"):
        if not isinstance(raw[key], (int, float)) or float(raw[key]) <= 0:
            raise ValueError(f"Setting `{key}` must be a positive number")
    for key in ("x_label", "y_label"):
        if not isinstance(raw[key], str):
            raise ValueError(f"Setting `{key}` must be a string")

    palette = raw["palette"]
    if isinstance(palette, str) or not palette:
        raise ValueError("Setting `palette` must be a non-empty list of colors")
    for color in palette:
        try:
            ImageColor.getrgb(str(color))
        except ValueError as exc:
            raise ValueError(f"Setting `palette` has an unknown color: {color!r}") from exc

    return ChartConfig(
        height=int(raw["height"]),
        min_width=int(raw["min_width"]),
        width_allowance=int(raw["width_allowance"]),
        margin_top=int(raw["margin_top"]),
        margin_right=int(raw["margin_right"]),
        margin_bottom=int(raw["margin_bottom"]),
        margin_left=int(raw["margin_left"]),
        palette=tuple(str(c) for c in palette),
        x_label=str(raw["x_label"]),
        y_label=str(raw["y_label"]),
        tick_count=int(raw["tick_count"]),
        marker_radius=float(raw["marker_radius"]),
        focus_radius=float(raw["focus_radius"]),
        info_panel_width=int(raw["info_panel_width"]),
        info_panel_height=int(raw["info_panel_height"]),
        info_panel_offset=int(raw["info_panel_offset"]),
        legend_x=int(raw["legend_x"]),
        legend_row_height=int(raw["legend_row_height"]),
        legend_swatch_width=int(raw["legend_swatch_width"]),
        legend_swatch_height=int(raw["legend_swatch_height"]),
        x_label_gap=int(raw["x_label_gap"]),
    )


def load_chart_config(path: str | Path) -> ChartConfig:
    """Read overrides from a TOML file; a `[chart]` table is used when present."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", raw)
    if not isinstance(table, dict):
        raise ValueError("`chart` must be a table")
    return validate_chart_config(table)
