"""Configuration loader for the diff CLI."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

VIEWS = ("side-by-side", "unified")


@dataclass
class LoaderConfig:
    """Configuration for loading input texts."""

    timeout: float = 30.0
    retry_count: int = 3


@dataclass
class HighlightConfig:
    """Configuration for highlighted rendering."""

    marker: str = "mark"
    # Match highlighted lines by aligned index instead of by text
    by_position: bool = False


@dataclass
class Config:
    """Main configuration container."""

    view: str = "side-by-side"
    reports_dir: Path = Path("reports")
    reports_base_url: str = ""
    highlight: HighlightConfig = field(default_factory=HighlightConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)

    def __post_init__(self) -> None:
        if self.view not in VIEWS:
            raise ValueError(f"Unknown view '{self.view}', expected one of: {', '.join(VIEWS)}")


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from a YAML file and environment variables.

    With no path, defaults are used and only the environment is consulted.
    """
    data: dict = {}
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    loader_data = data.get("loader", {})
    highlight_data = data.get("highlight", {})
    reports_data = data.get("reports", {})

    loader = LoaderConfig(
        timeout=loader_data.get("timeout", 30.0),
        retry_count=loader_data.get("retry_count", 3),
    )

    highlight = HighlightConfig(
        marker=highlight_data.get("marker", "mark"),
        by_position=highlight_data.get("by_position", False),
    )

    return Config(
        view=os.environ.get("LINEDIFF_VIEW") or data.get("view", "side-by-side"),
        reports_dir=Path(
            os.environ.get("LINEDIFF_REPORTS_DIR") or reports_data.get("base_dir", "reports")
        ),
        reports_base_url=(
            os.environ.get("LINEDIFF_REPORTS_URL") or reports_data.get("base_url", "")
        ),
        highlight=highlight,
        loader=loader,
    )
