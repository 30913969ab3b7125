"""HTML report generator using Jinja2 templates."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from linediff.differ import UNIFIED_PREFIXES, DiffResult
from linediff.highlighter import Side, render_highlighted, side_by_side

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class ReportGenerator:
    """Generate HTML diff reports."""

    def __init__(
        self,
        reports_dir: Path,
        templates_dir: Path = DEFAULT_TEMPLATES_DIR,
        base_url: str = "",
    ) -> None:
        self.reports_dir = reports_dir
        self.base_url = base_url.rstrip("/") if base_url else ""
        self._env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=True,
        )

    def _get_date_dir(self, report_time: datetime) -> Path:
        """Get the directory path for a specific date."""
        return (
            self.reports_dir
            / f"{report_time.year:04d}"
            / f"{report_time.month:02d}"
            / f"{report_time.day:02d}"
        )

    def generate_report(
        self,
        name: str,
        original_text: str,
        revised_text: str,
        result: DiffResult,
        report_time: datetime,
        by_position: bool = False,
        marker: str = "mark",
    ) -> Path:
        """Generate the HTML page for a single comparison.

        Raises ValueError if ``name`` would place the page outside its date directory.
        """
        date_dir = self._get_date_dir(report_time)
        output_path = date_dir / f"{name}.html"
        if not output_path.resolve().is_relative_to(date_dir.resolve()):
            raise ValueError(f"Report name escapes the reports directory: {name}")

        # name.html -> ../../../index.html, nested/name.html -> one more level
        depth = name.count("/") + 3
        back_to_index = "../" * depth + "index.html"

        template = self._env.get_template("diff_report.html")
        html = template.render(
            name=name,
            stats=result.statistics,
            rows=side_by_side(original_text, revised_text, result, by_position=by_position),
            operations=[(UNIFIED_PREFIXES[op.kind], op) for op in result],
            timestamp=report_time.strftime("%Y-%m-%d %H:%M:%S"),
            highlighted_original=render_highlighted(
                original_text, result, Side.ORIGINAL, marker=marker, by_position=by_position
            ),
            highlighted_revised=render_highlighted(
                revised_text, result, Side.REVISED, marker=marker, by_position=by_position
            ),
            back_to_index=back_to_index,
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        logger.info(f"Wrote report {output_path}")
        return output_path

    def update_main_index(self) -> Path:
        """Update the main index with all dated reports."""
        reports: list[dict] = []
        self.reports_dir.mkdir(parents=True, exist_ok=True)

        for year_dir in sorted(self.reports_dir.iterdir(), reverse=True):
            if not year_dir.is_dir() or not year_dir.name.isdigit():
                continue
            for month_dir in sorted(year_dir.iterdir(), reverse=True):
                if not month_dir.is_dir() or not month_dir.name.isdigit():
                    continue
                for day_dir in sorted(month_dir.iterdir(), reverse=True):
                    if not day_dir.is_dir() or not day_dir.name.isdigit():
                        continue

                    report_date = f"{year_dir.name}-{month_dir.name}-{day_dir.name}"
                    for page in sorted(day_dir.rglob("*.html")):
                        relative = page.relative_to(self.reports_dir).as_posix()
                        reports.append(
                            {
                                "date": report_date,
                                "name": page.relative_to(day_dir).with_suffix("").as_posix(),
                                "path": relative,
                            }
                        )

        template = self._env.get_template("main_index.html")
        html = template.render(reports=reports)

        output_path = self.reports_dir / "index.html"
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def get_report_url(self, report_time: datetime) -> str:
        """Get the URL for a specific date's reports."""
        date_path = f"{report_time.year:04d}/{report_time.month:02d}/{report_time.day:02d}/"
        if self.base_url:
            return f"{self.base_url}/{date_path}"
        return date_path
