"""Markdown reporter for batch warranty reports.

Renders a BatchReport through a Jinja2 template: a summary, counts per
status and one table row per serial number.
"""

from datetime import datetime
from importlib.resources import files
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, Template

from warranty_checker.models import BatchReport
from warranty_checker.reporters.base import BaseReporter


def _cell(value) -> str:
    """Format a value for a Markdown table cell."""
    if value is None or value == "":
        return "-"
    return str(value).replace("|", "\\|").replace("\n", " ")


class MarkdownReporter(BaseReporter):
    """Reporter that generates Markdown warranty reports.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the bundled template.
        """
        if template_path:
            env = Environment(
                loader=FileSystemLoader(template_path.parent),
                autoescape=False,
            )
            env.filters["cell"] = _cell
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    def _load_default_template(self) -> Template:
        template_content = (
            files("warranty_checker.templates")
            .joinpath("report.md.j2")
            .read_text(encoding="utf-8")
        )
        env = Environment(autoescape=False)
        env.filters["cell"] = _cell
        return env.from_string(template_content)

    def render(self, report: BatchReport) -> str:
        return self.template.render(
            report=report,
            results=report.results,
            generated_at=datetime.now(),
        )

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_extension(self) -> str:
        return ".md"
