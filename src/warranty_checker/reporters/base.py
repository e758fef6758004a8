"""Base interface for output reporters.

Reporters generate formatted output (Markdown, JSON, etc.) from a batch
warranty report.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from warranty_checker.models import BatchReport


class BaseReporter(ABC):
    """Abstract base class for output reporters."""

    @abstractmethod
    def render(self, report: BatchReport) -> str:
        """Render a batch report to formatted output.

        Args:
            report: Completed batch report.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, report: BatchReport, output_path: Path) -> None:
        """Render and write output to a file.

        Args:
            report: Completed batch report.
            output_path: Path to write the output file.
        """
        content = self.render(report)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name."""
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Return the default file extension for this format."""
        ...
