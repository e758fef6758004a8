"""Output reporters for batch warranty reports.

This module provides reporters for rendering batch results to
various output formats.
"""

from warranty_checker.reporters.base import BaseReporter
from warranty_checker.reporters.markdown import MarkdownReporter

__all__ = ["BaseReporter", "MarkdownReporter"]
