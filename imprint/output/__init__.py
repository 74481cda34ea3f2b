"""
Imprint Output
===============

Console and JSON report output for search reports.
"""

from imprint.output.console import ImprintConsoleOutput
from imprint.output.report import ImprintReportGenerator

__all__ = ["ImprintConsoleOutput", "ImprintReportGenerator"]
