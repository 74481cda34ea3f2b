"""
Imprint Report Generator
=========================

Writes search reports as structured JSON for downstream tooling such
as remapping scripts that rename the recovered classes.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from imprint.core.models import SearchReport

REPORT_VERSION = "1.0.0"


class ImprintReportGenerator:
    """Serialise :class:`SearchReport` objects.

    Usage::

        generator = ImprintReportGenerator()
        generator.generate_json(report, "matches.json")
    """

    def build(self, report: SearchReport) -> dict[str, Any]:
        """Return the JSON-ready report document."""
        return {
            "report_type": "imprint_class_search",
            "version": REPORT_VERSION,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "search": report.model_dump(mode="json", exclude={"matches"}),
            "unmatched_patterns": report.unmatched_patterns,
            "matches": [m.model_dump(mode="json") for m in report.matches],
        }

    def to_json(self, report: SearchReport) -> str:
        return json.dumps(self.build(report), indent=2, ensure_ascii=False)

    def generate_json(self, report: SearchReport, output_path: str | Path) -> str:
        """Write the report to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.build(report), f, indent=2, ensure_ascii=False)
        return str(path.resolve())
