"""Report export service.

Writes a machine-readable snapshot of a loaded dataset:

    project:      name, version, description
    summary:      the headline summary cards
    heatmap:      bins, per-package counts and totals
    diagnostics:  per package/file, the analysis messages of every
                  method and member with at least one message

Two formats are supported: YAML (PyYAML) and JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from metrix.core.analysis import analyze
from metrix.core.heatmap import BIN_KEYS, build_matrix
from metrix.core.summary import summary_cards
from metrix.errors import MetrixError
from metrix.models import Dataset

logger = logging.getLogger("metrix.core.export")

FORMATS = ("yaml", "json")


@dataclass
class ExportResult:
    """Result of an export operation."""

    format: str
    output_path: Optional[Path]
    content: str
    diagnostic_count: int


def build_export_data(dataset: Dataset) -> dict:
    """Assemble the export document as plain dicts and lists."""
    matrix = build_matrix(dataset.iter_methods())

    diagnostics = []
    for pkg in dataset.packages:
        for f in pkg.files:
            for record in (*f.methods, *f.members):
                messages = analyze(record)
                if not messages:
                    continue
                diagnostics.append({
                    "package": pkg.name,
                    "file": f.file_name,
                    "kind": record.kind,
                    "name": record.name,
                    "messages": messages,
                })

    return {
        "project": {
            "name": dataset.meta.name,
            "version": dataset.meta.version,
            "description": dataset.meta.description,
        },
        "summary": {
            c.key: {"label": c.label, "value": c.value, **({"detail": c.detail} if c.detail else {})}
            for c in summary_cards(dataset)
        },
        "heatmap": {
            "bins": list(BIN_KEYS),
            "packages": {
                p: {
                    "counts": {b: matrix.count(p, b) for b in BIN_KEYS},
                    "total": matrix.total(p),
                }
                for p in matrix.packages
            },
        },
        "diagnostics": diagnostics,
    }


class ExportService:
    """Serialize a dataset snapshot to YAML or JSON."""

    def render(self, dataset: Dataset, format: str = "yaml") -> str:
        return self._serialize(build_export_data(dataset), format)

    def _serialize(self, data: dict, format: str) -> str:
        if format == "yaml":
            return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
        if format == "json":
            return json.dumps(data, indent=2, ensure_ascii=False)
        raise MetrixError(
            f"Unknown export format '{format}'. Use: {', '.join(FORMATS)}",
            context={"format": format},
        )

    def export(
        self, dataset: Dataset, format: str = "yaml", output_path: Optional[Path] = None
    ) -> ExportResult:
        """Render the snapshot and write it to ``output_path`` if given."""
        data = build_export_data(dataset)
        content = self._serialize(data, format)
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
            logger.info("Exported %s report to %s", format, output_path)
        return ExportResult(
            format=format,
            output_path=output_path,
            content=content,
            diagnostic_count=len(data["diagnostics"]),
        )
