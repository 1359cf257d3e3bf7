"""
Report artifacts written under the reports directory.

    reports/diagnostic-2025-01-15T10_30_00.000Z.json
    reports/dependency-graph.dot
"""

import json
import logging
from pathlib import Path

from devtracker.report.dot import render_dot
from devtracker.report.engine import DiagnosticEngine

logger = logging.getLogger(__name__)

DOT_FILENAME = "dependency-graph.dot"


def diagnostic_filename(timestamp: str) -> str:
    """Report file name for a timestamp. ':' is not portable in file names."""
    return f"diagnostic-{timestamp.replace(':', '_')}.json"


def write_diagnostic_report(engine: DiagnosticEngine, reports_dir: Path, recent: int) -> Path:
    """Build the diagnostic bundle and write it as pretty JSON. Returns the path."""
    report = engine.diagnostic_report(recent=recent)
    path = reports_dir / diagnostic_filename(report["timestamp"])
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2) + "\n")
    logger.info(f"[REPORT] Diagnostic report written to {path}")
    return path


def write_dependency_dot(engine: DiagnosticEngine, reports_dir: Path, title: str = "DependencyGraph") -> Path:
    """Render the dependency graph to DOT, overwriting the previous file."""
    path = reports_dir / DOT_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_dot(engine.graph, engine.components.all(), title=title))
    logger.info(f"[REPORT] Dependency graph written to {path}")
    return path
