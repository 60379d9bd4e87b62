"""
================================================================================
Allure Report Utilities
================================================================================

This module provides utilities for enhancing Allure test reports with
additional information, custom attachments, and report processing.

Features:
- Custom attachment helpers
- Report steps mirrored to the log
- Report generation, per-feature summaries and history between runs

================================================================================
"""

import json
import shutil
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(png: bytes, name: str = "Screenshot"):
    """Attach a PNG screenshot to Allure report."""
    allure.attach(
        png,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


# ================================================================================
# Report Steps
# ================================================================================

_STATUS_EMOJI = {
    "info": "ℹ️",
    "pass": "✅",
    "warning": "⚠️",
}


def report_step(message: str, status: str = "info", details: Optional[str] = None):
    """
    Record a test checkpoint in both the log and the Allure report.

    Reporting never affects control flow: the step is always closed as passed.

    Args:
        message: Checkpoint description
        status: "info", "pass" or "warning"
        details: Optional text attached under the step
    """
    if status not in _STATUS_EMOJI:
        raise ValueError(f"Unknown report status: {status}")

    title = f"{_STATUS_EMOJI[status]} {message}"
    if status == "warning":
        logger.warning(title)
    else:
        logger.info(title)

    with allure.step(title):
        if details:
            attach_text(details, name="Details")




# ================================================================================
# Report Processing
# ================================================================================

COUNTED_STATUSES = ("passed", "failed", "broken", "skipped")


def label_value(result: Dict[str, Any], name: str) -> Optional[str]:
    """Value of the first Allure label called ``name`` (feature, story, ...)."""
    for label in result.get("labels", []):
        if label.get("name") == name:
            return label.get("value")
    return None


@dataclass
class TestResultSummary:
    """Counts for one allure-results directory, overall and per feature."""
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    by_feature: Dict[str, Dict[str, int]] = field(default_factory=dict)
    not_passed: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def add(self, result: Dict[str, Any]) -> None:
        """Count one parsed ``*-result.json`` document."""
        status = result.get("status", "unknown")
        if status in COUNTED_STATUSES:
            setattr(self, status, getattr(self, status) + 1)
        else:
            self.unknown += 1
        self.total += 1
        self.duration_ms += max(result.get("stop", 0) - result.get("start", 0), 0)

        feature = label_value(result, "feature") or "Unassigned"
        counts = self.by_feature.setdefault(feature, {"total": 0, "passed": 0})
        counts["total"] += 1
        if status == "passed":
            counts["passed"] += 1
        elif status in ("failed", "broken"):
            self.not_passed.append(result.get("fullName") or result.get("name", "<unnamed>"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_ms": self.duration_ms,
            "by_feature": self.by_feature,
            "not_passed": self.not_passed,
            "timestamp": self.timestamp,
        }


class AllureReportProcessor:
    """
    Turns an allure-results directory into an HTML report and a summary.

    History from the previous report is carried into the results before
    generation, so Allure trend graphs survive between runs.
    """

    def __init__(
        self,
        results_dir: Path,
        report_dir: Optional[Path] = None,
        history_dir: Optional[Path] = None
    ):
        """
        Initialize processor.

        Args:
            results_dir: Allure results directory
            report_dir: Output report directory (default: sibling allure-report)
            history_dir: Where history is kept between runs (default: sibling allure-history)
        """
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")
        self.history_dir = Path(history_dir or self.results_dir.parent / "allure-history")

    def parse_results(self) -> List[Dict[str, Any]]:
        """Load every ``*-result.json``; unreadable files are logged and skipped."""
        results = []

        for result_file in sorted(self.results_dir.glob("*-result.json")):
            try:
                with open(result_file, encoding="utf-8") as f:
                    results.append(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to parse {result_file}: {e}")

        return results

    def generate_summary(self) -> TestResultSummary:
        summary = TestResultSummary()
        for result in self.parse_results():
            summary.add(result)
        return summary

    def restore_history(self) -> None:
        """Copy the kept history into the results before generating."""
        history_source = self.history_dir
        if not history_source.exists():
            history_source = self.report_dir / "history"
        if not history_source.exists():
            return

        history_dest = self.results_dir / "history"
        if history_dest.exists():
            shutil.rmtree(history_dest)
        shutil.copytree(history_source, history_dest)
        logger.info(f"Restored report history from {history_source}")

    def generate_report(self) -> bool:
        """
        Run ``allure generate`` on the results.

        Returns:
            True if successful, False when the CLI is missing or fails
        """
        self.restore_history()

        cmd = [
            "allure", "generate",
            str(self.results_dir),
            "-o", str(self.report_dir),
            "--clean"
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.error("Allure command not found. Install allure-commandline.")
            return False

        if result.returncode == 0:
            logger.info(f"Report generated at {self.report_dir}")
            return True

        logger.error(f"Report generation failed: {result.stderr}")
        return False

    def save_history(self) -> None:
        """Keep the new report's history for the next run."""
        history_source = self.report_dir / "history"
        if not history_source.exists():
            return

        if self.history_dir.exists():
            shutil.rmtree(self.history_dir)
        shutil.copytree(history_source, self.history_dir)
        logger.info(f"History saved to {self.history_dir}")

    def log_summary(self, summary: Optional[TestResultSummary] = None) -> TestResultSummary:
        """Write the run summary, one line per feature, to the log."""
        summary = summary or self.generate_summary()

        logger.info("=" * 60)
        logger.info("UI TEST EXECUTION SUMMARY")
        logger.info("=" * 60)
        logger.info(
            f"Total: {summary.total} | ✅ {summary.passed} | ❌ {summary.failed} | "
            f"⚠️ {summary.broken} | ⏭️ {summary.skipped}"
        )
        logger.info(f"Pass Rate: {summary.pass_rate:.2f}%")
        logger.info(f"Duration:  {summary.duration_ms / 1000:.2f}s")
        for feature, counts in sorted(summary.by_feature.items()):
            logger.info(f"  {feature}: {counts['passed']}/{counts['total']} passed")
        for name in summary.not_passed:
            logger.warning(f"  ❌ {name}")
        logger.info("=" * 60)
        return summary


# ================================================================================
# Convenience Functions
# ================================================================================

def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
    open_report: bool = False
) -> bool:
    """
    Generate Allure report from results and log the summary.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Optional output directory
        open_report: Whether to open report in browser

    Returns:
        True if successful
    """
    processor = AllureReportProcessor(
        Path(results_dir),
        Path(output_dir) if output_dir else None
    )

    success = processor.generate_report()

    if success:
        processor.log_summary()
        processor.save_history()

        if open_report:
            subprocess.run(["allure", "open", str(processor.report_dir)])

    return success
