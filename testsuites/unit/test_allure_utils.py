import json

import pytest

from autotest_tools.report_tools.allure_utils import (
    AllureReportProcessor,
    TestResultSummary,
    report_step,
)


def write_result(results_dir, name, status, start=0, stop=0, feature=None):
    payload = {"name": name, "status": status, "start": start, "stop": stop}
    if feature:
        payload["labels"] = [{"name": "epic", "value": "UI Testing"}, {"name": "feature", "value": feature}]
    (results_dir / f"{name}-result.json").write_text(json.dumps(payload), encoding="utf-8")


def test_report_step_accepts_known_statuses():
    report_step("Search results displayed", status="pass", details="24 pins")
    report_step("Board picker skipped", status="warning")
    report_step("Opened home page")


def test_report_step_rejects_unknown_status():
    with pytest.raises(ValueError, match="Unknown report status"):
        report_step("Saved pin", status="done")


def test_summary_counts_statuses(tmp_path):
    results = tmp_path / "allure-results"
    results.mkdir()
    write_result(results, "login", "passed", 100, 1600, feature="Authentication")
    write_result(results, "search", "failed", 0, 500, feature="Search")
    write_result(results, "pin", "broken")
    write_result(results, "profile", "skipped")
    (results / "corrupt-result.json").write_text("{", encoding="utf-8")

    summary = AllureReportProcessor(results).generate_summary()

    assert (summary.total, summary.passed, summary.failed, summary.broken, summary.skipped) == (4, 1, 1, 1, 1)
    assert summary.duration_ms == 2000
    assert summary.pass_rate == 25.0
    assert summary.by_feature["Authentication"] == {"total": 1, "passed": 1}
    assert summary.by_feature["Unassigned"] == {"total": 2, "passed": 0}
    assert summary.not_passed == ["pin", "search"]


def test_summary_dict_and_empty_pass_rate():
    assert TestResultSummary().pass_rate == 0.0
    assert TestResultSummary(total=3, passed=2).to_dict()["pass_rate"] == "66.67%"


def test_history_is_restored_from_previous_run(tmp_path):
    results = tmp_path / "allure-results"
    results.mkdir()
    history = tmp_path / "allure-history"
    history.mkdir()
    (history / "history-trend.json").write_text("[]", encoding="utf-8")

    AllureReportProcessor(results).restore_history()

    assert (results / "history" / "history-trend.json").exists()


def test_report_paths_default_next_to_results(tmp_path):
    processor = AllureReportProcessor(tmp_path / "allure-results")

    assert processor.report_dir == tmp_path / "allure-report"
    assert processor.history_dir == tmp_path / "allure-history"
