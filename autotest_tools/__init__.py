"""
================================================================================
Autotest Tools
================================================================================

Infrastructure utilities shared by the UI automation suite.

Modules:
    - common: Logging setup and small helpers (secret masking, directories)
    - report_tools: Allure attachments, report steps and report generation

Example:
    from autotest_tools.common import init_logger
    from autotest_tools.report_tools.allure_utils import report_step

    init_logger(level="DEBUG")
    report_step("Search results displayed", status="pass")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
