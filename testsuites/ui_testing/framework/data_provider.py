"""
================================================================================
Test Data Providers
================================================================================

Read-only scenario data for UI tests, constructed explicitly and injected
through pytest fixtures.

    - CsvTestDataProvider: rows keyed by the ``_key`` column
      (validUser, wrongPasswordUser, search, board, profileUpdate, ...)
    - JsonTestDataProvider: nested documents addressed by dotted path
      (messages.invalidEmail)

Usage:
    data = CsvTestDataProvider("testsuites/ui_testing/testdata/test_data.csv")
    email, password = data.credentials("validUser")
    query = data.get("search", "spellingError")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from .exceptions import UIAutomationError


KEY_COLUMN = "_key"


class TestDataError(UIAutomationError):
    """Raised when a scenario key or field is missing."""
    __test__ = False


class CsvTestDataProvider:
    """
    Scenario rows loaded from a CSV file.

    Keys are matched case-insensitively. Empty cells count as missing.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._rows = self._load()

    def _load(self) -> List[Dict[str, str]]:
        if not self.path.exists():
            raise TestDataError(f"CSV test data not found: {self.path}")

        with open(self.path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None or KEY_COLUMN not in reader.fieldnames:
                raise TestDataError(f"CSV test data needs a '{KEY_COLUMN}' column: {self.path}")
            rows = [
                {k.strip(): (v or "").strip() for k, v in row.items() if k}
                for row in reader
                if any((v or "").strip() for v in row.values())
            ]

        logger.debug(f"Loaded {len(rows)} test data rows from {self.path}")
        return rows

    @property
    def keys(self) -> List[str]:
        return [row[KEY_COLUMN] for row in self._rows]

    def records(self) -> List[Dict[str, str]]:
        """All rows (copies)."""
        return [dict(row) for row in self._rows]

    def has_key(self, key: str) -> bool:
        return self._find(key) is not None

    def _find(self, key: str) -> Optional[Dict[str, str]]:
        wanted = key.lower()
        for row in self._rows:
            if row.get(KEY_COLUMN, "").lower() == wanted:
                return row
        return None

    def row(self, key: str) -> Dict[str, str]:
        """
        Get the full row for ``key``.

        Raises:
            TestDataError: Unknown key (message lists the available keys)
        """
        row = self._find(key)
        if row is None:
            raise TestDataError(
                f"Test data key not found: {key}. Available: {', '.join(self.keys)}"
            )
        return dict(row)

    def get(self, key: str, field: str) -> str:
        """
        Get one field of a scenario.

        Raises:
            TestDataError: Unknown key, or field missing/empty
        """
        value = self.row(key).get(field, "")
        if not value:
            raise TestDataError(f"Field '{field}' not found or empty for key: {key}")
        return value

    def get_or_default(self, key: str, field: str, default: str = "") -> str:
        row = self._find(key)
        if row is None:
            return default
        return row.get(field) or default

    def credentials(self, key: str) -> Tuple[str, str]:
        """(email, password) of a user scenario."""
        return self.get(key, "email"), self.get(key, "password")


class JsonTestDataProvider:
    """Nested scenario data loaded from a JSON document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        if not self.path.exists():
            raise TestDataError(f"JSON test data not found: {self.path}")
        try:
            with open(self.path, encoding="utf-8") as f:
                self._data = json.load(f)
        except json.JSONDecodeError as e:
            raise TestDataError(f"Invalid JSON test data in {self.path}: {e}") from e
        logger.debug(f"Loaded JSON test data from {self.path}")

    def get(self, path: str) -> Any:
        """
        Get a value by dotted path (e.g. "messages.invalidEmail").

        Raises:
            TestDataError: Path does not exist
        """
        value: Any = self._data
        for part in path.split("."):
            if not isinstance(value, dict) or part not in value:
                raise TestDataError(f"Test data path not found: {path}")
            value = value[part]
        return value

    def get_or_default(self, path: str, default: Any = None) -> Any:
        try:
            return self.get(path)
        except TestDataError:
            return default


__all__ = [
    "CsvTestDataProvider",
    "JsonTestDataProvider",
    "TestDataError",
]
