"""
Test suites package.

  - testsuites.unit: framework and page-object tests against in-memory fakes
  - testsuites.ui_testing: Playwright framework, page objects and live UI tests

Kept importable so `run_tests.py`, IDEs and CI jobs can reach the framework
modules by their dotted names. Credentials live in the testdata files only.
"""
