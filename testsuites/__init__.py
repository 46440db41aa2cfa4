"""
Test suites package.

This repository intentionally keeps `testsuites` importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - CI/CD module imports

Layout:
  - ui_testing/framework: resilient interaction layer (locators, waits, consent)
  - ui_testing/pages: page objects for the site under test
  - ui_testing/tests: browser specs (opt-in, UI_E2E=1)
  - unit: framework tests against in-memory page fakes
"""
