"""
Repository-level pytest configuration.

Why this exists:
  - Make the repository root importable (`testsuites`, `run_tests`)
  - Provide safe defaults so local runs never hit the live site by accident
  - Keep behavior explicit and discoverable

Important:
  Site URL, browser and timeouts live in config/config.yaml; any key can be
  overridden through its environment variable (ui.base_url -> UI_BASE_URL).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """
    Set environment defaults if not already provided by the user/CI.

    Browser specs stay disabled unless UI_E2E=1 is exported explicitly.
    """
    defaults = {
        "ENV": "local",
        "UI_E2E": "0",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
