"""Configure pytest fixtures and environment for nftgate tests."""

import sys
from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv


def _ensure_package_on_path() -> None:
    """Ensure the repository root is importable so ``nftgate`` resolves without install."""
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))


_ensure_package_on_path()


def pytest_sessionstart(session):
    """Load environment variables from a local .env file if present."""
    load_dotenv()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Give every test a clean environment and a fresh settings singleton."""
    from nftgate.core import config

    for name in (
        "ADMIN_SECRET_API_KEY",
        "ADMIN_API_BASE_URL",
        "ADMIN_API_TIMEOUT",
        "WEB3_RPC_URL",
        "CHAIN_READ_TIMEOUT",
        "DIDT_NBF_LEEWAY_SECONDS",
        "ENVIRONMENT",
        "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of Settings()
    monkeypatch.chdir(tmp_path)
    config.reset_settings()
    structlog.contextvars.clear_contextvars()
    yield
    config.reset_settings()
    structlog.contextvars.clear_contextvars()
