import pytest


@pytest.fixture(autouse=True)
def _clean_engine_env(monkeypatch):
    """Keep FORMENGINE_* settings from the host out of every test."""
    for name in (
        "FORMENGINE_CROSS_REFERENCES",
        "FORMENGINE_LOADER_PASSES",
        "FORMENGINE_WARN_MISSING",
        "FORMENGINE_MAX_RENDER_PASSES",
        "FORMENGINE_LOG_LEVEL",
        "FORMENGINE_LOG_REDACT_SOURCE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
