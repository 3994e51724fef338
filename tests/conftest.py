import pytest


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    monkeypatch.setenv("BFT_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("BFT_LOG_STDOUT", "0")
