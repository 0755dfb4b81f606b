"""Tests for the server entry point and its environment overrides."""

import driftguard.main as main_module
from driftguard.config import Config, config


class TestEntryPoint:
    def test_serves_app_on_configured_address(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main_module.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))
        main_module.main()
        (args, kwargs), = calls
        assert args == ("driftguard.api.app:app",)
        assert kwargs["host"] == config.api_host == "127.0.0.1"
        assert kwargs["port"] == config.api_port

    def test_env_overrides_config_fields(self, monkeypatch):
        monkeypatch.setenv("DG_API_PORT", "9000")
        monkeypatch.setenv("DG_DWELL_THRESHOLD_S", "45")
        cfg = Config.load()
        assert cfg.api_port == 9000
        assert cfg.dwell_threshold_s == 45.0
