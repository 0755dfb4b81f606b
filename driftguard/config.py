"""
Central configuration for the DriftGuard engine.
All values can be overridden via environment variables or a local config.json.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8765

    # Cadences
    scoring_interval_ms: int = 5000          # classification / hysteresis cycle
    decay_interval_ms: int = 10000           # display score decay cycle

    # Decision engine
    confirmation_cycles: int = 2             # consecutive labels before acting
    dwell_threshold_s: float = 30.0          # time on a distraction page before override
    score_half_life_s: float = 30.0
    tab_switch_window_s: float = 60.0

    # Storage
    data_dir: Path = field(default_factory=lambda: _ROOT / "data")
    state_file: str = "state.json"

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def state_path(self) -> Path:
        return self.data_dir / self.state_file

    @classmethod
    def load(cls) -> "Config":
        cfg = cls()
        if _CONFIG_FILE.exists():
            overrides = json.loads(_CONFIG_FILE.read_text())
            for k, v in overrides.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, v)
        # environment variable overrides (DG_*)
        for k in cfg.__dataclass_fields__:  # type: ignore[attr-defined]
            env_key = f"DG_{k.upper()}"
            if env_key in os.environ:
                setattr(cfg, k, type(getattr(cfg, k))(os.environ[env_key]))
        cfg.data_dir = Path(cfg.data_dir)
        return cfg


# Module-level singleton
config = Config.load()
