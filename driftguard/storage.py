"""
Durable state store: persisted to data/state.json.

Holds only the durable tier: enabled flag, focus mode, daily stats and the
custom domain lists. Missing keys read as their defaults; a malformed file
reads as all defaults.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "enabled": True,
    "focusMode": "deep-work",
    "stats": None,                # fresh stats for today are built on load
    "customProductive": [],
    "customDistraction": [],
}


class StateStore:

    def __init__(self, path: Path):
        self.path = Path(path)
        self._current: Dict[str, Any] = {}

    def load(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Return a copy of the stored values (defaults filled in)."""
        if not self._current:
            self._read()
        data = copy.deepcopy(self._current)
        if keys is None:
            return data
        return {k: data.get(k) for k in keys}

    def update(self, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Apply *patch* (unknown keys ignored), persist to disk, return everything."""
        if not self._current:
            self._read()
        for k, v in patch.items():
            if k in DEFAULTS:
                self._current[k] = v
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write_atomic(json.dumps(self._current, indent=2))
        return dict(self._current)

    def _write_atomic(self, content: str) -> None:
        """Write to a sibling temp file, then rename over the state file."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def reload(self) -> Dict[str, Any]:
        self._current = {}
        return self.load()

    def _read(self) -> None:
        self._current = {k: (list(v) if isinstance(v, list) else v) for k, v in DEFAULTS.items()}
        if not self.path.exists():
            return
        try:
            saved = json.loads(self.path.read_text())
        except (OSError, ValueError):
            logger.warning("State file %s is unreadable; using defaults", self.path)
            return
        if not isinstance(saved, dict):
            logger.warning("State file %s is not an object; using defaults", self.path)
            return
        for k, v in saved.items():
            if k in DEFAULTS:
                self._current[k] = v
