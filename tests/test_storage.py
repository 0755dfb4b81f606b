"""Tests for the durable state store."""

import json

import pytest

from driftguard.storage import DEFAULTS, StateStore


class TestStateStore:
    def test_missing_file_reads_defaults(self, tmp_path):
        store = StateStore(tmp_path / "state.json")
        assert store.load() == DEFAULTS

    def test_update_persists_to_disk(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path).update({"focusMode": "casual", "enabled": False})
        saved = json.loads(path.read_text())
        assert saved["focusMode"] == "casual"
        assert saved["enabled"] is False
        assert StateStore(path).load()["focusMode"] == "casual"

    def test_unknown_keys_are_ignored(self, tmp_path):
        store = StateStore(tmp_path / "state.json")
        data = store.update({"score": 7, "customProductive": ["a.com"]})
        assert "score" not in data
        assert data["customProductive"] == ["a.com"]

    def test_load_selected_keys(self, tmp_path):
        store = StateStore(tmp_path / "state.json")
        assert store.load(["enabled", "focusMode"]) == {"enabled": True, "focusMode": "deep-work"}

    def test_malformed_file_reads_defaults(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        assert StateStore(path).load() == DEFAULTS

    def test_non_object_file_reads_defaults(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2, 3]")
        assert StateStore(path).load() == DEFAULTS

    def test_reload_picks_up_external_edits(self, tmp_path):
        path = tmp_path / "state.json"
        store = StateStore(path)
        store.update({"customDistraction": []})
        path.write_text(json.dumps({"customDistraction": ["news.ycombinator.com"]}))
        assert store.load()["customDistraction"] == []
        assert store.reload()["customDistraction"] == ["news.ycombinator.com"]

    def test_defaults_are_not_shared(self, tmp_path):
        store = StateStore(tmp_path / "state.json")
        store.load()["customProductive"].append("x.com")
        assert store.load()["customProductive"] == []

    def test_update_leaves_no_temp_file(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path).update({"focusMode": "research"})
        assert json.loads(path.read_text())["focusMode"] == "research"
        assert list(tmp_path.iterdir()) == [path]

    def test_failed_write_keeps_previous_file(self, tmp_path, monkeypatch):
        path = tmp_path / "state.json"
        store = StateStore(path)
        store.update({"focusMode": "casual"})

        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("driftguard.storage.os.replace", boom)
        with pytest.raises(OSError):
            store.update({"focusMode": "research"})
        assert json.loads(path.read_text())["focusMode"] == "casual"
        assert not (tmp_path / "state.json.tmp").exists()
