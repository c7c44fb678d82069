"""Tests for prompts and the step tracker (npminitlib_cli.ui)."""

import pytest

from npminitlib_cli import ui
from npminitlib_cli.ui import KeypressConfirmer, PresetConfirmer, StepTracker


def _keys(monkeypatch, *keys):
    pressed = iter(keys)
    monkeypatch.setattr(ui.readchar, "readkey", lambda: next(pressed))


class TestKeypressConfirmer:
    def test_yes(self, monkeypatch):
        _keys(monkeypatch, "y")
        assert KeypressConfirmer().confirm("install", "Install?") is True

    def test_uppercase_no(self, monkeypatch):
        _keys(monkeypatch, "N")
        assert KeypressConfirmer().confirm("install", "Install?") is False

    def test_other_keys_are_ignored(self, monkeypatch):
        _keys(monkeypatch, "x", "\r", " ", "n")
        assert KeypressConfirmer().confirm("remote", "Create?") is False

    def test_ctrl_c_interrupts(self, monkeypatch):
        _keys(monkeypatch, ui.readchar.key.CTRL_C)
        with pytest.raises(KeyboardInterrupt):
            KeypressConfirmer().confirm("remote", "Create?")


class TestPresetConfirmer:
    def test_answers_from_mapping(self):
        confirmer = PresetConfirmer({"install": True, "repo_name": "foo"})
        assert confirmer.confirm("install", "Install?") is True
        assert confirmer.ask("repo_name", "Name?", "bar") == "foo"
        assert confirmer.asked == ["install", "repo_name"]

    def test_none_falls_through_to_fallback(self):
        fallback = PresetConfirmer({"install": False, "repo_name": "typed"})
        confirmer = PresetConfirmer({"install": None, "repo_name": None}, fallback=fallback)
        assert confirmer.confirm("install", "Install?") is False
        assert confirmer.ask("repo_name", "Name?") == "typed"
        assert fallback.asked == ["install", "repo_name"]

    def test_unanswered_without_fallback(self):
        with pytest.raises(LookupError, match="release"):
            PresetConfirmer({}).confirm("release", "Configure?")


class TestStepTracker:
    def test_status_transitions(self):
        tracker = StepTracker("Init")
        tracker.add("git", "Initialize git repository")
        assert tracker.status("git") == "pending"
        tracker.start("git")
        assert tracker.status("git") == "running"
        tracker.error("git", "init failed")
        assert tracker.status("git") == "error"
        assert tracker.steps[0]["detail"] == "init failed"

    def test_add_is_idempotent(self):
        tracker = StepTracker("Init")
        tracker.add("git", "Git")
        tracker.add("git", "Git again")
        assert len(tracker.steps) == 1

    def test_unknown_key_is_added(self):
        tracker = StepTracker("Init")
        tracker.skip("editor", "--no-editor")
        assert tracker.status("editor") == "skipped"
        assert tracker.status("missing") is None

    def test_render_lists_steps(self):
        tracker = StepTracker("Init")
        tracker.add("git", "Initialize git repository")
        tracker.complete("git", "initial commit")
        tree = tracker.render()
        assert len(tree.children) == 1
        assert "Initialize git repository" in str(tree.children[0].label)
