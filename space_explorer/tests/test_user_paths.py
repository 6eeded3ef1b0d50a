from __future__ import annotations

from pathlib import Path

from space_explorer.app.services import paths


def test_home_override_is_first_candidate(monkeypatch, tmp_path: Path) -> None:
    override = tmp_path / "Override"
    local = tmp_path / "LocalAppData"
    monkeypatch.setenv("SPACE_EXPLORER_HOME", str(override))
    monkeypatch.setenv("LOCALAPPDATA", str(local))

    roots = paths._candidate_roots(paths.APP_DIR_NAME)
    assert roots[0] == override
    assert roots[1] == local / paths.APP_DIR_NAME
    assert roots[-1] == Path.home() / paths.APP_DIR_NAME


def test_local_app_data_used_without_override(monkeypatch, tmp_path: Path) -> None:
    local = tmp_path / "LocalAppData"
    monkeypatch.delenv("SPACE_EXPLORER_HOME", raising=False)
    monkeypatch.setenv("LOCALAPPDATA", str(local))

    assert paths._candidate_roots(paths.APP_DIR_NAME)[0] == local / paths.APP_DIR_NAME


def test_resolve_user_paths_creates_runtime_directories(monkeypatch, tmp_path: Path) -> None:
    override = tmp_path / "SpaceExplorer"
    monkeypatch.setenv("SPACE_EXPLORER_HOME", str(override))

    resolved = paths.resolve_user_paths()
    assert resolved.root == override
    assert resolved.saves.exists()
    assert resolved.logs.exists()
    assert resolved.config.exists()
    assert resolved.settings_file == override / "config" / "settings.json"


def test_unusable_root_falls_through_to_next(monkeypatch, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    local = tmp_path / "LocalAppData"
    monkeypatch.setenv("SPACE_EXPLORER_HOME", str(blocker))
    monkeypatch.setenv("LOCALAPPDATA", str(local))

    resolved = paths.resolve_user_paths()
    assert resolved.root == local / paths.APP_DIR_NAME
