from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "SpaceExplorer"
HOME_OVERRIDE_ENV = "SPACE_EXPLORER_HOME"


@dataclass(slots=True)
class UserPaths:
    root: Path
    saves: Path
    logs: Path
    config: Path

    @classmethod
    def under(cls, root: Path) -> "UserPaths":
        return cls(root=root, saves=root / "saves", logs=root / "logs", config=root / "config")

    @property
    def settings_file(self) -> Path:
        return self.config / "settings.json"

    def ensure(self) -> None:
        for directory in (self.saves, self.logs, self.config):
            directory.mkdir(parents=True, exist_ok=True)


def _candidate_roots(app_name: str) -> list[Path]:
    # An explicit override is used verbatim; the platform roots get the app folder appended.
    candidates: list[Path] = []
    override = os.environ.get(HOME_OVERRIDE_ENV)
    if override:
        candidates.append(Path(override))

    local_app_data = os.environ.get("LOCALAPPDATA")
    if local_app_data:
        candidates.append(Path(local_app_data) / app_name)

    candidates.append(Path.home() / app_name)
    return candidates


def resolve_user_paths(app_name: str = APP_DIR_NAME) -> UserPaths:
    """First candidate root whose saves/logs/config directories can be created."""
    last_error: OSError | None = None
    for root in _candidate_roots(app_name):
        paths = UserPaths.under(root)
        try:
            paths.ensure()
        except OSError as exc:
            last_error = exc
            continue
        return paths
    raise RuntimeError("Unable to initialize user data directories.") from last_error
