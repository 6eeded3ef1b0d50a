from __future__ import annotations

import logging
from pathlib import Path

from space_explorer.app.services.logger import configure_logging


def test_configure_logging_splits_app_and_gameplay_logs(tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"
    logs_dir.mkdir()
    (logs_dir / "latest.log").write_text("previous run\n", encoding="utf-8")

    bundle = configure_logging(logs_dir, level=logging.DEBUG)
    logging.getLogger("space_explorer.core.session").debug("engine line")
    bundle.gameplay.info("Wave 1 started")
    for handler in bundle.app.handlers + bundle.gameplay.handlers:
        handler.flush()

    assert bundle.latest_log_path == logs_dir / "latest.log"
    assert len(list(logs_dir.glob("latest_*.log"))) == 1
    assert "engine line" in bundle.latest_log_path.read_text(encoding="utf-8")
    assert "Wave 1 started" in (logs_dir / "gameplay.log").read_text(encoding="utf-8")
    assert "Wave 1 started" not in bundle.latest_log_path.read_text(encoding="utf-8")

    bundle.close()
    assert bundle.app.handlers == []
    assert bundle.app.propagate is True
