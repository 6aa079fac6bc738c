# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pocket_todo.logging_setup import setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_file_and_filters_console(
    tmp_path: Path, restore_root_logging, capsys: pytest.CaptureFixture[str]
) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.INFO)

    logging.getLogger("pocket_todo.tasks.task_store").info("own message")
    logging.getLogger("somelib").warning("third-party chatter")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "pocket_todo.log"
    content = log_file.read_text("utf-8")
    assert "own message" in content
    assert "third-party chatter" in content

    err = capsys.readouterr().err
    assert "own message" in err
    assert "third-party chatter" not in err
