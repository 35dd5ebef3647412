import logging
from logging.handlers import RotatingFileHandler

import pytest

from gambiteditor import logging_utils


@pytest.fixture(autouse=True)
def _isolated_logging(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_utils, "LOG_DIR", str(tmp_path / "logs"))
    yield
    lg = logging.getLogger("gambiteditor")
    for h in list(lg.handlers):
        lg.removeHandler(h)
        h.close()
    lg.setLevel(logging.NOTSET)


def test_setup_logging_is_idempotent(tmp_path):
    first = logging_utils.setup_logging()
    second = logging_utils.setup_logging(logging.INFO)

    assert first is second
    assert first.name == "gambiteditor"
    assert first.level == logging.INFO
    assert sum(isinstance(h, RotatingFileHandler) for h in first.handlers) == 1
    assert sum(type(h) is logging.StreamHandler for h in first.handlers) == 1
    assert (tmp_path / "logs" / "app.log").exists()


def test_module_loggers_reach_the_file(tmp_path):
    logging_utils.setup_logging()
    logging.getLogger("gambiteditor.importer").warning("Import: Golem.gambitPack: missing")
    for h in logging.getLogger("gambiteditor").handlers:
        h.flush()
    assert "Golem.gambitPack: missing" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
