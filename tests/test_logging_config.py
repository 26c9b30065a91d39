"""
Tests for the logging setup.
"""

import logging
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler

from wondrlab_crm.app.core.logging_config import NOISY_LOGGERS, resolve_level, setup_logging


@contextmanager
def bare_root():
    """Root logger without handlers; handlers and levels are restored on exit.

    pytest attaches its capture handlers per test phase, so this must
    run inside the test body rather than in a fixture.
    """
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    noisy_levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    root.handlers = []
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = handlers
        root.setLevel(level)
        for name, noisy_level in noisy_levels.items():
            logging.getLogger(name).setLevel(noisy_level)


def test_resolve_level():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("WARNING") == logging.WARNING
    assert resolve_level("chatty") == logging.INFO


def test_console_and_rotating_file(tmp_path):
    logfile = tmp_path / "logs" / "crm.log"
    with bare_root() as root:
        assert setup_logging("warning", str(logfile), max_bytes=1024, backup_count=2) is True

        assert root.level == logging.WARNING
        file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024
        assert file_handlers[0].backupCount == 2
        assert logfile.parent.is_dir()

        logging.getLogger("wondrlab_crm.test").warning("client %s updated", 7)
        file_handlers[0].flush()
        assert "[WARNING] wondrlab_crm.test: client 7 updated" in logfile.read_text(encoding="utf-8")


def test_noisy_loggers_quieted_unless_debug():
    with bare_root():
        setup_logging("INFO")
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_debug_leaves_noisy_loggers_alone():
    with bare_root():
        logging.getLogger("httpx").setLevel(logging.NOTSET)
        setup_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.NOTSET


def test_second_call_is_ignored():
    with bare_root() as root:
        assert setup_logging("INFO") is True
        handlers = root.handlers[:]
        assert setup_logging("DEBUG") is False
        assert root.handlers == handlers
        assert root.level == logging.INFO
