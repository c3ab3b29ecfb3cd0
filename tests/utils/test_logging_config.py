import logging
import pytest
from utils.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_verbosity_zero_is_silent():
    setup_logging(verbosity=0)
    root = logging.getLogger()
    assert root.handlers == []
    assert root.level > logging.CRITICAL


@pytest.mark.parametrize("verbosity,level", [(1, logging.INFO), (2, logging.DEBUG), (3, logging.DEBUG)])
def test_verbosity_levels(verbosity, level):
    setup_logging(verbosity=verbosity)
    root = logging.getLogger()
    assert root.level == level
    assert len(root.handlers) == 1


def test_logfile_captures_info_when_console_is_silent(tmp_path):
    logfile = tmp_path / "watchsync.log"
    setup_logging(verbosity=0, logfile=str(logfile))
    logging.getLogger("watchsync.test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello from the test" in logfile.read_text(encoding="utf-8")


def test_noisy_libraries_quieted():
    setup_logging(verbosity=1)
    assert logging.getLogger("urllib3").level == logging.WARNING
