# tests/test_logger_utils.py
import logging

from postinstall.logger_utils import LOG_FILENAME, default_log_file, setup_logger


def _file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def test_default_log_file_follows_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_log_file() == tmp_path / ".config" / "fedora-postinstall" / LOG_FILENAME


def test_file_logging_writes_to_given_path(tmp_path):
    log_file = tmp_path / "logs" / "run.log"

    logger = setup_logger(log_file_path=log_file)
    logger.info("hello")

    assert len(_file_handlers(logger)) == 1
    assert "hello" in log_file.read_text()
    setup_logger(log_to_file=False)


def test_unopenable_log_file_disables_file_logging(tmp_path, capsys):
    blocked = tmp_path / "run.log"
    blocked.mkdir()

    logger = setup_logger(log_file_path=blocked)

    assert _file_handlers(logger) == []
    assert logger.handlers
    assert "File logging disabled" in capsys.readouterr().err


def test_reconfiguring_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logger(log_file_path=log_file)
    logger = setup_logger(log_file_path=log_file, log_level=logging.DEBUG)

    assert len(_file_handlers(logger)) == 1
    assert logger.level == logging.DEBUG
    setup_logger(log_to_file=False)
