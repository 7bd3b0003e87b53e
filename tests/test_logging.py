import logging

import pytest

from interview_coach.utils import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_writes_to_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "interview.log"

    assert setup_logging(str(log_file), "info") == str(log_file)
    logging.getLogger("orchestrator").info("Question 1/5 issued")
    logging.getLogger("orchestrator").debug("not written at INFO")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "INFO orchestrator - Question 1/5 issued" in content
    assert "not written at INFO" not in content
    assert logging.getLogger("urllib3").level == logging.WARNING
