import logging

from drawerlayout.logging_config import setup_logging


def test_setup_logging_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "layout.log"
    setup_logging(logging.DEBUG, log_file=str(log_file))
    setup_logging(logging.DEBUG, log_file=str(log_file))
    logger = logging.getLogger("drawerlayout")
    assert len(logger.handlers) == 2

    logging.getLogger("drawerlayout.session").warning("hello from session")
    for handler in logger.handlers:
        handler.flush()
    assert "drawerlayout.session - WARNING - hello from session" in log_file.read_text(encoding="utf-8")

    setup_logging(logging.INFO)
    assert len(logger.handlers) == 1


def test_setup_logging_closes_replaced_file_handler(tmp_path):
    setup_logging(logging.INFO, log_file=str(tmp_path / "first.log"))
    old_handlers = list(logging.getLogger("drawerlayout").handlers)
    setup_logging(logging.INFO)
    file_handlers = [h for h in old_handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].stream is None
