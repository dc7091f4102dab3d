import logging

from singcoach.utils.logging import get_logger, setup_logging


def test_setup_logging_configures_package_logger():
    logger = setup_logging(level="DEBUG")
    assert logger.name == "singcoach"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_setup_logging_replaces_handlers_and_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "singcoach.log"
    setup_logging(level="INFO")
    logger = setup_logging(level="INFO", log_file=log_file, verbose=True)
    assert len(logger.handlers) == 2

    get_logger("singcoach.test").info("hello log")
    for handler in logger.handlers:
        handler.flush()
    assert "hello log" in log_file.read_text()


def test_get_logger_default_name():
    assert get_logger().name == "singcoach"
