"""Tests for the logging setup."""

from loguru import logger

from tradesim.utils.logger import (
    HOT_PATH_MODULES,
    LogLevel,
    get_logger,
    log_config,
    setup_development_logging,
    setup_production_logging,
    setup_quiet_logging,
)


def test_modes_switch_console_level():
    setup_development_logging()
    assert log_config.current_level is LogLevel.VERBOSE

    setup_quiet_logging()
    assert log_config.current_level is LogLevel.QUIET
    for module in HOT_PATH_MODULES:
        logger.enable(module)

    setup_production_logging()
    assert log_config.current_level is LogLevel.NORMAL


def test_file_logging(tmp_path):
    log_file = tmp_path / "tradesim.log"
    handler_id = log_config.add_file_logging(str(log_file))
    try:
        get_logger('test').info("file sink check")
    finally:
        logger.remove(handler_id)

    assert "file sink check" in log_file.read_text()


def test_get_logger_binds_component():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        get_logger('tick_pipeline').info("bound")
    finally:
        logger.remove(handler_id)

    assert records[0]['extra']['component'] == 'tick_pipeline'
