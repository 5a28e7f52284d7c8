import logging

from task_service.config import Settings
from task_service.logger import configure_logging, logger
from task_service.main import create_app


def test_configure_logging_uses_settings_level():
    configure_logging(Settings(_env_file=None, log_level="DEBUG"))
    assert logger.level == logging.DEBUG

    configure_logging(Settings(_env_file=None, log_level="warning"))
    assert logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    configure_logging(Settings(_env_file=None, log_level="chatty"))
    assert logger.level == logging.INFO


def test_sql_logging_quiet_unless_debug():
    configure_logging(Settings(_env_file=None, debug=False))
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_create_app_configures_logging(database):
    create_app(Settings(_env_file=None, database_url="sqlite://", log_level="ERROR"), database=database)
    assert logger.level == logging.ERROR
    configure_logging(Settings(_env_file=None))
