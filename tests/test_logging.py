import logging

from rich.logging import RichHandler

from sshsession.core.logging import get_logger, setup_logging


class TestSetupLogging:
    def test_package_logger_configured(self):
        setup_logging(level="debug")
        logger = logging.getLogger("sshsession")
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in logger.handlers)
        assert logger.propagate is False

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "session.log"
        setup_logging(level="INFO", log_file=log_file)

        get_logger("sshsession.client").info("Connected to host1 as alice")
        for handler in logging.getLogger("sshsession").handlers:
            handler.flush()

        assert "Connected to host1 as alice" in log_file.read_text()

    def test_unknown_level_defaults_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger("sshsession").level == logging.INFO
