"""Unit tests for nbdbridge.logsetup."""

import logging
import logging.handlers
from unittest.mock import patch

import pytest

from nbdbridge.logsetup import use_syslog, using_syslog


@pytest.fixture
def root_handlers():
    root = logging.getLogger()
    saved = list(root.handlers)
    for handler in saved:
        root.removeHandler(handler)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved:
        root.addHandler(handler)


class TestUseSyslog:
    @patch("nbdbridge.logsetup.logging.handlers.SysLogHandler")
    def test_replaces_handlers_with_syslog(self, mock_handler_cls, root_handlers):
        mock_handler_cls.return_value = logging.NullHandler()
        stderr_handler = logging.StreamHandler()
        root_handlers.addHandler(stderr_handler)

        use_syslog("/dev/log")

        mock_handler_cls.assert_called_once_with(address="/dev/log")
        assert mock_handler_cls.return_value in root_handlers.handlers
        assert stderr_handler not in root_handlers.handlers

    def test_using_syslog_detects_handler(self, root_handlers):
        assert using_syslog() is False
        root_handlers.addHandler(logging.handlers.SysLogHandler(address=("localhost", 514)))
        assert using_syslog() is True
