"""Unit tests for nbdbridge.cli."""

from unittest.mock import MagicMock, patch

import pytest

from nbdbridge import __version__
from nbdbridge.cli import entrypoint, main
from nbdbridge.errors import DeviceLookupError, ReadinessTimeoutError


# ---------------------------------------------------------------------------
# main() — exit status
# ---------------------------------------------------------------------------


class TestMainExitStatus:
    def test_returns_zero_on_success(self):
        with patch("nbdbridge.cli.trampoline.run", return_value=0) as mock_run:
            assert main(["-f", "mybucket", "/dev/nbd0"]) == 0
        mock_run.assert_called_once_with(["-f", "mybucket", "/dev/nbd0"])

    def test_usage_error_prints_usage_and_returns_one(self, capsys):
        with patch("nbdbridge.cli.trampoline.run", return_value=2):
            assert main(["--bogus", "mybucket", "/dev/nbd0"]) == 1
        assert "usage: nbdbridge" in capsys.readouterr().err

    def test_fatal_error_is_printed(self, capsys):
        error = DeviceLookupError("/dev/nbd9: No such file or directory")
        with patch("nbdbridge.cli.trampoline.run", side_effect=error):
            assert main(["mybucket", "/dev/nbd9"]) == 1
        assert capsys.readouterr().err == "Error: /dev/nbd9: No such file or directory\n"

    def test_fatal_error_is_logged_once_on_syslog(self, capsys):
        error = ReadinessTimeoutError("nbdkit failed to start within 1000ms")
        with patch("nbdbridge.cli.trampoline.run", side_effect=error):
            with patch("nbdbridge.cli.using_syslog", return_value=True):
                with patch("nbdbridge.cli.log") as mock_log:
                    assert main(["mybucket", "/dev/nbd0"]) == 1
        mock_log.error.assert_called_once_with("%s", error)
        assert capsys.readouterr().err == ""

    def test_reads_sys_argv_when_not_given(self):
        with patch("nbdbridge.cli.trampoline.run", return_value=0) as mock_run:
            with patch("sys.argv", ["nbdbridge", "mybucket", "/dev/nbd0"]):
                main()
        mock_run.assert_called_once_with(["mybucket", "/dev/nbd0"])


# ---------------------------------------------------------------------------
# main() — informational flags
# ---------------------------------------------------------------------------


class TestInformationalFlags:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_help_lists_nbd_flags(self, capsys):
        with patch("nbdbridge.cli.trampoline.run") as mock_run:
            with pytest.raises(SystemExit):
                main(["-f", "-h", "mybucket", "/dev/nbd0"])
        out = capsys.readouterr().out
        assert "--nbd-param" in out
        assert "--nbd-client-flag" in out
        mock_run.assert_not_called()

    def test_help_after_positionals_is_not_special(self):
        with patch("nbdbridge.cli.trampoline.run", return_value=2) as mock_run:
            assert main(["mybucket", "/dev/nbd0", "-h"]) == 1
        mock_run.assert_called_once()


class TestEntrypoint:
    def test_raises_system_exit_with_status(self):
        with patch("nbdbridge.cli.main", MagicMock(return_value=1)):
            with pytest.raises(SystemExit) as exc_info:
                entrypoint()
        assert exc_info.value.code == 1
