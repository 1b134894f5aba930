"""Tests for ``python -m nbdbridge``."""

import runpy
from unittest.mock import patch

import pytest


@pytest.mark.parametrize("status", [0, 1])
def test_module_exits_with_cli_status(status) -> None:
    with patch("nbdbridge.cli.main", return_value=status) as mock_main:
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("nbdbridge", run_name="__main__", alter_sys=True)

    assert exc_info.value.code == status
    mock_main.assert_called_once_with()
