"""Unit tests for nbdbridge.shutdown."""

from unittest.mock import MagicMock, call

import pytest

from nbdbridge.errors import SpawnError
from nbdbridge.models import TranslatedCommand, WaitOutcome
from nbdbridge.shutdown import ShutdownSequencer, ShutdownState

DISCONNECT = TranslatedCommand("nbd-client", ("nbd-client", "-d", "/dev/nbd0"))


def _supervisor(*outcomes):
    supervisor = MagicMock()
    supervisor.spawn.return_value = 4242
    supervisor.wait_for_any.side_effect = list(outcomes) + [WaitOutcome.none_left()]
    return supervisor


class TestShutdownSequencer:
    def test_runs_steps_in_order(self, tmp_path):
        sock = tmp_path / "sock"
        sock.touch()
        supervisor = _supervisor(WaitOutcome.exited(100, 0), WaitOutcome.exited(4242, 0))
        sequencer = ShutdownSequencer(supervisor, DISCONNECT, str(sock))

        sequencer.run()

        assert supervisor.method_calls == [
            call.spawn(DISCONNECT),
            call.kill_all_except(4242),
            call.wait_for_any(block_if_empty=False),
            call.wait_for_any(block_if_empty=False),
            call.wait_for_any(block_if_empty=False),
        ]
        assert sequencer.state is ShutdownState.DONE
        assert not sock.exists()

    def test_interrupts_during_reaping_are_ignored(self, tmp_path):
        supervisor = _supervisor(WaitOutcome.interrupted(), WaitOutcome.exited(4242, 0))
        sequencer = ShutdownSequencer(supervisor, DISCONNECT, str(tmp_path / "sock"))
        sequencer.run()
        assert supervisor.wait_for_any.call_count == 3
        assert sequencer.state is ShutdownState.DONE

    def test_disconnect_spawn_failure_still_cleans_up(self, tmp_path):
        sock = tmp_path / "sock"
        sock.touch()
        supervisor = _supervisor(WaitOutcome.exited(100, 0))
        supervisor.spawn.side_effect = SpawnError("nbd-client: No such file or directory")
        sequencer = ShutdownSequencer(supervisor, DISCONNECT, str(sock))

        with pytest.raises(SpawnError):
            sequencer.run()

        supervisor.kill_all_except.assert_called_once_with(None)
        assert sequencer.state is ShutdownState.DONE
        assert not sock.exists()

    def test_cannot_run_twice(self, tmp_path):
        sequencer = ShutdownSequencer(_supervisor(), DISCONNECT, str(tmp_path / "sock"))
        sequencer.run()
        with pytest.raises(RuntimeError, match="already done"):
            sequencer.run()
