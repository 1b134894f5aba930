"""Orderly teardown: disconnect the device, kill the rest, reap, clean up."""

import logging
from enum import Enum

from nbdbridge.errors import SpawnError
from nbdbridge.models import TranslatedCommand, WaitKind
from nbdbridge.socket_path import remove_socket_path
from nbdbridge.supervisor import ChildSupervisor

log = logging.getLogger(__name__)


class ShutdownState(Enum):
    RUNNING = "running"
    DISCONNECTING = "disconnecting"
    KILLING = "killing"
    REAPING = "reaping"
    DONE = "done"


class ShutdownSequencer:
    """Runs the shutdown sequence once, always to completion."""

    def __init__(
        self,
        supervisor: ChildSupervisor,
        disconnect_command: TranslatedCommand,
        socket_path: str,
    ) -> None:
        self._supervisor = supervisor
        self._disconnect_command = disconnect_command
        self._socket_path = socket_path
        self.state = ShutdownState.RUNNING

    def _enter(self, state: ShutdownState) -> None:
        log.debug("shutdown: %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self) -> None:
        if self.state is not ShutdownState.RUNNING:
            raise RuntimeError(f"shutdown already {self.state.value}")

        # Detach the device even if nbd-client already exited on its own.
        self._enter(ShutdownState.DISCONNECTING)
        helper_pid = None
        spawn_error = None
        try:
            helper_pid = self._supervisor.spawn(self._disconnect_command)
        except SpawnError as e:
            log.error("could not disconnect device: %s", e)
            spawn_error = e

        self._enter(ShutdownState.KILLING)
        self._supervisor.kill_all_except(helper_pid)

        self._enter(ShutdownState.REAPING)
        while self._supervisor.wait_for_any(block_if_empty=False).kind is not WaitKind.NONE_LEFT:
            pass

        remove_socket_path(self._socket_path)
        self._enter(ShutdownState.DONE)
        if spawn_error is not None:
            raise spawn_error
