"""Bounded registry of child processes with spawn, wait and kill primitives."""

import logging
import os
import signal

from nbdbridge.errors import NbdBridgeError, RegistryFullError, SpawnError
from nbdbridge.models import TranslatedCommand, WaitKind, WaitOutcome
from nbdbridge.signals import SignalBridge

log = logging.getLogger(__name__)

MAX_CHILD_PROCESSES = 10
EXEC_FAILED_STATUS = 127


class ChildSupervisor:
    """Owns every child process this run starts.

    Only the main loop touches the registry. Signal handlers reach it
    indirectly through the SignalBridge flag.
    """

    def __init__(self, signals: SignalBridge, capacity: int = MAX_CHILD_PROCESSES) -> None:
        self._signals = signals
        self._capacity = capacity
        self._children: list[int] = []

    @property
    def children(self) -> tuple[int, ...]:
        return tuple(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def spawn(self, command: TranslatedCommand) -> int:
        """Fork and exec ``command``, returning the child's pid."""
        exe = command.executable
        if len(self._children) >= self._capacity:
            raise RegistryFullError(
                f"cannot start {exe}: already supervising {len(self._children)} processes"
            )

        log.debug("executing %s with these parameters:", exe)
        for i, arg in enumerate(command.argv):
            log.debug('  [%02d] "%s"', i, arg)

        # The write end is close-on-exec, so the parent reads EOF once exec succeeds.
        err_r, err_w = os.pipe()
        try:
            pid = os.fork()
        except OSError as e:
            os.close(err_r)
            os.close(err_w)
            raise SpawnError(f"{exe}: {e.strerror}") from e

        if pid == 0:
            try:
                os.close(err_r)
                # The interpreter ignores these at startup; helpers expect the defaults.
                signal.signal(signal.SIGPIPE, signal.SIG_DFL)
                signal.signal(signal.SIGXFSZ, signal.SIG_DFL)
                os.execvp(exe, list(command.argv))
            except OSError as e:
                os.write(err_w, str(e.errno).encode())
            finally:
                os._exit(EXEC_FAILED_STATUS)

        os.close(err_w)
        with os.fdopen(err_r, "rb") as pipe:
            failure = pipe.read()
        if failure:
            os.waitpid(pid, 0)
            raise SpawnError(f"{exe}: {os.strerror(int(failure))}")

        self._children.append(pid)
        log.debug("started %s as process %d", exe, pid)
        return pid

    def _record_exit(self, pid: int) -> None:
        if pid in self._children:
            self._children.remove(pid)
            log.debug("reaped child %d", pid)
        else:
            log.debug("reaped unregistered process %d", pid)

    def wait_for_any(self, block_if_empty: bool) -> WaitOutcome:
        """Wait for a registered child to exit or a termination signal to arrive.

        With no children left this returns NONE_LEFT right away unless
        ``block_if_empty`` is set, in which case only a signal ends the wait.
        """
        while True:
            if self._signals.consume():
                log.debug("got signal %s while waiting", self._signals.last_signal)
                return WaitOutcome.interrupted()

            if not self._children:
                if not block_if_empty:
                    return WaitOutcome.none_left()
                self._signals.wait()
                continue

            try:
                pid, status = os.waitpid(-1, os.WNOHANG)
            except ChildProcessError as e:
                raise NbdBridgeError(
                    f"waitpid: no child processes, expected {self._children}"
                ) from e
            if pid == 0:
                self._signals.wait()
                continue

            self._record_exit(pid)
            return WaitOutcome.exited(pid, status)

    def kill_all_except(self, keep: int | None) -> None:
        """Send SIGTERM to every registered child other than ``keep``."""
        for pid in self._children:
            if pid == keep:
                continue
            log.debug("killing child %d", pid)
            try:
                os.kill(pid, signal.SIGTERM)
            except OSError as e:
                log.debug("kill(%d, SIGTERM): %s", pid, e)

    def terminate_all(self) -> None:
        """Kill and reap every registered child."""
        self.kill_all_except(None)
        while self.wait_for_any(block_if_empty=False).kind is not WaitKind.NONE_LEFT:
            pass
