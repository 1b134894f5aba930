"""Turn termination signals into an event the supervision loop can wait on.

Signal handlers only set a flag. The Python-level handlers also make the
interpreter write the signal number to a wakeup pipe, so the main loop can
``select`` on that pipe to sleep until either a child exits (SIGCHLD) or a
termination signal arrives. All process management happens in the main loop.
"""

import logging
import os
import select
import signal

log = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGQUIT, signal.SIGTERM)


class SignalBridge:
    """Signal handlers plus a self-pipe, installed for the lifetime of a run."""

    def __init__(self, signals: tuple[int, ...] = TERMINATION_SIGNALS) -> None:
        self._signals = signals
        self._pending = False
        self.last_signal: int | None = None
        self._read_fd: int | None = None
        self._write_fd: int | None = None
        self._previous_handlers: dict[int, object] = {}
        self._previous_wakeup_fd = -1

    @property
    def pending(self) -> bool:
        return self._pending

    def install(self) -> None:
        if self._read_fd is not None:
            return
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self._previous_wakeup_fd = signal.set_wakeup_fd(
            self._write_fd, warn_on_full_buffer=False
        )
        for signum in self._signals:
            self._previous_handlers[signum] = signal.signal(signum, self._on_termination)
        self._previous_handlers[signal.SIGCHLD] = signal.signal(signal.SIGCHLD, self._on_child)

    def uninstall(self) -> None:
        if self._read_fd is None:
            return
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
        signal.set_wakeup_fd(self._previous_wakeup_fd)
        os.close(self._read_fd)
        os.close(self._write_fd)
        self._read_fd = self._write_fd = None

    def __enter__(self) -> "SignalBridge":
        self.install()
        return self

    def __exit__(self, *exc) -> None:
        self.uninstall()

    def _on_termination(self, signum, _frame) -> None:
        self.last_signal = signum
        self._pending = True

    def _on_child(self, _signum, _frame) -> None:
        # Nothing to do; the wakeup pipe is what matters.
        pass

    def consume(self) -> bool:
        """Return whether a termination signal is pending, clearing it."""
        if not self._pending:
            return False
        self._pending = False
        return True

    def wait(self, timeout: float | None = None) -> None:
        """Sleep until some signal is delivered (or ``timeout`` seconds pass)."""
        if self._read_fd is None:
            raise RuntimeError("signal bridge is not installed")
        if self._pending:
            return
        ready, _, _ = select.select([self._read_fd], [], [], timeout)
        if ready:
            self._drain()

    def _drain(self) -> None:
        while True:
            try:
                if not os.read(self._read_fd, 512):
                    return
            except BlockingIOError:
                return
