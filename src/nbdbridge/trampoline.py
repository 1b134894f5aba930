"""Start nbdkit and nbd-client, supervise them, and tear both down in order."""

import logging
import sys

from nbdbridge.config import load_settings
from nbdbridge.errors import NbdBridgeError, ReadinessTimeoutError, TranslationError
from nbdbridge.logsetup import configure_logging, daemonize, use_syslog
from nbdbridge.models import BridgeConfig, BridgeSettings, WaitKind, WaitOutcome
from nbdbridge.readiness import await_artifact
from nbdbridge.shutdown import ShutdownSequencer
from nbdbridge.signals import SignalBridge
from nbdbridge.socket_path import prepare_socket_path, remove_socket_path, resolve_socket_path
from nbdbridge.supervisor import ChildSupervisor
from nbdbridge.translate import (
    build_client_command,
    build_disconnect_command,
    build_server_command,
    parse_arguments,
)

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2


def _detach_from_launcher(
    config: BridgeConfig, settings: BridgeSettings, supervisor: ChildSupervisor, server_pid: int
) -> None:
    """Wait for nbdkit to fork into the background, then daemonize ourselves."""
    outcome = supervisor.wait_for_any(block_if_empty=False)
    if outcome.kind is WaitKind.INTERRUPTED:
        raise NbdBridgeError("got signal during setup")
    if outcome.pid != server_pid:
        raise NbdBridgeError(
            f"unexpected wait result while starting {settings.nbdkit_executable}: {outcome}"
        )
    if outcome.exit_code != 0:
        raise NbdBridgeError(
            f"{settings.nbdkit_executable} exited with status {outcome.exit_code}"
        )

    print(f"connecting {config.bucket} to {config.device}", file=sys.stderr)
    daemonize()
    use_syslog()


def start(
    config: BridgeConfig, settings: BridgeSettings, supervisor: ChildSupervisor, socket_path: str
) -> int:
    """Launch nbdkit, wait for its socket, then launch nbd-client. Returns the client pid."""
    server_pid = supervisor.spawn(build_server_command(config, socket_path, settings))

    if not config.foreground:
        _detach_from_launcher(config, settings, supervisor, server_pid)

    if not await_artifact(socket_path, settings.startup_poll_ms, settings.startup_max_wait_ms):
        raise ReadinessTimeoutError(
            f"{settings.nbdkit_executable} failed to start within {settings.startup_max_wait_ms}ms"
        )

    return supervisor.spawn(build_client_command(config, socket_path, settings))


def supervise(
    supervisor: ChildSupervisor, client_pid: int | None, block_if_empty: bool
) -> WaitOutcome:
    """Wait until the server exits or a signal arrives; nbd-client exiting is expected."""
    while True:
        outcome = supervisor.wait_for_any(block_if_empty)
        if client_pid is not None and outcome.pid == client_pid:
            log.debug("nbd-client process %d exited with status %s", client_pid, outcome.exit_code)
            client_pid = None
            continue
        log.debug("shutting down after %s", outcome)
        return outcome


def run(argv: list[str], settings: BridgeSettings | None = None) -> int:
    """Run the whole trampoline. Returns EXIT_USAGE for command-line errors."""
    if settings is None:
        settings = load_settings()
    try:
        config = parse_arguments(argv, settings)
    except TranslationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    configure_logging(config.debug)

    socket_path = resolve_socket_path(config.device, settings.socket_dir)
    prepare_socket_path(socket_path)

    with SignalBridge() as signals:
        supervisor = ChildSupervisor(signals, capacity=settings.max_child_processes)
        try:
            client_pid = start(config, settings, supervisor, socket_path)
        except NbdBridgeError:
            supervisor.terminate_all()
            remove_socket_path(socket_path)
            raise

        supervise(supervisor, client_pid, block_if_empty=not config.foreground)
        sequencer = ShutdownSequencer(
            supervisor, build_disconnect_command(config, settings), socket_path
        )
        sequencer.run()

    return EXIT_OK
