"""Logging setup and the switch to background operation."""

import logging
import logging.handlers
import os

SYSLOG_ADDRESS = "/dev/log"
LOG_FORMAT = "%(name)s %(levelname)s: %(message)s"


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
    )


def use_syslog(address: str = SYSLOG_ADDRESS) -> None:
    """Replace the root logger's handlers with a syslog handler."""
    root = logging.getLogger()
    handler = logging.handlers.SysLogHandler(address=address)
    handler.setFormatter(logging.Formatter("nbdbridge[%(process)d]: " + LOG_FORMAT))
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.addHandler(handler)


def using_syslog() -> bool:
    return any(
        isinstance(h, logging.handlers.SysLogHandler) for h in logging.getLogger().handlers
    )


def daemonize() -> None:
    """Detach from the controlling terminal, like daemon(0, 0)."""
    if os.fork() != 0:
        os._exit(0)
    os.setsid()
    os.chdir("/")
    devnull = os.open(os.devnull, os.O_RDWR)
    for fd in (0, 1, 2):
        os.dup2(devnull, fd)
    if devnull > 2:
        os.close(devnull)
