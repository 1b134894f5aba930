"""Locate the UNIX socket that connects nbdkit to nbd-client."""

import errno
import logging
import os

from nbdbridge.errors import DeviceLookupError, InsufficientPrivilegeError, NbdBridgeError

log = logging.getLogger(__name__)

# Hex digits in a 64-bit dev_t and ino_t.
DEV_HEX_WIDTH = 16
INO_HEX_WIDTH = 16


def socket_name(st_dev: int, st_ino: int) -> str:
    return f"{st_dev:0{DEV_HEX_WIDTH}x}_{st_ino:0{INO_HEX_WIDTH}x}"


def resolve_socket_path(device: str, socket_dir: str) -> str:
    """Return the socket path uniquely corresponding to the block device ``device``."""
    try:
        sb = os.stat(device)
    except OSError as e:
        raise DeviceLookupError(f"{device}: {e.strerror}") from e
    path = os.path.join(socket_dir, socket_name(sb.st_dev, sb.st_ino))
    log.debug("socket for %s is %s", device, path)
    return path


def remove_socket_path(path: str) -> None:
    """Delete the socket file if present."""
    try:
        os.unlink(path)
        log.debug("removed %s", path)
    except OSError as e:
        if e.errno != errno.ENOENT:
            log.debug("could not remove %s: %s", path, e)


def prepare_socket_path(path: str) -> None:
    """Delete a leftover socket from a previous run and check we may use ``path``."""
    remove_socket_path(path)
    try:
        os.stat(path)
    except FileNotFoundError:
        return
    except PermissionError as e:
        raise InsufficientPrivilegeError(
            f"{path}: nbdbridge must be run as root"
        ) from e
    except OSError as e:
        raise NbdBridgeError(f"{path}: {e.strerror}") from e
