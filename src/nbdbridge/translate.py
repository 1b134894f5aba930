"""Translate nbdbridge command-line flags into nbdkit and nbd-client command lines."""

import logging

from nbdbridge.errors import TranslationError
from nbdbridge.flags import FlagKind, flag_kind
from nbdbridge.models import BridgeConfig, BridgeSettings, TranslatedCommand

log = logging.getLogger(__name__)

TERMINATOR = "--"
NBD_NAMESPACE = "--nbd"
EXIT_LAST_FILTER = "--filter=exitlast"

# --nbd-* flags that collect a verbatim value, keyed by flag name.
_NBD_LIST_FLAGS = {
    "--nbd-flag": "nbd_flags",
    "--nbd-param": "nbd_params",
    "--nbd-client-flag": "client_flags",
}


def _split_flag(token: str) -> tuple[str, str | None]:
    """Split ``--name=value`` into its name and optional value."""
    name, sep, value = token.partition("=")
    return name, (value if sep else None)


def _collect_nbd_flag(token: str, lists: dict[str, list[str]]) -> None:
    if token == NBD_NAMESPACE:
        return
    name, value = _split_flag(token)
    target = _NBD_LIST_FLAGS.get(name)
    if target is None or value is None:
        raise TranslationError(f'invalid flag "{token}"', token)
    lists[target].append(value)


def _plugin_param(token: str, prefix: str) -> tuple[str, str]:
    """Validate a ``--name[=value]`` plugin flag and return (name, nbdkit parameter)."""
    name, value = _split_flag(token[2:])
    kind = flag_kind(name)
    if kind is FlagKind.BOOLEAN:
        if value is not None and value.lower() != "true":
            raise TranslationError(f'boolean flag "--{name}" value must be "true"', token)
        value = "true"
    elif kind is FlagKind.VALUED:
        if value is None:
            raise TranslationError(f'flag "--{name}" requires a value', token)
    else:
        raise TranslationError(f'invalid flag "--{name}"', token)
    return name, f"{prefix}{name}={value}"


def parse_arguments(argv: list[str], settings: BridgeSettings) -> BridgeConfig:
    """Parse the trampoline command line into a BridgeConfig.

    Leading flags are consumed up to the first non-flag token or ``--``.
    Exactly two positional arguments must follow: the bucket and the device.
    """
    lists: dict[str, list[str]] = {name: [] for name in _NBD_LIST_FLAGS.values()}
    plugin_params: list[str] = []
    debug = foreground = read_only = False

    i = 0
    while i < len(argv):
        token = argv[i]
        if not token.startswith("-"):
            break
        i += 1
        if token == TERMINATOR:
            break
        if token.startswith(NBD_NAMESPACE):
            _collect_nbd_flag(token, lists)
        elif token == "-f":
            foreground = True
        elif token == "-d":
            debug = foreground = True
        elif not token.startswith("--"):
            raise TranslationError(f'invalid flag "{token}"', token)
        else:
            name, param = _plugin_param(token, settings.param_prefix)
            if name == "debug":
                debug = True
            elif name == "readOnly":
                read_only = True
            plugin_params.append(param)

    positional = argv[i:]
    if len(positional) != 2:
        extra = positional[2] if len(positional) > 2 else None
        raise TranslationError("expected exactly two arguments: bucket[/subdir] and device", extra)

    config = BridgeConfig(
        bucket=positional[0],
        device=positional[1],
        debug=debug,
        foreground=foreground,
        read_only=read_only,
        plugin_params=tuple(plugin_params),
        nbd_flags=tuple(lists["nbd_flags"]),
        nbd_params=tuple(lists["nbd_params"]),
        client_flags=tuple(lists["client_flags"]),
    )
    log.debug("parsed %s", config)
    return config


def build_server_command(
    config: BridgeConfig, socket_path: str, settings: BridgeSettings
) -> TranslatedCommand:
    """Build the nbdkit command line serving the plugin on ``socket_path``."""
    exe = settings.nbdkit_executable
    argv = [exe]
    if config.debug:
        argv.append("--verbose")
    if config.foreground:
        argv.append("--foreground")
    if config.read_only:
        argv.append("--read-only")
    # exitlast makes nbdkit exit when nbd-client disconnects
    argv.extend([EXIT_LAST_FILTER, "--unix", socket_path])
    argv.extend(config.nbd_flags)
    argv.append(settings.plugin_name)
    argv.extend(config.plugin_params)
    argv.append(f"{settings.bucket_param}={config.bucket}")
    argv.extend(config.nbd_params)
    return TranslatedCommand(executable=exe, argv=tuple(argv))


def build_client_command(
    config: BridgeConfig, socket_path: str, settings: BridgeSettings
) -> TranslatedCommand:
    """Build the nbd-client command line attaching the device to ``socket_path``."""
    exe = settings.nbd_client_executable
    argv = [
        exe,
        "-unix",
        socket_path,
        "-block-size",
        str(settings.client_block_size),
        "-nofork",
    ]
    if config.read_only:
        argv.append("-readonly")
    argv.extend(config.client_flags)
    argv.append(config.device)
    return TranslatedCommand(executable=exe, argv=tuple(argv))


def build_disconnect_command(config: BridgeConfig, settings: BridgeSettings) -> TranslatedCommand:
    """Build the ``nbd-client -d`` command line detaching the device."""
    exe = settings.nbd_client_executable
    return TranslatedCommand(executable=exe, argv=(exe, "-d", config.device))
