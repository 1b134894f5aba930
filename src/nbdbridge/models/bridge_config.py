"""Per-run configuration model for nbdbridge."""

from pydantic import BaseModel, ConfigDict


class BridgeConfig(BaseModel):
    """Runtime configuration parsed from the command line."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    device: str
    debug: bool = False
    foreground: bool = False
    read_only: bool = False
    plugin_params: tuple[str, ...] = ()
    nbd_flags: tuple[str, ...] = ()
    nbd_params: tuple[str, ...] = ()
    client_flags: tuple[str, ...] = ()
