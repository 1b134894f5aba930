"""Installation settings model for nbdbridge."""

from pydantic import BaseModel, ConfigDict, PositiveInt

DEFAULT_SOCKET_DIR = "/run/s3backer-nbd"


class BridgeSettings(BaseModel):
    """Where the helper programs live and how long to wait for them."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    nbdkit_executable: str = "nbdkit"
    nbd_client_executable: str = "nbd-client"
    plugin_name: str = "s3backer"
    param_prefix: str = "s3b_"
    bucket_param: str = "bucket"
    socket_dir: str = DEFAULT_SOCKET_DIR
    client_block_size: PositiveInt = 4096
    startup_poll_ms: PositiveInt = 50
    startup_max_wait_ms: PositiveInt = 1000
    max_child_processes: PositiveInt = 10
