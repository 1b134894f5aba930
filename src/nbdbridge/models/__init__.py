"""Model package for nbdbridge."""

from nbdbridge.models.bridge_config import BridgeConfig
from nbdbridge.models.bridge_settings import BridgeSettings
from nbdbridge.models.translated_command import TranslatedCommand
from nbdbridge.models.wait_outcome import WaitKind, WaitOutcome

__all__ = [
    "BridgeConfig",
    "BridgeSettings",
    "TranslatedCommand",
    "WaitKind",
    "WaitOutcome",
]
