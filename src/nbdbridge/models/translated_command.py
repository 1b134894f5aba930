"""Command line model for spawned helper processes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TranslatedCommand:
    """An executable plus the exact argv it is started with."""

    executable: str
    argv: tuple[str, ...]
