import sys

import pytest

from nbdbridge.models import TranslatedCommand
from nbdbridge.signals import SignalBridge


@pytest.fixture
def signals():
    with SignalBridge() as bridge:
        yield bridge


def python_command(code: str) -> TranslatedCommand:
    """A command running ``code`` in a fresh interpreter."""
    return TranslatedCommand(executable=sys.executable, argv=(sys.executable, "-c", code))
