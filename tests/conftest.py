# tests/conftest.py
import os, sys
from types import SimpleNamespace

import pytest

# lägg till projektroten (mappen som innehåller "cotizaobra") först i sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def anyio_backend():
    # bara asyncio, ingen Trio
    return "asyncio"


class FakeCompletions:
    """Ersätter client.chat.completions i OpenAI-SDK:n – inget nätverk."""

    def __init__(self, content=None, exc=None):
        self.content = content
        self.exc = exc
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_openai():
    def _make(content="Proyecto de remodelación integral.", exc=None):
        completions = FakeCompletions(content=content, exc=exc)
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        return client, completions
    return _make
