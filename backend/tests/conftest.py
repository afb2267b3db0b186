"""Pytest configuration and fixtures."""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# config reads the environment at import time
os.environ.setdefault("OPENROUTER_API_KEY", "test-openrouter-key")
os.environ.setdefault("DEBUG_MODE", "false")


SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Launchpad</title>
    <style>
        body { font-family: 'Inter', sans-serif; margin: 0; }
        .container { padding: 1rem; }
        .hero { background-color: #ffffff; border-radius: 8px; }
    </style>
</head>
<body>
    <div class="container">
        <h1>Welcome to Launchpad</h1>
        <p>Ship faster with fewer meetings.</p>
        <button>Get started</button>
    </div>
</body>
</html>"""


@pytest.fixture
def sample_html():
    return SAMPLE_HTML


def _make_response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_client():
    """Factory for an OpenAI-style async client whose completion returns content."""

    def factory(content=None, side_effect=None, choices=None):
        client = MagicMock()
        if side_effect is not None:
            client.chat.completions.create = AsyncMock(side_effect=side_effect)
        elif choices is not None:
            client.chat.completions.create = AsyncMock(
                return_value=SimpleNamespace(choices=choices)
            )
        else:
            client.chat.completions.create = AsyncMock(return_value=_make_response(content))
        return client

    return factory
