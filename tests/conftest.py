"""Pytest configuration and fixtures."""

import asyncio
import base64
import os
from unittest.mock import AsyncMock, MagicMock

import orjson
import pytest

from appspec import AppDescription, ActionType, parse_description
from core import get_settings
from models.config import GeminiConfig
from services import SessionContext


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["BUILDER_LOG_LEVEL"] = "DEBUG"
    os.environ["BUILDER_ENABLE_CACHE"] = "false"
    os.environ["BUILDER_DEPLOY_DELAY"] = "0"
    os.environ["GOOGLE_API_KEY"] = "test-api-key"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def gemini_config():
    """Gemini config for testing."""
    return GeminiConfig(
        model_name="gemini-2.5-flash",
        api_key="test-api-key",
        temperature=0.1,
        max_tokens=1024,
    )


@pytest.fixture
def mock_gemini_model():
    """Mock Gemini model for testing."""
    mock = MagicMock()
    mock.invoke.return_value = "test response"
    mock.ainvoke = AsyncMock(return_value="test response")
    mock.config = MagicMock()
    mock.config.model_name = "gemini-2.5-flash"
    return mock


# ============================================================================
# Description Fixtures
# ============================================================================

TOPIC_APP = {
    "components": [
        {"id": "main_title", "type": "TITLE", "content": "Topic Writer"},
        {"id": "intro", "type": "DESCRIPTION", "content": "Write a paragraph about anything."},
        {
            "id": "topic_input",
            "type": "INPUT_TEXT",
            "label": "Topic",
            "placeholder": "e.g. volcanoes",
            "validation": {"required": True, "maxLength": 20},
        },
        {
            "id": "go_button",
            "type": "BUTTON",
            "label": "Go",
            "action": "GENERATE_TEXT",
            "triggers": ["topic_input"],
        },
        {"id": "result_output", "type": "OUTPUT_TEXT", "displaysFor": "go_button"},
    ],
    "theme": {"colors": {"primary": "#6366f1"}, "cornerRadius": 8},
}


@pytest.fixture
def topic_app_data() -> dict:
    """Raw description as the model would return it."""
    return orjson.loads(orjson.dumps(TOPIC_APP))


@pytest.fixture
def topic_app(topic_app_data) -> AppDescription:
    """Parsed topic writer description."""
    return parse_description(topic_app_data)


# ============================================================================
# Executor Fixtures
# ============================================================================

class FakeExecutor:
    """Records calls; results come from a queue of values or exceptions."""

    def __init__(self, *outcomes):
        self.calls: list[tuple[ActionType, dict[str, str]]] = []
        self.outcomes = list(outcomes)
        self.gates: list[asyncio.Future] = []
        self.hold = False

    async def execute(self, action, inputs):
        self.calls.append((action, dict(inputs)))
        if self.hold:
            gate = asyncio.get_running_loop().create_future()
            self.gates.append(gate)
            return await gate
        outcome = self.outcomes.pop(0) if self.outcomes else "ok"
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def fake_executor():
    return FakeExecutor()


# ============================================================================
# Session Fixtures
# ============================================================================

def make_id_token(claims: dict) -> str:
    """Unsigned three-part JWT carrying claims."""
    def segment(data: dict) -> str:
        return base64.urlsafe_b64encode(orjson.dumps(data)).rstrip(b"=").decode("ascii")

    return f"{segment({'alg': 'RS256', 'typ': 'JWT'})}.{segment(claims)}.signature"


USER_CLAIMS = {
    "sub": "1234567890",
    "name": "Ada Lovelace",
    "picture": "https://example.com/ada.png",
    "email": "ada@example.com",
}


@pytest.fixture
def id_token() -> str:
    return make_id_token(USER_CLAIMS)


@pytest.fixture
def session() -> SessionContext:
    """Initialized, signed-out session."""
    ctx = SessionContext()
    ctx.initialize()
    return ctx


@pytest.fixture
def signed_in_session(session, id_token) -> SessionContext:
    session.sign_in(id_token)
    return session
