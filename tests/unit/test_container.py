"""Dependency injection wiring tests."""

from unittest.mock import patch

import pytest

from agents import AppGenerator, CodeGenerator, GeminiActionExecutor
from clients import ImagenClient
from core import create_container
from core.config import Settings
from handlers import Workspace
from models import ModelLoader
from services import DeploymentService, SessionContext


@pytest.fixture
def container():
    ModelLoader.unload()
    with patch("models.loader.genai"):
        yield create_container(Settings(action_timeout=30, deploy_delay=0, enable_cache=True, cache_size=7))
    ModelLoader.unload()


@pytest.mark.unit
def test_workspace_is_wired(container):
    workspace = container.get(Workspace)

    assert workspace is container.get(Workspace)
    assert workspace.session is container.get(SessionContext)
    assert isinstance(workspace.generator, AppGenerator)
    assert isinstance(workspace.code_generator, CodeGenerator)
    assert isinstance(workspace.deployer, DeploymentService)


@pytest.mark.unit
def test_settings_flow_into_collaborators(container):
    executor = container.get(GeminiActionExecutor)
    assert executor.timeout == 30
    assert executor.imagen is container.get(ImagenClient)

    assert container.get(CodeGenerator).cache.max_size == 7
    assert container.get(DeploymentService).delay == 0


@pytest.mark.unit
def test_description_model_uses_json_mode(container):
    generator = container.get(AppGenerator)
    assert generator.model.config.json_mode is True
    assert generator.model.config.response_schema is not None
    assert container.get(CodeGenerator).model.config.model_name == "gemini-2.5-pro"
