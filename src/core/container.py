"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from agents import (
    ARCHITECT_SYSTEM_INSTRUCTION,
    FLUTTER_SYSTEM_INSTRUCTION,
    AppGenerator,
    CodeGenerator,
    GeminiActionExecutor,
)
from appspec.schema import GENERATION_RESULT_SCHEMA
from clients import ImagenClient
from handlers import Workspace
from models import GeminiConfig, GeminiModelName, ModelLoader
from services import DeploymentService, SessionContext
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _model_config(self, model_name: str, **overrides) -> GeminiConfig:
        return GeminiConfig(
            model_name=model_name,
            api_key=self.settings.gemini_api_key or None,
            temperature=self.settings.gemini_temperature,
            max_tokens=self.settings.gemini_max_tokens,
            **overrides,
        )

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_imagen_client(self) -> ImagenClient:
        """Provide Imagen client for image actions."""
        return ImagenClient(
            api_key=self.settings.gemini_api_key,
            model=self.settings.image_model,
            base_url=self.settings.imagen_base_url,
            timeout=self.settings.imagen_timeout,
        )

    @singleton
    @provider
    def provide_action_executor(self, imagen: ImagenClient) -> GeminiActionExecutor:
        """Provide executor backing preview buttons."""
        text_model = ModelLoader.load(self._model_config(self.settings.text_model))
        return GeminiActionExecutor(text_model, imagen, timeout=self.settings.action_timeout)

    @singleton
    @provider
    def provide_app_generator(self) -> AppGenerator:
        """Provide description generator (JSON mode, schema constrained)."""
        model = ModelLoader.load(
            self._model_config(
                self.settings.description_model,
                system_instruction=ARCHITECT_SYSTEM_INSTRUCTION,
                json_mode=True,
                response_schema=GENERATION_RESULT_SCHEMA,
            )
        )
        return AppGenerator(model)

    @singleton
    @provider
    def provide_code_generator(self) -> CodeGenerator:
        """Provide Flutter code generator."""
        model = ModelLoader.load(
            self._model_config(
                self.settings.code_model or GeminiModelName.PRO.value,
                system_instruction=FLUTTER_SYSTEM_INSTRUCTION,
            )
        )
        return CodeGenerator(
            model,
            enable_cache=self.settings.enable_cache,
            cache_size=self.settings.cache_size,
            cache_ttl=self.settings.cache_ttl,
        )

    @singleton
    @provider
    def provide_session(self) -> SessionContext:
        return SessionContext()

    @singleton
    @provider
    def provide_deployment_service(self) -> DeploymentService:
        return DeploymentService(
            delay=self.settings.deploy_delay,
            failure_rate=self.settings.deploy_failure_rate,
        )

    @singleton
    @provider
    def provide_workspace(
        self,
        session: SessionContext,
        generator: AppGenerator,
        code_generator: CodeGenerator,
        executor: GeminiActionExecutor,
        deployer: DeploymentService,
    ) -> Workspace:
        """Provide the workspace wired to every collaborator."""
        return Workspace(
            session=session,
            generator=generator,
            code_generator=code_generator,
            executor=executor,
            deployer=deployer,
            max_history=self.settings.max_history_length,
        )


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
