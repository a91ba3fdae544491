"""
Workspace Handler
Conversation and generation orchestration for one signed-in session.
"""

import asyncio
from typing import Any, Literal

from agents import AppGenerator, ChatHistory, CodeGenerator, GenerationError
from appspec import AppDescription
from core import LogContext, get_logger
from renderer import ActionExecutor, DynamicRenderer, RenderNode
from services import DeploymentError, DeploymentResult, DeploymentService, SessionContext


logger = get_logger(__name__)

EMPTY_PROMPT_MESSAGE = "Please enter a description for your app."
UNKNOWN_CODE_ERROR = "An unknown error occurred while generating code."

View = Literal["preview", "code"]

EXAMPLE_PROMPTS = (
    "A baby name swiper app",
    "An excuse generator",
    "A conversation starter for parties",
)


class Workspace:
    """
    Owns the chat, the current Application Description, its live preview,
    the generated source and the deployment outcome.

    Every public operation requires a signed-in user; signing out resets
    the workspace.
    """

    def __init__(
        self,
        session: SessionContext,
        generator: AppGenerator,
        code_generator: CodeGenerator,
        executor: ActionExecutor,
        deployer: DeploymentService,
        max_history: int = 50,
    ) -> None:
        self.session = session
        self.generator = generator
        self.code_generator = code_generator
        self.deployer = deployer
        self.renderer = DynamicRenderer(executor)
        self.history = ChatHistory(max_history=max_history)

        self.description: AppDescription | None = None
        self.source_code: str | None = None
        self.deployment_result: DeploymentResult | None = None
        self.view: View = "preview"

        self.is_loading = False
        self.is_generating_code = False
        self.is_deploying = False

        self.error: str | None = None
        self.code_error: str | None = None
        self.deployment_error: str | None = None

        self._code_generation = 0
        self._code_task: asyncio.Task | None = None
        self._action_tasks: set[asyncio.Task] = set()

        self._unsubscribe = session.on_auth_change(self._on_auth_change)

    def _on_auth_change(self, user: Any) -> None:
        if user is None:
            self.start_over()

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------

    async def send_message(self, text: str) -> bool:
        """
        Generate a new app, or refine the current one.

        Returns:
            True when a new description was installed
        """
        self.session.require_user()

        prompt = (text or "").strip()
        if not prompt:
            self.error = EMPTY_PROMPT_MESSAGE
            return False

        with LogContext(session=self.session.id):
            return await self._converse(prompt)

    async def _converse(self, prompt: str) -> bool:
        prior_turns = self.history.turns()
        self.history.add_user(prompt)
        self.is_loading = True
        self.error = None
        self.deployment_error = None

        try:
            result = await self.generator.generate_or_refine(prompt, self.description, prior_turns)
        except GenerationError as e:
            self.error = str(e)
            logger.warning("generation_failed", error=self.error)
            return False
        finally:
            self.is_loading = False

        self.history.add_assistant(result.explanation, list(result.files_changed))
        self._install(result.app_description)
        return True

    def _install(self, description: AppDescription) -> None:
        self.description = description
        self.renderer.initialize(description)
        self._start_code_generation(description)

    # ------------------------------------------------------------------
    # Source code
    # ------------------------------------------------------------------

    def _start_code_generation(self, description: AppDescription) -> None:
        self._code_generation += 1
        if self._code_task is not None and not self._code_task.done():
            self._code_task.cancel()

        self.source_code = None
        self.code_error = None
        self.is_generating_code = True
        self._code_task = asyncio.create_task(self._generate_code(description, self._code_generation))

    async def _generate_code(self, description: AppDescription, generation: int) -> None:
        try:
            code = await self.code_generator.generate_source_code(description)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if generation != self._code_generation:
                return
            self.code_error = str(e) or UNKNOWN_CODE_ERROR
            self.is_generating_code = False
            logger.warning("code_generation_failed", error=self.code_error)
            return

        if generation != self._code_generation:
            logger.info("stale_code_dropped", generation=generation)
            return

        self.source_code = code
        self.is_generating_code = False

    async def wait_for_code(self) -> str | None:
        """Wait for pending code generation; returns the current source."""
        task = self._code_task
        if task is not None and not task.done():
            try:
                await task
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self.source_code

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def set_input_value(self, component_id: str, value: str) -> None:
        self.session.require_user()
        self.renderer.set_input_value(component_id, value)

    async def invoke(self, button_id: str, wait: bool = True) -> bool:
        """
        Press a preview button.

        With ``wait=False`` the action runs in the background and the
        renderer shows it as in flight.
        """
        self.session.require_user()
        with LogContext(session=self.session.id, button=button_id):
            if wait:
                return await self.renderer.invoke(button_id)

            # The task copies the bound context when created
            task = asyncio.create_task(self.renderer.invoke(button_id))
        self._action_tasks.add(task)
        task.add_done_callback(self._action_tasks.discard)
        # Let the task start so the in-flight state is visible to the caller
        await asyncio.sleep(0)
        return True

    def render(self) -> RenderNode:
        self.session.require_user()
        return self.renderer.render_tree()

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    async def deploy(self) -> DeploymentResult | None:
        """Deploy the current source. No-op while there is nothing to deploy."""
        self.session.require_user()
        if not self.source_code or self.is_deploying:
            return None

        self.is_deploying = True
        self.deployment_error = None
        try:
            self.deployment_result = await self.deployer.deploy(self.source_code)
        except DeploymentError as e:
            self.deployment_error = str(e) or "Deployment failed."
            return None
        finally:
            self.is_deploying = False

        return self.deployment_result

    # ------------------------------------------------------------------
    # Reset and views
    # ------------------------------------------------------------------

    def start_over(self) -> None:
        """Drop the app, chat and every error; the preview goes blank."""
        self._code_generation += 1
        if self._code_task is not None and not self._code_task.done():
            self._code_task.cancel()
        self._code_task = None

        self.description = None
        self.source_code = None
        self.deployment_result = None
        self.history.clear()
        self.renderer.initialize(AppDescription())
        self.view = "preview"

        self.is_loading = False
        self.is_generating_code = False
        self.error = None
        self.code_error = None
        self.deployment_error = None
        logger.info("workspace_reset")

    def set_view(self, view: View) -> None:
        self.session.require_user()
        if view not in ("preview", "code"):
            raise ValueError(f"Unknown view: {view}")
        self.view = view

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the workspace."""
        return {
            "messages": [m.model_dump(mode="json", by_alias=True) for m in self.history.messages],
            "appDescription": self.description.to_wire() if self.description is not None else None,
            "sourceCode": self.source_code,
            "view": self.view,
            "isLoading": self.is_loading,
            "isGeneratingCode": self.is_generating_code,
            "isDeploying": self.is_deploying,
            "error": self.error,
            "codeError": self.code_error,
            "deploymentError": self.deployment_error,
            "deploymentResult": (
                self.deployment_result.model_dump(mode="json", by_alias=True)
                if self.deployment_result is not None
                else None
            ),
            "examplePrompts": list(EXAMPLE_PROMPTS) if self.description is None else [],
        }

    def close(self) -> None:
        self._unsubscribe()
        for task in list(self._action_tasks):
            task.cancel()
        if self._code_task is not None and not self._code_task.done():
            self._code_task.cancel()
