"""Dynamic UI Renderer.

Interprets an Application Description at runtime: holds per-component state,
validates inputs, drives button actions and projects everything into a
``RenderNode`` tree for the live preview.
"""

import asyncio

from appspec import (
    AppComponent,
    AppDescription,
    ButtonComponent,
    DescriptionComponent,
    InputTextComponent,
    OutputImageComponent,
    OutputTextComponent,
    TitleComponent,
)
from core import get_logger
from .executor import ActionExecutor
from .nodes import RenderNode
from .state import ButtonPhase, ExecutionState, RendererState
from .validation import validate


logger = get_logger(__name__)

UNKNOWN_ERROR = "An unknown error occurred."


class DynamicRenderer:
    """Live preview of one Application Description.

    State is replaced wholesale on every transition. Each ``initialize``
    bumps a generation counter; an action that settles after a reset sees a
    different generation and its result is discarded.
    """

    def __init__(self, executor: ActionExecutor, description: AppDescription | None = None) -> None:
        self.executor = executor
        self._description = AppDescription()
        self._inputs: dict[str, InputTextComponent] = {}
        self._buttons: dict[str, ButtonComponent] = {}
        self._state = RendererState()
        self._generation = 0

        if description is not None:
            self.initialize(description)

    @property
    def description(self) -> AppDescription:
        return self._description

    @property
    def state(self) -> RendererState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def initialize(self, description: AppDescription) -> None:
        """Load a description and clear all state, even for an identical one."""
        self._generation += 1
        self._description = description
        self._inputs = description.inputs()
        self._buttons = description.buttons()
        self._state = RendererState()

        logger.info(
            "initialized",
            generation=self._generation,
            components=len(description.components),
        )

    def set_input_value(self, component_id: str, value: str) -> None:
        """Store a field value and re-validate that field. Never awaits."""
        component = self._inputs.get(component_id)
        if component is None:
            logger.warning("unknown_input", component=component_id)
            return

        error = validate(value, component.validation)
        self._state = self._state.with_input(component_id, value).with_errors({component_id: error})

    async def invoke(self, button_id: str) -> bool:
        """
        Run a button's action.

        Returns:
            True when a result was stored, False when the call was refused,
            blocked by validation, failed, or went stale
        """
        button = self._buttons.get(button_id)
        if button is None:
            logger.warning("unknown_button", button=button_id)
            return False

        if self._state.execution(button_id).in_flight:
            logger.info("invoke_ignored", button=button_id, reason="in_flight")
            return False

        updates = self._validate_triggers(button)
        self._state = self._state.with_errors(updates)
        failing = [trigger for trigger, message in updates.items() if message is not None]
        if failing:
            logger.info("invoke_blocked", button=button_id, invalid=failing)
            return False

        generation = self._generation
        self._state = self._state.with_execution(button_id, ExecutionState(in_flight=True))
        inputs = {trigger: self._state.input_values.get(trigger, "") for trigger in button.triggers}

        logger.info("invoke_start", button=button_id, action=button.action.value, generation=generation)
        try:
            result = await self.executor.execute(button.action, inputs)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._state = self._state.with_execution(button_id, ExecutionState())
            raise
        except Exception as e:
            if generation != self._generation:
                logger.info("stale_failure_dropped", button=button_id, generation=generation)
                return False
            message = str(e) or UNKNOWN_ERROR
            logger.warning("invoke_failed", button=button_id, error=message)
            self._state = self._state.with_execution(button_id, ExecutionState(last_error=message))
            return False

        if generation != self._generation:
            logger.info("stale_result_dropped", button=button_id, generation=generation)
            return False

        self._state = self._state.with_output(button_id, result).with_execution(
            button_id, ExecutionState()
        )
        logger.info("invoke_complete", button=button_id, result_length=len(result))
        return True

    def _validate_triggers(self, button: ButtonComponent) -> dict[str, str | None]:
        # Dangling triggers have no rules to check
        updates: dict[str, str | None] = {}
        for trigger in button.triggers:
            component = self._inputs.get(trigger)
            if component is not None:
                value = self._state.input_values.get(trigger, "")
                updates[trigger] = validate(value, component.validation)
        return updates

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_button_disabled(self, button_id: str) -> bool:
        """In flight, or any trigger currently shows an error."""
        button = self._buttons.get(button_id)
        if button is None:
            return True
        if self._state.execution(button_id).in_flight:
            return True
        return any(trigger in self._state.errors for trigger in button.triggers)

    def button_phase(self, button_id: str) -> ButtonPhase:
        if self._state.execution(button_id).in_flight:
            return ButtonPhase.EXECUTING
        return ButtonPhase.IDLE

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def render(self, component: AppComponent) -> RenderNode | None:
        """Project one component and the current state into a node."""
        state = self._state

        match component:
            case TitleComponent():
                return RenderNode("heading", component.id, {"text": component.content, "level": 1})

            case DescriptionComponent():
                return RenderNode("paragraph", component.id, {"text": component.content})

            case InputTextComponent():
                error = state.errors.get(component.id)
                rules = component.validation
                return RenderNode(
                    "text_input",
                    component.id,
                    {
                        "label": component.label,
                        "placeholder": component.placeholder or "",
                        "value": state.input_values.get(component.id, ""),
                        "error": error,
                        "invalid": error is not None,
                        "required": bool(rules and rules.required),
                        "max_length": rules.max_length if rules else None,
                        "rows": 4,
                    },
                )

            case ButtonComponent():
                return RenderNode(
                    "button",
                    component.id,
                    {
                        "label": component.label,
                        "action": component.action.value,
                        "loading": state.execution(component.id).in_flight,
                        "disabled": self.is_button_disabled(component.id),
                    },
                )

            case OutputTextComponent() | OutputImageComponent():
                return self._render_output(component)

        return None

    def _render_output(self, component: OutputTextComponent | OutputImageComponent) -> RenderNode | None:
        state = self._state
        button_id = component.displays_for
        execution = state.execution(button_id)
        has_result = button_id in state.output_values

        # Idle with no history: nothing at all, not even an empty panel
        if not (has_result or execution.in_flight or execution.last_error is not None):
            return None

        is_image = isinstance(component, OutputImageComponent)
        if execution.in_flight:
            content = RenderNode("loader")
        elif execution.last_error is not None:
            content = RenderNode("error", props={"text": execution.last_error})
        elif is_image:
            content = RenderNode("image", props={"src": state.output_values[button_id], "alt": "Generated"})
        else:
            content = RenderNode("text", props={"text": state.output_values[button_id]})

        return RenderNode(
            "output_panel",
            component.id,
            {
                "title": "Generated Image" if is_image else "Result",
                "displays_for": button_id,
                "variant": "image" if is_image else "text",
            },
            (content,),
        )

    def render_tree(self) -> RenderNode:
        """Render the whole description, in order, under a themed column."""
        children = []
        for component in self._description.components:
            node = self.render(component)
            if node is not None:
                children.append(node)

        theme = self._description.theme.model_dump(mode="json", by_alias=True, exclude_none=True)
        return RenderNode("column", props={"theme": theme}, children=tuple(children))
