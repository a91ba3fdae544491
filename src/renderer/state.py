"""Immutable renderer state.

Every transition returns a new ``RendererState``; the maps inside are
read-only views so a snapshot handed out can never change under the caller.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any


def _frozen(values: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


class ButtonPhase(str, Enum):
    """Observable phase of a button's action.

    Validating and invalid are never observable: validation runs
    synchronously inside ``invoke`` before the phase can change.
    """

    IDLE = "idle"
    EXECUTING = "executing"


@dataclass(frozen=True)
class ExecutionState:
    """Per-button execution status."""

    in_flight: bool = False
    last_error: str | None = None


@dataclass(frozen=True)
class RendererState:
    """Snapshot of every piece of per-component runtime state."""

    input_values: Mapping[str, str] = field(default_factory=_frozen)
    errors: Mapping[str, str] = field(default_factory=_frozen)
    execution_state: Mapping[str, ExecutionState] = field(default_factory=_frozen)
    output_values: Mapping[str, str] = field(default_factory=_frozen)

    def with_input(self, component_id: str, value: str) -> "RendererState":
        return replace(self, input_values=_frozen({**self.input_values, component_id: value}))

    def with_errors(self, updates: Mapping[str, str | None]) -> "RendererState":
        """Apply several error updates at once; None clears an entry."""
        errors = dict(self.errors)
        for component_id, message in updates.items():
            if message is None:
                errors.pop(component_id, None)
            else:
                errors[component_id] = message
        return replace(self, errors=_frozen(errors))

    def with_execution(self, button_id: str, execution: ExecutionState) -> "RendererState":
        return replace(self, execution_state=_frozen({**self.execution_state, button_id: execution}))

    def with_output(self, button_id: str, value: str) -> "RendererState":
        return replace(self, output_values=_frozen({**self.output_values, button_id: value}))

    def execution(self, button_id: str) -> ExecutionState:
        return self.execution_state.get(button_id, ExecutionState())

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_values": dict(self.input_values),
            "errors": dict(self.errors),
            "execution_state": {
                button_id: {"in_flight": e.in_flight, "last_error": e.last_error}
                for button_id, e in self.execution_state.items()
            },
            "output_values": dict(self.output_values),
        }
