"""Application Description data model.

A description is an ordered list of components plus a theme. Components form
a closed tagged union on ``type``; cross references (``triggers``,
``displaysFor``) are plain id strings resolved against the component list.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ComponentType(str, Enum):
    """Component type tags."""

    TITLE = "TITLE"
    DESCRIPTION = "DESCRIPTION"
    INPUT_TEXT = "INPUT_TEXT"
    BUTTON = "BUTTON"
    OUTPUT_TEXT = "OUTPUT_TEXT"
    OUTPUT_IMAGE = "OUTPUT_IMAGE"


class ActionType(str, Enum):
    """Generative action kinds a button can perform."""

    GENERATE_TEXT = "GENERATE_TEXT"
    GENERATE_IMAGE = "GENERATE_IMAGE"


class SpecModel(BaseModel):
    """Immutable base; camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class InputValidation(SpecModel):
    """Declarative rules for an INPUT_TEXT component."""

    required: bool | None = None
    min_length: int | None = Field(default=None, alias="minLength", ge=0)
    max_length: int | None = Field(default=None, alias="maxLength", ge=0)


class TitleComponent(SpecModel):
    type: Literal["TITLE"] = "TITLE"
    id: str = Field(min_length=1)
    content: str


class DescriptionComponent(SpecModel):
    type: Literal["DESCRIPTION"] = "DESCRIPTION"
    id: str = Field(min_length=1)
    content: str


class InputTextComponent(SpecModel):
    type: Literal["INPUT_TEXT"] = "INPUT_TEXT"
    id: str = Field(min_length=1)
    label: str
    placeholder: str | None = None
    validation: InputValidation | None = None


class ButtonComponent(SpecModel):
    type: Literal["BUTTON"] = "BUTTON"
    id: str = Field(min_length=1)
    label: str
    action: ActionType
    triggers: tuple[str, ...] = ()

    @field_validator("triggers", mode="before")
    @classmethod
    def null_triggers(cls, v: Any) -> Any:
        """The model emits ``null`` for buttons without inputs."""
        return () if v is None else v


class OutputTextComponent(SpecModel):
    type: Literal["OUTPUT_TEXT"] = "OUTPUT_TEXT"
    id: str = Field(min_length=1)
    displays_for: str = Field(alias="displaysFor")


class OutputImageComponent(SpecModel):
    type: Literal["OUTPUT_IMAGE"] = "OUTPUT_IMAGE"
    id: str = Field(min_length=1)
    displays_for: str = Field(alias="displaysFor")


AppComponent = Annotated[
    Union[
        TitleComponent,
        DescriptionComponent,
        InputTextComponent,
        ButtonComponent,
        OutputTextComponent,
        OutputImageComponent,
    ],
    Field(discriminator="type"),
]

OutputComponent = OutputTextComponent | OutputImageComponent


class Theme(SpecModel):
    """Opaque styling data, passed through to the render tree."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    colors: dict[str, str] = Field(default_factory=dict)
    corner_radius: int | None = Field(default=None, alias="cornerRadius")
    font_family: str | None = Field(default=None, alias="fontFamily")

    @field_validator("colors", mode="before")
    @classmethod
    def null_colors(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {token: value for token, value in v.items() if value is not None}
        return v


class AppDescription(SpecModel):
    """Ordered components plus theme."""

    components: tuple[AppComponent, ...] = ()
    theme: Theme = Field(default_factory=Theme)

    @field_validator("theme", mode="before")
    @classmethod
    def null_theme(cls, v: Any) -> Any:
        return {} if v is None else v

    @model_validator(mode="after")
    def unique_ids(self) -> "AppDescription":
        seen: set[str] = set()
        for component in self.components:
            if component.id in seen:
                raise ValueError(f"Duplicate component id: {component.id}")
            seen.add(component.id)
        return self

    def get(self, component_id: str) -> AppComponent | None:
        """Look up a component by id."""
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def inputs(self) -> dict[str, InputTextComponent]:
        return {c.id: c for c in self.components if isinstance(c, InputTextComponent)}

    def buttons(self) -> dict[str, ButtonComponent]:
        return {c.id: c for c in self.components if isinstance(c, ButtonComponent)}

    def dangling_references(self) -> list[tuple[str, str]]:
        """
        Find cross references that do not resolve to the expected type.

        Returns:
            ``(component_id, referenced_id)`` pairs, in description order
        """
        inputs = self.inputs()
        buttons = self.buttons()
        dangling: list[tuple[str, str]] = []
        for component in self.components:
            if isinstance(component, ButtonComponent):
                dangling.extend(
                    (component.id, trigger) for trigger in component.triggers if trigger not in inputs
                )
            elif isinstance(component, (OutputTextComponent, OutputImageComponent)):
                if component.displays_for not in buttons:
                    dangling.append((component.id, component.displays_for))
        return dangling

    def to_wire(self) -> dict[str, Any]:
        """Serialise with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GenerationResult(SpecModel):
    """A generated or refined description plus the assistant's explanation."""

    explanation: str = ""
    files_changed: tuple[str, ...] = Field(default=("app_config.json",), alias="filesChanged")
    app_description: AppDescription = Field(alias="appDescription")

    @field_validator("files_changed", mode="before")
    @classmethod
    def default_files(cls, v: Any) -> Any:
        return ("app_config.json",) if not v else v

    @field_validator("explanation", mode="before")
    @classmethod
    def null_explanation(cls, v: Any) -> Any:
        return "" if v is None else v
