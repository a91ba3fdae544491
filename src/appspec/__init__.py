"""Application Description model, schema and parser."""

from .models import (
    ActionType,
    AppComponent,
    AppDescription,
    ButtonComponent,
    ComponentType,
    DescriptionComponent,
    GenerationResult,
    InputTextComponent,
    InputValidation,
    OutputImageComponent,
    OutputTextComponent,
    Theme,
    TitleComponent,
)
from .parser import DescriptionParseError, parse_description, parse_generation_result

__all__ = [
    "ActionType",
    "AppComponent",
    "AppDescription",
    "ButtonComponent",
    "ComponentType",
    "DescriptionComponent",
    "GenerationResult",
    "InputTextComponent",
    "InputValidation",
    "OutputImageComponent",
    "OutputTextComponent",
    "Theme",
    "TitleComponent",
    "DescriptionParseError",
    "parse_description",
    "parse_generation_result",
]
