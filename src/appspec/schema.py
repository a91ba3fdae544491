"""Response schemas handed to Gemini JSON mode."""

from typing import Any

from .models import ActionType, ComponentType


VALIDATION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "description": "Validation rules for INPUT_TEXT components.",
    "properties": {
        "required": {
            "type": "BOOLEAN",
            "description": "Whether the input is required.",
            "nullable": True,
        },
        "minLength": {
            "type": "INTEGER",
            "description": "The minimum length for the input.",
            "nullable": True,
        },
        "maxLength": {
            "type": "INTEGER",
            "description": "The maximum length for the input.",
            "nullable": True,
        },
    },
    "nullable": True,
}

COMPONENT_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "id": {
            "type": "STRING",
            "description": "A unique identifier for the component, e.g., 'topic_input'. Use snake_case.",
        },
        "type": {
            "type": "STRING",
            "description": "The type of the component.",
            "enum": [t.value for t in ComponentType],
        },
        "content": {
            "type": "STRING",
            "description": "The text content for TITLE or DESCRIPTION components.",
            "nullable": True,
        },
        "label": {
            "type": "STRING",
            "description": "The user-facing label for INPUT_TEXT or BUTTON components.",
            "nullable": True,
        },
        "placeholder": {
            "type": "STRING",
            "description": "Placeholder text for INPUT_TEXT components.",
            "nullable": True,
        },
        "validation": VALIDATION_SCHEMA,
        "action": {
            "type": "STRING",
            "description": "The AI action this button performs.",
            "enum": [a.value for a in ActionType],
            "nullable": True,
        },
        "triggers": {
            "type": "ARRAY",
            "description": "For BUTTONs, the ids of INPUT_TEXT components this button uses as input.",
            "items": {"type": "STRING"},
            "nullable": True,
        },
        "displaysFor": {
            "type": "STRING",
            "description": "For OUTPUT components, the id of the BUTTON that generates its content.",
            "nullable": True,
        },
    },
    "required": ["id", "type"],
}

THEME_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "description": "Visual theme for the generated app.",
    "properties": {
        "colors": {
            "type": "OBJECT",
            "description": "Color tokens as hex strings.",
            "properties": {
                "primary": {"type": "STRING"},
                "background": {"type": "STRING"},
                "surface": {"type": "STRING"},
                "text": {"type": "STRING"},
            },
            "nullable": True,
        },
        "cornerRadius": {"type": "INTEGER", "nullable": True},
        "fontFamily": {"type": "STRING", "nullable": True},
    },
    "nullable": True,
}

APP_DESCRIPTION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "components": {
            "type": "ARRAY",
            "description": "An array of UI components that make up the application.",
            "items": COMPONENT_SCHEMA,
        },
        "theme": THEME_SCHEMA,
    },
    "required": ["components"],
}

GENERATION_RESULT_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "explanation": {
            "type": "STRING",
            "description": "A short, friendly explanation of what was built or changed.",
        },
        "filesChanged": {
            "type": "ARRAY",
            "description": "Names of the files touched by this change.",
            "items": {"type": "STRING"},
        },
        "appDescription": APP_DESCRIPTION_SCHEMA,
    },
    "required": ["explanation", "appDescription"],
}
