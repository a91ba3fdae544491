"""Field validation for preview inputs."""

from appspec import InputValidation


REQUIRED_MESSAGE = "This field is required."


def validate(value: str, rules: InputValidation | None) -> str | None:
    """
    Check a field value against its declarative rules.

    Checks run on the trimmed value in order required, minLength, maxLength;
    the first failure wins. A length rule of zero means no limit.

    Args:
        value: Current raw field value
        rules: Validation rules, or None for an unconstrained field

    Returns:
        Error message, or None when the value is valid
    """
    if rules is None:
        return None

    trimmed = value.strip()

    if rules.required and not trimmed:
        return REQUIRED_MESSAGE
    if rules.min_length and len(trimmed) < rules.min_length:
        return f"Must be at least {rules.min_length} characters long."
    if rules.max_length and len(trimmed) > rules.max_length:
        return f"Cannot be more than {rules.max_length} characters long."

    return None
