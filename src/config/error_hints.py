"""Error hints for configuration validation errors.

Maps pydantic error types and well-known field names to short remediation
hints shown by ``newsdesk validate``.
"""

from typing import Final


# Mapping of error types to user-friendly hints
ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your configuration.",
    "extra_forbidden": "Unknown field. Check for typos; extra keys are not allowed.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "float_type": "This field must be a number.",
    "float_parsing": "This field must be a number.",
    "string_type": "This field must be a text string.",
    "bool_type": "This field must be true or false.",
    "bool_parsing": "This field must be true or false.",
    "list_type": "This field must be a list/array.",
    "dict_type": "This field must be an object/mapping.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "too_short": "The list needs at least one entry.",
    "string_too_short": "The text is too short. Check minimum length requirement.",
    "string_too_long": "The text is too long. Check maximum length requirement.",
    "string_pattern_mismatch": "The format is invalid. Use lowercase letters, numbers, hyphens, or underscores only.",
    "value_error": "Check the value against the documented constraints.",
    "file_not_found": "The file does not exist. Check the file path.",
    "yaml_parse_error": "Invalid YAML syntax. Check for proper indentation and formatting.",
}

# Field-specific hints for more context
FIELD_HINTS: Final[dict[str, str]] = {
    "name": "Use lowercase letters, numbers, hyphens, or underscores (e.g., 'politics').",
    "file": "Path to a .json article file, relative to pools.yaml.",
    "size": "Slot size written as WxH (e.g., '2x1').",
    "position": "Grid position written as [x, y] with non-negative integers.",
    "background_sizes": "List of slot sizes written as WxH (e.g., ['2x2']).",
    "genre_count": "Must be between 1 and 20.",
    "repeat_penalty_factor": "Must be between 0.0 (strong penalty) and 1.0 (no penalty).",
    "fifth_slot_chance": "Percent chance between 0 and 100.",
    "hype_min_chance": "Percent between 0 and 100, not above hype_max_chance.",
    "hype_max_chance": "Percent between 0 and 100, not below hype_min_chance.",
    "chance_offset_1": "Probability between 0.0 and 1.0, not above chance_offset_2.",
    "chance_offset_2": "Probability between 0.0 and 1.0, not below chance_offset_1.",
    "keys": "Must be a non-empty list of visual keys.",
    "agency_id": "Agency id (0 = agency A, 1 = agency B, 2 = featured, 3 = random).",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'int_type').
        field_name: Optional field name for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        # 'selection.genre_count' -> 'genre_count'
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(
        error_type, "Check the configuration documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'selection.genre_count').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
