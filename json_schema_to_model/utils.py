"""
Utility functions for JSON Schema to object model generator.
"""

import keyword
import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

# Like _WORD_PATTERN, but keeps acronyms ("URIKind" -> "URI", "Kind") together
_SNAKE_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "read" -> "Read"

    Args:
        text: The text to convert (snake_case, camelCase, UPPER_SNAKE_CASE, or space-separated)

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def to_camel_case(text: str) -> str:
    """Lower-case the first character ("Color" -> "color")."""
    return text[:1].lower() + text[1:]


def pascal_to_snake_case(text: str) -> str:
    """Convert PascalCase or camelCase text to snake_case.

    Examples:
        "integerProperty" -> "integer_property"
        "URIKind" -> "uri_kind"
        "SNodeKind" -> "s_node_kind"
    """
    if not text:
        return ""
    words = _SNAKE_WORD_PATTERN.findall(_normalize_separators(text))
    return "_".join(word.lower() for word in words)


def to_python_identifier(name: str) -> str:
    """Make a name usable as a Python identifier.

    Keywords get a trailing underscore and names that do not start with a
    letter or underscore get a leading one.
    """
    if not name:
        return "_"
    if not (name[0].isalpha() or name[0] == "_"):
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name
