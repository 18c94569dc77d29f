"""
Identifier helpers shared by the synthesizer and the formatters.

Documentation sites address generated pages by kebab-case slugs
(`listKeys_1` -> `list-keys-1`), so collision detection and doc ids
both work on the slug form.
"""

import re

# Acronym followed by a capitalized word, capitalized/lower word, bare acronym, digits
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(value: str) -> list:
    """Split camelCase, PascalCase, snake_case and kebab-case text into words."""
    return _WORD_PATTERN.findall(value)


def kebab_case(value: str) -> str:
    """
    Convert an identifier or label to a kebab-case slug.

    Examples:
        >>> kebab_case("listKeys_1")
        'list-keys-1'
        >>> kebab_case("DocuDevs API")
        'docu-devs-api'

    Text with no ASCII word characters falls back to a whitespace-collapsed,
    lower-cased form so the slug is never empty for non-empty input.
    """
    words = split_words(value)
    if words:
        return "-".join(word.lower() for word in words)
    return re.sub(r"\s+", "-", value.strip()).lower()


def with_suffix(value: str, suffix: int) -> str:
    """Append the `_N` disambiguation suffix; suffix 0 leaves the value untouched."""
    if suffix == 0:
        return value
    return f"{value}_{suffix}"
