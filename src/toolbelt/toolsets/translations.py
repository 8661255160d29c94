"""Description lookup for tool metadata.

Tool descriptions are looked up by key so operators can reword them without
touching code. A helper takes ``(key, default)`` and returns the text to use.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

TranslationHelper = Callable[[str, str], str]


def null_translation_helper(key: str, default: str) -> str:
    return default


def translation_helper_from(overrides: Mapping[str, str]) -> TranslationHelper:
    """Build a helper that prefers ``overrides`` (keys are case-insensitive)."""
    table = {key.upper(): value for key, value in overrides.items()}

    def helper(key: str, default: str) -> str:
        return table.get(key.upper(), default)

    return helper


__all__ = ["TranslationHelper", "null_translation_helper", "translation_helper_from"]
