"""Validation of user-supplied AI model names.

Updates:
  v0.1.0 - 2026-10-07 - Reject custom models shadowing built-ins or reusing another prompt's model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.prompt_model import is_builtin_model

from .exceptions import CustomModelError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from models.prompt_model import Prompt


def custom_models_in_use(prompts: Iterable[Prompt]) -> list[str]:
    """Return distinct custom model names in first-seen order (case-insensitive)."""
    seen: set[str] = set()
    models: list[str] = []
    for prompt in prompts:
        if not prompt.has_custom_model:
            continue
        key = prompt.ai_model.casefold()
        if key in seen:
            continue
        seen.add(key)
        models.append(prompt.ai_model)
    return models


def check_custom_ai_model(
    value: str,
    prompts: Iterable[Prompt],
    *,
    editing: Prompt | None = None,
) -> str:
    """Return the trimmed custom model name or raise :class:`CustomModelError`.

    A name is rejected when it matches a built-in model, or when another prompt
    already uses it as a custom model. Re-submitting the model a prompt already
    carries while editing that prompt is accepted.
    """
    name = (value or "").strip()
    if not name:
        raise CustomModelError("Custom AI model name cannot be empty.")
    if is_builtin_model(name):
        raise CustomModelError(
            f'"{name}" already exists in the dropdown. Please select it from the list instead.'
        )
    key = name.casefold()
    if editing is not None and editing.ai_model.casefold() == key:
        return name
    for prompt in prompts:
        if editing is not None and prompt.id == editing.id:
            continue
        if prompt.has_custom_model and prompt.ai_model.casefold() == key:
            raise CustomModelError(
                f'"{name}" has already been used. Please select it from the dropdown instead.'
            )
    return name


__all__ = ["check_custom_ai_model", "custom_models_in_use"]
