"""Tests for custom AI model validation.

Updates:
  v0.1.0 - 2026-10-07 - Cover built-in shadowing, reuse, and edit re-submission.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from core.custom_models import check_custom_ai_model, custom_models_in_use
from core.exceptions import CustomModelError, PromptValidationError
from models.prompt_model import Prompt


def _prompt(identifier: str, model: str) -> Prompt:
    return Prompt(
        id=identifier,
        title=identifier,
        content="body",
        ai_model=model,
        date_added=datetime(2026, 1, 1, tzinfo=UTC),
    )


def test_builtin_names_are_rejected_case_insensitively() -> None:
    with pytest.raises(CustomModelError) as excinfo:
        check_custom_ai_model("chatgpt", [])
    assert "already exists in the dropdown" in str(excinfo.value)


def test_custom_model_used_by_another_prompt_is_rejected() -> None:
    prompts = [_prompt("a", "Llama 3")]
    with pytest.raises(CustomModelError) as excinfo:
        check_custom_ai_model("LLAMA 3", prompts)
    assert "has already been used" in str(excinfo.value)


def test_editing_prompt_may_resubmit_its_own_model() -> None:
    own = _prompt("a", "Llama 3")
    assert check_custom_ai_model("llama 3", [own], editing=own) == "llama 3"


def test_blank_custom_model_is_rejected() -> None:
    with pytest.raises(PromptValidationError):
        check_custom_ai_model("   ", [])


def test_new_custom_model_is_trimmed() -> None:
    assert check_custom_ai_model("  Mistral  ", [_prompt("a", "Claude")]) == "Mistral"


def test_custom_models_in_use_skips_builtins_and_duplicates() -> None:
    prompts = [
        _prompt("a", "Llama 3"),
        _prompt("b", "Claude"),
        _prompt("c", "llama 3"),
        _prompt("d", "Mistral"),
    ]
    assert custom_models_in_use(prompts) == ["Llama 3", "Mistral"]
