"""Prompt create/update/delete orchestration for the record store.

Updates:
  v0.3.1 - 2026-10-19 - Validate every custom ai_model; canonicalise built-ins.
  v0.3.0 - 2026-10-09 - Add duplicate, restore, and template instantiation helpers.
  v0.2.0 - 2026-10-07 - Validate custom AI models on create and update.
  v0.1.0 - 2026-10-03 - Extract prompt CRUD into mixin.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from models.prompt_model import DEFAULT_AI_MODEL, Prompt, builtin_model_name, new_prompt_id
from prompt_templates import find_template

from ..custom_models import check_custom_ai_model
from ..exceptions import PromptNotFoundError, PromptValidationError, RecordNotFoundError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Callable, Iterable
    from datetime import datetime

logger = logging.getLogger("prompt_library.store")

__all__ = ["PromptLifecycleMixin"]

_UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "content",
        "category",
        "tags",
        "ai_model",
        "source_url",
        "notes",
        "is_favorite",
        "collection_id",
        "is_template",
    }
)
_IMMUTABLE_FIELDS = frozenset({"id", "date_added", "usage_count", "last_used"})


def _require_text(label: str, value: Any) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise PromptValidationError(f"Prompt {label} cannot be empty.")
    return text


class PromptLifecycleMixin:
    """Prompt CRUD with write-through persistence and remote propagation."""

    _prompts: list[Prompt]
    _clock: Callable[[], datetime]

    # Provided by LibraryStorageMixin.
    _persist_prompts: Callable[[], None]
    _propagate_upsert: Callable[..., None]
    _propagate_delete: Callable[[str], None]

    # Lookup ------------------------------------------------------------- #

    @property
    def prompts(self) -> list[Prompt]:
        """Return the live prompts in storage order (newest created first)."""
        return list(self._prompts)

    def get_prompt(self, prompt_id: str) -> Prompt:
        return self._prompts[self._index_of(prompt_id)]

    def _index_of(self, prompt_id: str) -> int:
        for index, prompt in enumerate(self._prompts):
            if prompt.id == prompt_id:
                return index
        raise PromptNotFoundError(f"Prompt {prompt_id} not found")

    def _contains(self, prompt_id: str) -> bool:
        return any(prompt.id == prompt_id for prompt in self._prompts)

    def _fresh_id(self) -> str:
        identifier = new_prompt_id()
        while self._contains(identifier):  # pragma: no cover - uuid4 collision
            identifier = new_prompt_id()
        return identifier

    # Mutations ---------------------------------------------------------- #

    def _resolve_ai_model(
        self,
        ai_model: str | None,
        custom_ai_model: str | None,
        *,
        editing: Prompt | None = None,
    ) -> str:
        if custom_ai_model is not None:
            return check_custom_ai_model(custom_ai_model, self._prompts, editing=editing)
        if not (ai_model or "").strip():
            return DEFAULT_AI_MODEL
        canonical = builtin_model_name(ai_model)
        if canonical is not None:
            return canonical
        return check_custom_ai_model(ai_model or "", self._prompts, editing=editing)

    def create_prompt(
        self,
        *,
        title: str,
        content: str,
        category: str = "",
        tags: Iterable[str] | None = None,
        ai_model: str = DEFAULT_AI_MODEL,
        custom_ai_model: str | None = None,
        source_url: str | None = None,
        notes: str | None = None,
        is_favorite: bool = False,
        collection_id: str | None = None,
        is_template: bool | None = None,
    ) -> Prompt:
        """Insert a new prompt with a fresh id and zeroed usage statistics.

        Built-in model names are stored in catalogue spelling. Any other
        *ai_model*, or *custom_ai_model* when given, must pass the custom model
        checks.
        """
        clean_title = _require_text("title", title)
        _require_text("content", content)
        return self._insert_new_prompt(
            title=clean_title,
            content=content,
            category=category,
            tags=list(tags or []),
            ai_model=self._resolve_ai_model(ai_model, custom_ai_model),
            source_url=source_url,
            notes=notes,
            is_favorite=is_favorite,
            collection_id=collection_id,
            is_template=is_template,
        )

    def _insert_new_prompt(self, **fields: Any) -> Prompt:
        try:
            prompt = Prompt(
                id=self._fresh_id(),
                usage_count=0,
                last_used=None,
                date_added=self._clock(),
                **fields,
            )
        except (TypeError, ValueError) as exc:
            raise PromptValidationError(str(exc)) from exc
        self._prompts.insert(0, prompt)
        self._persist_prompts()
        self._propagate_upsert(prompt, created=True)
        logger.info("Created prompt", extra={"prompt_id": prompt.id})
        return prompt

    def update_prompt(
        self,
        prompt_id: str,
        *,
        custom_ai_model: str | None = None,
        **changes: Any,
    ) -> Prompt:
        """Merge *changes* into the prompt; ``id`` and ``date_added`` never change."""
        index = self._index_of(prompt_id)
        current = self._prompts[index]
        blocked = _IMMUTABLE_FIELDS.intersection(changes)
        if blocked:
            raise PromptValidationError(
                f"Prompt field(s) cannot be updated: {', '.join(sorted(blocked))}"
            )
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise PromptValidationError(f"Unknown prompt field(s): {', '.join(sorted(unknown))}")
        if "title" in changes:
            changes["title"] = _require_text("title", changes["title"])
        if "content" in changes:
            _require_text("content", changes["content"])
        if custom_ai_model is not None or "ai_model" in changes:
            changes["ai_model"] = self._resolve_ai_model(
                changes.get("ai_model"), custom_ai_model, editing=current
            )
        if "tags" in changes:
            changes["tags"] = list(changes["tags"] or [])
        try:
            updated = replace(current, **changes)
        except (TypeError, ValueError) as exc:
            raise PromptValidationError(str(exc)) from exc
        return self._replace_prompt(index, updated)

    def _replace_prompt(self, index: int, updated: Prompt) -> Prompt:
        self._prompts[index] = updated
        self._persist_prompts()
        self._propagate_upsert(updated, created=False)
        return updated

    def delete_prompt(self, prompt_id: str) -> Prompt:
        """Remove and return the prompt so callers can offer undo."""
        removed = self._prompts.pop(self._index_of(prompt_id))
        self._persist_prompts()
        self._propagate_delete(removed.id)
        logger.info("Deleted prompt", extra={"prompt_id": removed.id})
        return removed

    def restore_prompt(self, prompt: Prompt) -> Prompt:
        """Re-insert a previously deleted prompt (undo)."""
        if self._contains(prompt.id):
            raise PromptValidationError(f"Prompt {prompt.id} already exists")
        self._prompts.insert(0, prompt)
        self._persist_prompts()
        self._propagate_upsert(prompt, created=True)
        return prompt

    def bulk_delete_prompts(self, prompt_ids: Iterable[str]) -> list[Prompt]:
        """Remove every matching prompt; unknown ids are ignored."""
        targets = set(prompt_ids)
        removed = [prompt for prompt in self._prompts if prompt.id in targets]
        if not removed:
            return []
        self._prompts = [prompt for prompt in self._prompts if prompt.id not in targets]
        self._persist_prompts()
        for prompt in removed:
            self._propagate_delete(prompt.id)
        logger.info("Bulk deleted prompts", extra={"count": len(removed)})
        return removed

    def toggle_favorite(self, prompt_id: str) -> Prompt:
        index = self._index_of(prompt_id)
        current = self._prompts[index]
        return self._replace_prompt(index, replace(current, is_favorite=not current.is_favorite))

    def increment_usage(self, prompt_id: str) -> Prompt:
        """Record one use: ``usage_count`` grows by one and ``last_used`` never moves back."""
        index = self._index_of(prompt_id)
        current = self._prompts[index]
        now = self._clock()
        last_used = now if current.last_used is None else max(now, current.last_used)
        updated = replace(current, usage_count=current.usage_count + 1, last_used=last_used)
        return self._replace_prompt(index, updated)

    def duplicate_prompt(self, prompt_id: str) -> Prompt:
        """Create a copy titled ``"<title> (Copy)"`` with fresh usage statistics."""
        source = self.get_prompt(prompt_id)
        return self._insert_new_prompt(
            title=f"{source.title} (Copy)",
            content=source.content,
            category=source.category,
            tags=source.tags,
            ai_model=source.ai_model,
            source_url=source.source_url,
            notes=source.notes,
            is_favorite=False,
            collection_id=source.collection_id,
            is_template=source.is_template,
        )

    def create_from_template(self, title: str) -> Prompt:
        """Add a prompt built from the starter template named *title*."""
        template = find_template(title)
        if template is None:
            raise RecordNotFoundError(f"Template '{title}' not found")
        return self.create_prompt(
            title=template.title,
            content=template.content,
            category=template.category,
            tags=template.tags,
            ai_model=template.ai_model,
            notes=template.notes,
        )
