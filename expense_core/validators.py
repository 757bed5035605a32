"""Presence checks applied to drafts before they are committed."""

from __future__ import annotations

from typing import List

from .exceptions import ValidationError
from .models import DRAFT_FIELDS, FormDraft


def missing_fields(draft: FormDraft) -> List[str]:
    """Return the names of draft fields that are empty, in form order."""
    return [name for name in DRAFT_FIELDS if not getattr(draft, name)]


def validate_draft(draft: FormDraft) -> FormDraft:
    # Presence only; amount text is coerced to a number at display time.
    missing = missing_fields(draft)
    if missing:
        raise ValidationError(missing)
    return draft
