"""
core.domain.transactions — Helpers for safe read-modify-write updates.

Wraps ``transaction.atomic`` and ``select_for_update`` into reusable
patterns so that every service layer follows the same concurrency-safe
approach when mutating a single row (e.g. toggling an officer's USSD
access or rotating their Quick PIN).

Usage::

    from core.domain.transactions import locked_update

    officer = locked_update(User, officer_id, ussd_enabled=False)
"""

from __future__ import annotations

from typing import Any, TypeVar

from django.db import models, transaction

from core.domain.exceptions import NotFound

M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Must be called inside an ``atomic()`` block.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")


def locked_update(model_class: type[M], pk: Any, **changes: Any) -> M:
    """
    Lock the row, apply ``changes`` and save only the touched fields.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.
        **changes:   ``field=value`` pairs to set.

    Returns:
        The updated instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    with transaction.atomic():
        instance = lock_for_update(model_class, pk)
        for field, value in changes.items():
            setattr(instance, field, value)
        instance.save(update_fields=list(changes))
    return instance
