from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator
from django.utils import timezone

from ..exceptions import InvalidTransitionError, NotFoundError
from ..lifecycle import StateMachine

logger = logging.getLogger(__name__)


def transition(instance, machine: StateMachine, action: str, *, field: str = "status", **changes: Any) -> str:
    """Apply ``action`` to ``instance`` and persist the new state.

    The row is only updated while it still holds the state we read, so two
    admins or landlords acting on the same record cannot both succeed.
    """
    current = getattr(instance, field)
    target = machine.next_state(current, action)
    if hasattr(instance, "updated_at") and "updated_at" not in changes:
        changes["updated_at"] = timezone.now()

    updated = type(instance).objects.filter(pk=instance.pk, **{field: current}).update(**{field: target}, **changes)
    if not updated:
        instance.refresh_from_db(fields=[field])
        latest = getattr(instance, field)
        logger.warning(
            "Stale %s transition on %s %s: expected %s, found %s",
            action,
            machine.name,
            instance.pk,
            current,
            latest,
        )
        raise InvalidTransitionError(
            f"This {machine.name} is already {latest}; refresh and try again.",
            state=latest,
            action=action,
        )

    setattr(instance, field, target)
    for name, value in changes.items():
        setattr(instance, name, value)
    logger.info("%s %s: %s -> %s (%s)", machine.name.capitalize(), instance.pk, current, target, action)
    return target


def get_or_not_found(queryset, message: str, **lookup):
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(message) from None


@dataclass(frozen=True)
class Page:
    items: list
    page: int
    limit: int
    total: int
    pages: int

    def meta(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


def _as_int(value, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def paginate(queryset, page=None, limit=None) -> Page:
    options = settings.HOSTEL_CONNECT
    limit = min(max(_as_int(limit, options["PAGE_SIZE"]), 1), options["MAX_PAGE_SIZE"])
    page = max(_as_int(page, 1), 1)
    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    return Page(items=items, page=page, limit=limit, total=paginator.count, pages=paginator.num_pages if paginator.count else 0)
