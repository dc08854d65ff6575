from __future__ import annotations

import logging

from django.utils import timezone

from ..access import require_admin
from ..exceptions import InvalidTransitionError
from ..forms import AccountStatusForm, require_reason, validated
from ..identity import same_entity
from ..lifecycle import ACCOUNT, AccountStatus, NotificationType
from ..models import User
from .common import transition
from .notifications import notify

logger = logging.getLogger(__name__)

REASON_REQUIRED = {AccountStatus.SUSPENDED, AccountStatus.DEACTIVATED}


class AccountStatusService:
    """Suspend, deactivate or reactivate accounts on behalf of an admin."""

    def __init__(self, admin):
        self.admin = admin

    def change_status(self, user: User, data) -> User:
        require_admin(self.admin)
        cleaned = validated(AccountStatusForm(data)).cleaned_data
        target = cleaned["status"]
        reason = cleaned.get("reason", "").strip()
        if target in REASON_REQUIRED:
            reason = require_reason(reason)
        if same_entity(user, self.admin):
            raise InvalidTransitionError("Admins cannot change their own account status.")

        action = ACCOUNT.action_for(user.status, target)
        transition(
            user,
            ACCOUNT,
            action,
            status_reason=reason,
            status_changed_at=timezone.now(),
        )
        if target == AccountStatus.ACTIVE:
            notify(user, "Account reactivated", "Your account is active again.", NotificationType.ADMIN)
        return user
