"""
Week lock / rollover workflow

Locking a team's week:
1. records the lock in the shared store and tells every viewer,
2. carries each action that is not Closed into the following week,
3. posts the weekly summary to Slack,
4. reports carried / failed / notified back to the caller.

A failed carry is logged and counted; it never stops the other carries or
the lock itself. A failed summary is reported to the initiating caller
only, after the lock and carries are already committed.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from vret_wash.error_handlers.exceptions import (
    AppException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from vret_wash.models import WeekLock, WeeklyAction
from vret_wash.services import realtime
from vret_wash.services.notification_formatter import WeekSnapshot
from vret_wash.services.notifications import notify_week_locked
from vret_wash.teams import is_known_team
from vret_wash.utils.dates import next_week_start, week_days, week_start_for
from vret_wash.utils.validators import validate_date_param

logger = logging.getLogger(__name__)


@dataclass
class WeekLockResult:
    """What happened when a week was locked"""
    team: str
    week_start: str
    carried: List[WeeklyAction] = field(default_factory=list)
    failed_carries: List[WeeklyAction] = field(default_factory=list)
    skipped_carries: List[WeeklyAction] = field(default_factory=list)
    notified: bool = False
    notification_skipped: bool = False
    notification_error: Optional[str] = None

    @property
    def notification_failed(self) -> bool:
        return self.notification_error is not None

    @property
    def message(self) -> str:
        if self.notification_failed:
            return 'Week locked, but failed to send Slack notification.'
        if self.notification_skipped:
            skipped = 'Slack is not configured, so no summary was sent.'
            if self.carried:
                return f"Week locked! {len(self.carried)} incomplete action(s) carried to next week. {skipped}"
            return f"Week locked. {skipped}"
        if self.carried:
            return f"Week locked! {len(self.carried)} incomplete action(s) carried to next week."
        return 'Week locked and summary sent to Slack!'

    def to_dict(self) -> dict:
        return {
            'success': not self.notification_failed,
            'message': self.message,
            'team': self.team,
            'weekStart': self.week_start,
            'carried': len(self.carried),
            'carriedActions': [action.to_dict() for action in self.carried],
            'failedCarries': len(self.failed_carries),
            'notified': self.notified,
        }


def _validate_week(team, week_start, week_end=None):
    start = validate_date_param(week_start, 'weekStart')
    if not is_known_team(team):
        raise ValidationException(f"Unknown team '{team}'")
    if week_start_for(week_start).isoformat() != week_start:
        raise ValidationException(f"weekStart {week_start} is not a Sunday")
    if week_end not in (None, ''):
        end = validate_date_param(week_end, 'weekEnd')
        if end < start:
            raise ValidationException(f"weekEnd {week_end} is before weekStart {week_start}")


class WeekLockWorkflow:
    """Locks and unlocks a team's week"""

    def __init__(self, entry_service, notifier=None):
        self.entry_service = entry_service
        self.store = entry_service.store
        self.notifier = notifier

    def lock_week(self, team: str, week_start: str, locked_by: str = '',
                  week_end: Optional[str] = None) -> WeekLockResult:
        """
        Lock the week and run the rollover.

        Raises:
            ValidationException: Bad team, week start or week end
            ConflictException: The week is already locked
        """
        _validate_week(team, week_start, week_end)

        week_lock = WeekLock(team=team, week_start=week_start, locked_by=locked_by or '')
        if not self.store.add_week_lock(week_lock):
            raise ConflictException(f"Week of {week_start} is already locked for team {team}")

        logger.info(f"Week {week_start} locked for team {team} by {locked_by or 'unknown'}")
        realtime.broadcast_week_lock(team, week_start, True, week_lock)

        result = WeekLockResult(team=team, week_start=week_start)
        week_actions = self.store.actions_for_week(team, week_start)
        self._carry_forward(week_actions, next_week_start(week_start).isoformat(), result)

        snapshot = WeekSnapshot(
            team=team,
            week_start=week_start,
            week_end=week_end or week_days(week_start)[-1].isoformat(),
            entries=self.store.entries_for_week(team, week_start),
            actions=week_actions,
            locked_by=locked_by or '',
            carried_count=len(result.carried),
        )
        self._send_summary(snapshot, result)
        return result

    def _carry_forward(self, actions, target_week, result):
        already_there = self.store.actions_for_week(result.team, target_week)

        for action in actions:
            if action.is_closed:
                continue

            carried = action.carried_to(target_week)
            if any(
                existing.action == carried.action
                and existing.original_week_start == carried.original_week_start
                for existing in already_there
            ):
                logger.info(f"Action {action.id} already carried to {target_week}; skipping")
                result.skipped_carries.append(action)
                continue

            try:
                stored = self.entry_service.save_action(carried)
            except (AppException, OSError, ValueError) as e:
                logger.error(f"Failed to carry over action {action.id}: {e}", exc_info=True)
                result.failed_carries.append(action)
                continue

            if stored is None:
                result.failed_carries.append(action)
            else:
                result.carried.append(stored)

        if result.carried or result.failed_carries:
            logger.info(
                f"Carried {len(result.carried)} action(s) to {target_week} for team {result.team}"
                f" ({len(result.failed_carries)} failed)"
            )

    def _send_summary(self, snapshot, result):
        if self.notifier is None:
            result.notification_skipped = True
            return
        try:
            dispatch = notify_week_locked(self.notifier, snapshot)
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.error(
                f"Could not format weekly summary for team {snapshot.team} week {snapshot.week_start}: {e}",
                exc_info=True,
            )
            result.notification_error = f"Could not format weekly summary: {e}"
            return
        result.notified = dispatch.delivered
        result.notification_skipped = dispatch.skipped
        result.notification_error = dispatch.error if dispatch.failed else None

    def unlock_week(self, team: str, week_start: str) -> WeekLock:
        """
        Remove the week lock. The summary already sent and the carried
        actions stay as they are.

        Raises:
            ResourceNotFoundException: The week is not locked
        """
        _validate_week(team, week_start)
        week_lock = self.store.remove_week_lock(team, week_start)
        if week_lock is None:
            raise ResourceNotFoundException(f"Week of {week_start} is not locked for team {team}")

        logger.info(f"Week {week_start} unlocked for team {team}")
        realtime.broadcast_week_lock(team, week_start, False)
        return week_lock


def get_week_lock_workflow() -> WeekLockWorkflow:
    """Workflow wired to the current app"""
    from flask import current_app
    from vret_wash.services.entry_service import get_entry_service

    return WeekLockWorkflow(
        get_entry_service(),
        notifier=current_app.extensions.get('webhook_notifier'),
    )
