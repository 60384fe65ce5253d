"""
Entry/Action Upsert Service
Find-by-natural-key-or-append for daily entries and weekly actions.

Every accepted upsert is persisted by the record store and then broadcast
to all connected viewers. Saving a daily entry whose ``locked`` flag goes
from false to true sends the per-entry notification exactly once.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from vret_wash.error_handlers.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from vret_wash.extensions import socketio
from vret_wash.models import (
    DailyEntry,
    DailyEntryPayload,
    LoginPayload,
    User,
    WeeklyAction,
    WeeklyActionPayload,
    parse_payload,
)
from vret_wash.services import realtime
from vret_wash.services.notifications import notify_entry_locked
from vret_wash.teams import TEAM_IDS, is_known_team
from vret_wash.utils.validators import validate_date_param

logger = logging.getLogger(__name__)


@dataclass
class EntryUpsertResult:
    """Stored entry plus the lock state before and after the save"""
    entry: DailyEntry
    was_locked: bool
    is_locked: bool
    created: bool = False

    @property
    def became_locked(self) -> bool:
        return not self.was_locked and self.is_locked


def _validate_team(team):
    if not is_known_team(team):
        raise ValidationException(
            f"Unknown team '{team}'. Expected one of: {', '.join(TEAM_IDS)}"
        )


class EntryService:
    """Upserts for daily entries, weekly actions and users"""

    def __init__(self, store, notifier=None, notify_async=True):
        self.store = store
        self.notifier = notifier
        self.notify_async = notify_async

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def login(self, name: Any, team: Any) -> Tuple[User, bool]:
        """Return the (name, team) user, creating it on first login"""
        login = parse_payload(LoginPayload, {'name': name, 'team': team}, 'login')

        user, created = self.store.get_or_create_user(login.name, login.team)
        if created:
            logger.info(f"New user {user.name} on team {user.team}")
        return user, created

    # ------------------------------------------------------------------
    # Daily entries
    # ------------------------------------------------------------------

    def empty_entry(self, date: str, team: str, author: str = '') -> DailyEntry:
        validate_date_param(date)
        _validate_team(team)
        return DailyEntry.empty(date, team, author)

    def entry_for(self, date: str, team: str, author: str = '') -> DailyEntry:
        """The stored entry for (date, team), or a blank one to fill in"""
        blank = self.empty_entry(date, team, author)
        return self.store.get_entry(date, team) or blank

    def parse_entry(self, payload: Optional[Dict[str, Any]]) -> DailyEntry:
        return parse_payload(DailyEntryPayload, payload, 'WASH entry').to_entry()

    def upsert_daily_entry(self, payload: Optional[Dict[str, Any]]) -> EntryUpsertResult:
        """
        Store an entry by (date, team), replacing every field except id.

        Returns:
            EntryUpsertResult for the stored record
        """
        entry = self.parse_entry(payload)
        return self._save_entry(entry)

    def _save_entry(self, entry: DailyEntry) -> EntryUpsertResult:
        stored, previous = self.store.upsert_entry(entry)
        result = EntryUpsertResult(
            entry=stored,
            was_locked=bool(previous and previous.locked),
            is_locked=stored.locked,
            created=previous is None,
        )

        realtime.broadcast_entry(stored)

        if result.became_locked:
            logger.info(f"WASH entry {stored.team} {stored.date} locked; sending summary")
            self._dispatch_entry_locked(stored)
        elif result.was_locked and not result.is_locked:
            logger.info(f"WASH entry {stored.team} {stored.date} unlocked")

        return result

    def _dispatch_entry_locked(self, entry: DailyEntry):
        if self.notifier is None:
            return
        if self.notify_async:
            socketio.start_background_task(notify_entry_locked, self.notifier, entry)
        else:
            notify_entry_locked(self.notifier, entry)

    def set_entry_lock(self, date: str, team: str, locked: bool) -> EntryUpsertResult:
        """
        Explicitly lock or unlock a stored entry.

        Raises:
            ResourceNotFoundException: No entry for (date, team)
            ConflictException: The entry is already in the requested state
        """
        validate_date_param(date)
        _validate_team(team)

        existing = self.store.get_entry(date, team)
        if existing is None:
            raise ResourceNotFoundException(f"No WASH entry for team {team} on {date}")
        if existing.locked == locked:
            state = 'locked' if locked else 'unlocked'
            raise ConflictException(f"WASH entry for team {team} on {date} is already {state}")

        return self._save_entry(replace(existing, locked=locked))

    # ------------------------------------------------------------------
    # Weekly actions
    # ------------------------------------------------------------------

    def parse_action(self, payload: Optional[Dict[str, Any]]) -> WeeklyAction:
        return parse_payload(WeeklyActionPayload, payload, 'weekly action').to_action()

    def upsert_weekly_action(self, payload: Optional[Dict[str, Any]]) -> Optional[WeeklyAction]:
        """
        Create an action (no id) or replace the action with the given id.

        Returns:
            The stored action, or None when the id does not exist
        """
        return self.save_action(self.parse_action(payload))

    def save_action(self, action: WeeklyAction) -> Optional[WeeklyAction]:
        stored = self.store.upsert_action(action)
        if stored is None:
            return None
        realtime.broadcast_action(stored)
        return stored


def get_entry_service() -> EntryService:
    """Entry service wired to the current app's store and notifier"""
    from flask import current_app
    return EntryService(
        current_app.extensions['record_store'],
        notifier=current_app.extensions.get('webhook_notifier'),
        notify_async=current_app.config.get('NOTIFY_ASYNC', True),
    )
