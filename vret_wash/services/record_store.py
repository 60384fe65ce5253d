"""
Record Store
Holds users, daily entries, weekly actions and week locks in memory and
mirrors the whole snapshot to a single JSON document after every mutation.

Snapshot layout:
    {
        "users": [...],
        "washEntries": [...],
        "weeklyActions": [...],
        "nextId": {"wash": 1, "action": 1},
        "weekLocks": [...]
    }

Every mutate+persist step runs under one re-entrant lock, so memory and disk
never interleave between writers. Two writers on the same key still resolve
as last-write-wins: whichever upsert persists last is the stored record.
"""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

from vret_wash.error_handlers.exceptions import ConfigurationException
from vret_wash.models import DailyEntry, User, WeekLock, WeeklyAction
from vret_wash.utils.dates import utc_now_iso, week_days

logger = logging.getLogger(__name__)


class RecordStore:
    """In-process record store backed by a JSON snapshot file"""

    def __init__(self, path: Optional[str] = None, app=None):
        self.path = path
        self._lock = threading.RLock()
        self._reset()

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """
        Resolve the snapshot path from app config, load it, register the store.

        Raises:
            ConfigurationException: DATA_FILE is blank
        """
        path = self.path or app.config.get('DATA_FILE')
        if not path:
            raise ConfigurationException('DATA_FILE not configured')
        if not os.path.isabs(path):
            basedir = os.path.abspath(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
            path = os.path.join(basedir, path)
        self.path = path
        self.load()
        app.extensions['record_store'] = self

    def _reset(self):
        self.users: List[User] = []
        self.entries: List[DailyEntry] = []
        self.actions: List[WeeklyAction] = []
        self.week_locks: List[WeekLock] = []
        self.next_id: Dict[str, int] = {'wash': 1, 'action': 1}

    # ------------------------------------------------------------------
    # Snapshot I/O
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """
        Load the snapshot from disk.

        A missing file starts an empty store. An unreadable or malformed
        snapshot is discarded and an empty store substituted.

        Returns:
            True if a snapshot was loaded
        """
        with self._lock:
            self._reset()
            if not self.path or not os.path.exists(self.path):
                logger.info(f"No snapshot at {self.path}; starting with an empty store")
                return False

            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._apply_snapshot(data)
            except (OSError, ValueError, TypeError, AttributeError, KeyError) as e:
                logger.warning(f"Discarding unreadable snapshot {self.path}: {e}")
                self._reset()
                return False

            logger.info(
                f"Loaded snapshot: {len(self.entries)} entries, "
                f"{len(self.actions)} actions, {len(self.users)} users"
            )
            return True

    def _apply_snapshot(self, data):
        if not isinstance(data, dict):
            raise TypeError('snapshot root must be an object')

        self.users = [User.from_dict(item) for item in data.get('users') or []]
        self.entries = [DailyEntry.from_dict(item) for item in data.get('washEntries') or []]
        self.actions = [WeeklyAction.from_dict(item) for item in data.get('weeklyActions') or []]
        self.week_locks = [WeekLock.from_dict(item) for item in data.get('weekLocks') or []]

        next_id = data.get('nextId') or {}
        # Never hand out an id already present, even if the counter is stale
        self.next_id = {
            'wash': max(int(next_id.get('wash', 1)), self._max_id(self.entries) + 1),
            'action': max(int(next_id.get('action', 1)), self._max_id(self.actions) + 1),
        }

    @staticmethod
    def _max_id(records) -> int:
        return max((record.id for record in records if record.id is not None), default=0)

    def snapshot(self) -> dict:
        """The whole store as one JSON-serialisable document"""
        with self._lock:
            return {
                'users': [user.to_dict() for user in self.users],
                'washEntries': [entry.to_dict() for entry in self.entries],
                'weeklyActions': [action.to_dict() for action in self.actions],
                'nextId': dict(self.next_id),
                'weekLocks': [lock.to_dict() for lock in self.week_locks],
            }

    def persist(self) -> bool:
        """
        Rewrite the snapshot file.

        A failed write is logged and the in-memory state is kept as is.

        Returns:
            True if the snapshot reached disk
        """
        with self._lock:
            document = self.snapshot()
            directory = os.path.dirname(self.path) or '.'
            tmp_path = None
            try:
                os.makedirs(directory, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    'w', encoding='utf-8', dir=directory, suffix='.tmp', delete=False
                ) as tmp:
                    tmp_path = tmp.name
                    json.dump(document, tmp, indent=2)
                os.replace(tmp_path, self.path)
                return True
            except OSError as e:
                logger.error(f"Failed to write snapshot {self.path}: {e}", exc_info=True)
                if tmp_path and os.path.exists(tmp_path):
                    os.remove(tmp_path)
                return False

    @contextmanager
    def mutation(self):
        """Hold the store lock for a change and persist once it completes"""
        with self._lock:
            yield self
            self.persist()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_user(self, name: str, team: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self.users if u.name == name and u.team == team), None)

    def get_or_create_user(self, name: str, team: str) -> Tuple[User, bool]:
        """Return the (name, team) user, creating it on first sight"""
        with self._lock:
            user = self.find_user(name, team)
            if user:
                return user, False
            with self.mutation():
                user = User(name=name, team=team)
                self.users.append(user)
            return user, True

    # ------------------------------------------------------------------
    # Daily entries
    # ------------------------------------------------------------------

    def list_entries(self) -> List[DailyEntry]:
        with self._lock:
            return list(self.entries)

    def get_entry(self, date: str, team: str) -> Optional[DailyEntry]:
        with self._lock:
            return next((e for e in self.entries if e.date == date and e.team == team), None)

    def entries_for_week(self, team: str, week_start: str) -> List[DailyEntry]:
        """The team's entries for the seven days starting at week_start, in date order"""
        dates = [day.isoformat() for day in week_days(week_start)]
        with self._lock:
            by_date = {e.date: e for e in self.entries if e.team == team and e.date in dates}
        return [by_date[d] for d in dates if d in by_date]

    def upsert_entry(self, entry: DailyEntry) -> Tuple[DailyEntry, Optional[DailyEntry]]:
        """
        Store an entry by its (date, team) key.

        An existing record keeps its id and has every other field replaced;
        otherwise the entry gets the next wash id and is appended.

        Returns:
            (stored entry, previous entry or None)
        """
        with self.mutation():
            index = next(
                (i for i, e in enumerate(self.entries) if e.key == entry.key), None
            )
            if index is not None:
                previous = self.entries[index]
                entry.id = previous.id
                self.entries[index] = entry
            else:
                previous = None
                entry.id = self.next_id['wash']
                self.next_id['wash'] += 1
                self.entries.append(entry)
            return entry, previous

    # ------------------------------------------------------------------
    # Weekly actions
    # ------------------------------------------------------------------

    def list_actions(self) -> List[WeeklyAction]:
        with self._lock:
            return list(self.actions)

    def get_action(self, action_id: int) -> Optional[WeeklyAction]:
        with self._lock:
            return next((a for a in self.actions if a.id == action_id), None)

    def actions_for_week(self, team: str, week_start: str) -> List[WeeklyAction]:
        with self._lock:
            return [a for a in self.actions if a.team == team and a.week_start == week_start]

    def upsert_action(self, action: WeeklyAction) -> Optional[WeeklyAction]:
        """
        Store an action.

        With an id the matching record is replaced; an unknown id is a silent
        no-op and returns None. Without an id the action gets the next action
        id and a creation timestamp.
        """
        with self._lock:
            if action.id is not None:
                index = next((i for i, a in enumerate(self.actions) if a.id == action.id), None)
                if index is None:
                    logger.debug(f"Ignoring update for unknown action id {action.id}")
                    return None
                with self.mutation():
                    self.actions[index] = action
                return action

            with self.mutation():
                action.id = self.next_id['action']
                self.next_id['action'] += 1
                action.created_at = utc_now_iso()
                self.actions.append(action)
            return action

    # ------------------------------------------------------------------
    # Week locks
    # ------------------------------------------------------------------

    def list_week_locks(self) -> List[WeekLock]:
        with self._lock:
            return list(self.week_locks)

    def get_week_lock(self, team: str, week_start: str) -> Optional[WeekLock]:
        with self._lock:
            return next((w for w in self.week_locks if w.key == (team, week_start)), None)

    def add_week_lock(self, week_lock: WeekLock) -> bool:
        """Record a week lock; returns False if the week was already locked"""
        with self._lock:
            if self.get_week_lock(week_lock.team, week_lock.week_start):
                return False
            with self.mutation():
                week_lock.locked_at = week_lock.locked_at or utc_now_iso()
                self.week_locks.append(week_lock)
            return True

    def remove_week_lock(self, team: str, week_start: str) -> Optional[WeekLock]:
        with self._lock:
            week_lock = self.get_week_lock(team, week_start)
            if week_lock is None:
                return None
            with self.mutation():
                self.week_locks.remove(week_lock)
            return week_lock


def get_record_store() -> RecordStore:
    """Store registered on the current app"""
    from flask import current_app
    return current_app.extensions['record_store']
