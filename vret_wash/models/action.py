"""
Weekly action model

Follow-up items scoped to a team and a Sunday-anchored week. Unclosed items
are carried into the next week when the week is locked.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class ActionStatus(str, Enum):
    """Lifecycle of a weekly action"""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    CLOSED = "Closed"


class ActionPriority(str, Enum):
    """Priority levels shown on the action card"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass
class WeeklyAction:
    """A tracked follow-up item with owner, due date and status"""
    action: str
    owner: str = ''
    due_date: str = ''
    status: str = ActionStatus.OPEN.value
    priority: str = ActionPriority.MEDIUM.value
    week_start: str = ''
    team: str = ''
    created_by: str = ''
    created_at: Optional[str] = None
    weeks_pushed: int = 0
    original_week_start: Optional[str] = None
    id: Optional[int] = None

    @property
    def is_closed(self) -> bool:
        return self.status == ActionStatus.CLOSED.value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeeklyAction':
        """Build an action from its wire form; raises pydantic.ValidationError"""
        from .schemas import WeeklyActionPayload
        return WeeklyActionPayload.model_validate(data).to_action()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'action': self.action,
            'owner': self.owner,
            'dueDate': self.due_date,
            'status': self.status,
            'priority': self.priority,
            'weekStart': self.week_start,
            'team': self.team,
            'createdBy': self.created_by,
            'createdAt': self.created_at,
            'weeksPushed': self.weeks_pushed,
        }
        if self.original_week_start:
            data['originalWeekStart'] = self.original_week_start
        if self.id is not None:
            data['id'] = self.id
        return data

    def carried_to(self, next_week_start: str) -> 'WeeklyAction':
        """
        Copy of this action for the following week.

        The copy has no id or creation time (it is a new record), one more
        pushed week, and keeps the earliest week the item ever appeared in.
        """
        known_weeks = [week for week in (self.original_week_start, self.week_start) if week]
        return replace(
            self,
            id=None,
            created_at=None,
            week_start=next_week_start,
            weeks_pushed=self.weeks_pushed + 1,
            original_week_start=min(known_weeks) if known_weeks else None,
        )

    def __repr__(self):
        return f"<WeeklyAction {self.id} team={self.team} week={self.week_start} {self.status}>"
