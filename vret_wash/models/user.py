"""
User and week-lock records
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class User:
    """A name + team pair, created on first login"""
    name: str
    team: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(name=data.get('name', ''), team=data.get('team', ''))

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'team': self.team}


@dataclass
class WeekLock:
    """A team's week that has been locked and summarised"""
    team: str
    week_start: str
    locked_by: str = ''
    locked_at: Optional[str] = None

    @property
    def key(self):
        return (self.team, self.week_start)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeekLock':
        return cls(
            team=data.get('team', ''),
            week_start=data.get('weekStart', ''),
            locked_by=data.get('lockedBy', ''),
            locked_at=data.get('lockedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'team': self.team,
            'weekStart': self.week_start,
            'lockedBy': self.locked_by,
            'lockedAt': self.locked_at,
        }
