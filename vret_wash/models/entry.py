"""
Daily WASH entry model

One record per team per calendar day. Metric values are free-form text as
typed into the form; they are only parsed as numbers when formatted.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vret_wash.teams import VRET_METRICS


@dataclass
class MetricValue:
    """Achieved/goal pair for one VRET metric"""
    achieved: str = ''
    goal: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {'achieved': self.achieved, 'goal': self.goal}

    @property
    def is_blank(self) -> bool:
        return not self.achieved.strip() and not self.goal.strip()


@dataclass
class Incident:
    """A work-related-injury (WRI) report attached to an entry"""
    summary: str = ''
    austin_link: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {'summary': self.summary, 'austinLink': self.austin_link}


@dataclass
class DailyEntry:
    """A team's daily shift report, keyed by (date, team)"""
    date: str
    team: str
    author: str = ''
    vret_metrics: Dict[str, MetricValue] = field(default_factory=dict)
    vret_bridges: Dict[str, str] = field(default_factory=dict)
    wri_incidents: List[Incident] = field(default_factory=list)
    handoff_notes: str = ''
    station_readiness: str = ''
    leadership_callouts: str = ''
    locked: bool = False
    id: Optional[int] = None

    @property
    def key(self):
        return (self.date, self.team)

    @classmethod
    def empty(cls, date: str, team: str, author: str = '') -> 'DailyEntry':
        """Blank entry shown for a date that has no record yet"""
        return cls(
            date=date,
            team=team,
            author=author,
            vret_metrics={metric: MetricValue() for metric in VRET_METRICS},
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyEntry':
        """Build an entry from its wire form; raises pydantic.ValidationError"""
        from .schemas import DailyEntryPayload
        return DailyEntryPayload.model_validate(data).to_entry()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'date': self.date,
            'team': self.team,
            'author': self.author,
            'vretMetrics': {name: value.to_dict() for name, value in self.vret_metrics.items()},
            'vretBridges': dict(self.vret_bridges),
            'wriIncidents': [incident.to_dict() for incident in self.wri_incidents],
            'handoffNotes': self.handoff_notes,
            'stationReadiness': self.station_readiness,
            'leadershipCallouts': self.leadership_callouts,
            'locked': self.locked,
        }
        if self.id is not None:
            data['id'] = self.id
        return data

    def __repr__(self):
        state = 'locked' if self.locked else 'open'
        return f"<DailyEntry {self.id} team={self.team} date={self.date} {state}>"
