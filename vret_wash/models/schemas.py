"""
Inbound payload schemas

Pydantic models for the JSON bodies and socket payloads that create or
update records. Wire names are camelCase; field names are snake_case.
Each schema converts to the dataclass the record store keeps.

Usage:
    entry = parse_payload(DailyEntryPayload, request_json).to_entry()
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from vret_wash.error_handlers.exceptions import ValidationException
from vret_wash.teams import TEAM_IDS, is_known_team
from .action import ActionPriority, ActionStatus, WeeklyAction
from .entry import DailyEntry, Incident, MetricValue


def _check_iso_date(value: str, name: str) -> str:
    try:
        datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        raise ValueError(f"{name} must be YYYY-MM-DD (e.g., 2026-01-05)")
    return value


def _check_team(value: str) -> str:
    if not is_known_team(value):
        raise ValueError(f"unknown team '{value}', expected one of: {', '.join(TEAM_IDS)}")
    return value


class WirePayload(BaseModel):
    """Base for camelCase payloads; free text accepts numbers and null"""
    model_config = {
        'alias_generator': to_camel,
        'populate_by_name': True,
        'coerce_numbers_to_str': True,
        'extra': 'ignore',
    }

    @field_validator('*', mode='before')
    @classmethod
    def null_means_unset(cls, value, info):
        if value is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class MetricValuePayload(WirePayload):
    achieved: str = ''
    goal: str = ''


class IncidentPayload(WirePayload):
    summary: str = ''
    austin_link: str = ''


class DailyEntryPayload(WirePayload):
    """A daily WASH entry as saved by the board"""
    date: str
    team: str
    author: str = ''
    vret_metrics: Dict[str, MetricValuePayload] = Field(default_factory=dict)
    vret_bridges: Dict[str, str] = Field(default_factory=dict)
    wri_incidents: List[IncidentPayload] = Field(default_factory=list)
    handoff_notes: str = ''
    station_readiness: str = ''
    leadership_callouts: str = ''
    locked: StrictBool = False
    id: Optional[int] = None

    @field_validator('date')
    @classmethod
    def check_date(cls, value):
        return _check_iso_date(value, 'date')

    @field_validator('team')
    @classmethod
    def check_team(cls, value):
        return _check_team(value)

    def to_entry(self) -> DailyEntry:
        return DailyEntry(
            date=self.date,
            team=self.team,
            author=self.author,
            vret_metrics={
                name: MetricValue(value.achieved, value.goal)
                for name, value in self.vret_metrics.items()
            },
            vret_bridges=dict(self.vret_bridges),
            wri_incidents=[Incident(i.summary, i.austin_link) for i in self.wri_incidents],
            handoff_notes=self.handoff_notes,
            station_readiness=self.station_readiness,
            leadership_callouts=self.leadership_callouts,
            locked=self.locked,
            id=self.id,
        )


class WeeklyActionPayload(WirePayload):
    """A weekly action; with an id it replaces the stored action"""
    action: str
    owner: str = ''
    due_date: str = ''
    status: ActionStatus = ActionStatus.OPEN
    priority: ActionPriority = ActionPriority.MEDIUM
    week_start: str
    team: str
    created_by: str = ''
    created_at: Optional[str] = None
    weeks_pushed: int = Field(default=0, ge=0)
    original_week_start: Optional[str] = None
    id: Optional[int] = None

    @field_validator('action')
    @classmethod
    def check_action_text(cls, value):
        if not value.strip():
            raise ValueError('action text is required')
        return value

    @field_validator('status', 'priority', 'id', 'original_week_start', mode='before')
    @classmethod
    def blank_means_unset(cls, value, info):
        if value == '':
            return cls.model_fields[info.field_name].get_default()
        return value

    @field_validator('week_start')
    @classmethod
    def check_week_start(cls, value):
        return _check_iso_date(value, 'weekStart')

    @field_validator('original_week_start')
    @classmethod
    def check_original_week(cls, value):
        return _check_iso_date(value, 'originalWeekStart') if value else None

    @field_validator('team')
    @classmethod
    def check_team(cls, value):
        return _check_team(value)

    def to_action(self) -> WeeklyAction:
        return WeeklyAction(
            action=self.action,
            owner=self.owner,
            due_date=self.due_date,
            status=self.status.value,
            priority=self.priority.value,
            week_start=self.week_start,
            team=self.team,
            created_by=self.created_by,
            created_at=self.created_at,
            weeks_pushed=self.weeks_pushed,
            original_week_start=self.original_week_start,
            id=self.id,
        )


class LoginPayload(BaseModel):
    """Name + team pair; both must be text"""
    name: StrictStr
    team: StrictStr

    @field_validator('name')
    @classmethod
    def check_name(cls, value):
        if not value.strip():
            raise ValueError('name is required')
        return value.strip()

    @field_validator('team')
    @classmethod
    def check_team(cls, value):
        return _check_team(value)


def _describe(error: Dict[str, Any]) -> str:
    location = '.'.join(str(part) for part in error['loc']) or 'body'
    return f"{location}: {error['msg']}"


def parse_payload(schema, data: Any, what: str = 'payload'):
    """
    Validate a payload against a schema.

    Raises:
        ValidationException: The payload does not match, with one line per problem
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        problems = [_describe(error) for error in e.errors(include_url=False)]
        raise ValidationException(
            f"Invalid {what}: {'; '.join(problems)}",
            details={'fields': problems},
        ) from e
