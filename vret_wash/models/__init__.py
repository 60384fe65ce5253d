"""
Record types held in the snapshot store
"""
from .entry import DailyEntry, Incident, MetricValue
from .action import WeeklyAction, ActionStatus, ActionPriority
from .user import User, WeekLock
from .schemas import (
    DailyEntryPayload,
    LoginPayload,
    WeeklyActionPayload,
    parse_payload,
)

__all__ = [
    'DailyEntry',
    'Incident',
    'MetricValue',
    'WeeklyAction',
    'ActionStatus',
    'ActionPriority',
    'User',
    'WeekLock',
    'DailyEntryPayload',
    'LoginPayload',
    'WeeklyActionPayload',
    'parse_payload',
]
