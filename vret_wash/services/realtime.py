"""
Realtime fanout
Broadcasts every accepted mutation to all connected viewers.

Delivery is best-effort: no sequence numbers, acknowledgements or replay.
Viewers that miss an event catch up through the bulk GET endpoints.
"""
import logging

from vret_wash.extensions import socketio

logger = logging.getLogger(__name__)

WASH_ENTRY_UPDATED = 'wash-entry-updated'
WEEKLY_ACTION_UPDATED = 'weekly-action-updated'
WEEK_LOCK_UPDATED = 'week-lock-updated'


def broadcast(event, payload):
    """Emit an event to every connected client, the originator included"""
    logger.debug(f"Broadcasting {event}")
    socketio.emit(event, payload)


def broadcast_entry(entry):
    broadcast(WASH_ENTRY_UPDATED, entry.to_dict())


def broadcast_action(action):
    broadcast(WEEKLY_ACTION_UPDATED, action.to_dict())


def broadcast_week_lock(team, week_start, locked, week_lock=None):
    payload = {'team': team, 'weekStart': week_start, 'locked': locked}
    if week_lock is not None:
        payload.update(week_lock.to_dict())
    broadcast(WEEK_LOCK_UPDATED, payload)
