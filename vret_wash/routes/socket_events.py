"""
Socket.IO event handlers
Client → server upserts. Results go to every viewer through the realtime
fanout; a rejected payload is answered to the sender only.
"""
import logging

from flask import request
from flask_socketio import emit

from vret_wash.error_handlers.exceptions import AppException
from vret_wash.extensions import socketio
from vret_wash.services.entry_service import get_entry_service

logger = logging.getLogger(__name__)


def _reject(event, error):
    logger.warning(f"Rejected {event} from {request.sid}: {error.message}")
    emit('error', {'event': event, **error.to_dict()})


@socketio.on('connect')
def handle_connect():
    logger.info(f"User connected: {request.sid}")


@socketio.on('disconnect')
def handle_disconnect(*args):
    logger.info(f"User disconnected: {request.sid}")


@socketio.on('save-wash-entry')
def handle_save_wash_entry(entry):
    try:
        get_entry_service().upsert_daily_entry(entry)
    except AppException as e:
        _reject('save-wash-entry', e)


@socketio.on('save-weekly-action')
def handle_save_weekly_action(action):
    try:
        get_entry_service().upsert_weekly_action(action)
    except AppException as e:
        _reject('save-weekly-action', e)
