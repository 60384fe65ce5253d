"""
Pytest configuration and fixtures for VRET WASH board tests.

This module provides shared fixtures for:
- Flask application with test configuration on a temporary snapshot file
- HTTP and Socket.IO test clients
- Payload factories for entries and actions
- A patched Slack notifier that records outgoing messages
"""
import pytest
from unittest.mock import patch

from vret_wash import create_app
from vret_wash.extensions import socketio
from vret_wash.services.webhook_service import DispatchResult


# 2026-01-04 is a Sunday
WEEK_START = '2026-01-04'
NEXT_WEEK_START = '2026-01-11'


@pytest.fixture
def data_file(tmp_path):
    """Path of the snapshot file used by the app under test"""
    return tmp_path / 'database' / 'vret-wash.json'


@pytest.fixture
def app(data_file):
    """
    Create application for the tests.

    Uses TestingConfig (synchronous notifications, no rate limiting, no
    webhook) with a fresh snapshot per test.
    """
    app = create_app('testing', DATA_FILE=str(data_file))
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """HTTP test client"""
    with app.test_client() as client:
        yield client


@pytest.fixture
def socket_client(app):
    """Socket.IO test client connected to the app"""
    sio_client = socketio.test_client(app)
    yield sio_client
    if sio_client.is_connected():
        sio_client.disconnect()


@pytest.fixture
def store(app):
    return app.extensions['record_store']


@pytest.fixture
def notifier(app):
    return app.extensions['webhook_notifier']


@pytest.fixture
def sent_messages(notifier):
    """
    Record every message handed to the Slack notifier instead of posting it.

    Usage:
        def test_x(sent_messages):
            ...
            assert sent_messages.call_count == 1
    """
    with patch.object(notifier, 'send', return_value=DispatchResult(delivered=True)) as send:
        yield send


@pytest.fixture
def failing_notifier(notifier):
    """Notifier whose deliveries fail"""
    result = DispatchResult(delivered=False, error='500 Server Error', error_id='test')
    with patch.object(notifier, 'send', return_value=result) as send:
        yield send


# =============================================================================
# Payload Factories
# =============================================================================

@pytest.fixture
def entry_payload():
    """
    Factory for daily entry payloads as the client sends them.

    Usage:
        payload = entry_payload(date='2026-01-05', locked=True)
        payload = entry_payload(metrics={'Transfer Out': ('100', '80')})
    """
    def _create(date='2026-01-05', team='A', author='Dana', metrics=None, **kwargs):
        metrics = metrics or {'Transfer Out': ('100', '80')}
        payload = {
            'date': date,
            'team': team,
            'author': author,
            'vretMetrics': {
                name: {'achieved': achieved, 'goal': goal}
                for name, (achieved, goal) in metrics.items()
            },
            'vretBridges': {},
            'wriIncidents': [],
            'handoffNotes': '',
            'stationReadiness': '',
            'leadershipCallouts': '',
            'locked': False,
        }
        payload.update(kwargs)
        return payload

    return _create


@pytest.fixture
def action_payload():
    """
    Factory for weekly action payloads.

    Usage:
        payload = action_payload(status='Closed')
    """
    counter = [0]

    def _create(**kwargs):
        counter[0] += 1
        payload = {
            'action': f'Follow up on dock staging {counter[0]}',
            'owner': 'Dana',
            'dueDate': '2026-01-08',
            'status': 'Open',
            'priority': 'Medium',
            'weekStart': WEEK_START,
            'team': 'A',
            'createdBy': 'Dana',
        }
        payload.update(kwargs)
        return payload

    return _create
