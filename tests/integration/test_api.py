"""
Integration tests for API endpoints.

Tests cover:
- Health check endpoints
- Login and team listing
- Daily entry dumps, single-entry reads, upserts and explicit lock / unlock
- Weekly action dumps and upserts
- Week lock / unlock
"""
import json

import pytest

# 2026-01-04 is a Sunday
WEEK_START = '2026-01-04'
NEXT_WEEK_START = '2026-01-11'


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.integration
    def test_ping(self, client):
        response = client.get('/health/ping')
        assert response.status_code == 200
        assert json.loads(response.data)['status'] == 'ok'

    @pytest.mark.integration
    def test_live(self, client):
        response = client.get('/health/live')
        assert response.status_code == 200
        assert json.loads(response.data)['status'] == 'alive'

    @pytest.mark.integration
    def test_ready(self, client):
        """Store directory is creatable; a missing webhook does not block readiness"""
        response = client.get('/health/ready')
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['checks'] == {'store': True, 'webhook_configured': False}

    @pytest.mark.integration
    def test_status(self, client, entry_payload):
        client.post('/api/wash-entries', json=entry_payload())

        response = client.get('/health/status')
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'operational'
        assert data['store']['entries'] == 1
        assert data['store']['snapshot_bytes'] > 0


class TestLoginAPI:

    @pytest.mark.integration
    def test_login(self, client, store):
        response = client.post('/api/login', json={'name': 'Dana', 'team': 'A'})

        assert response.status_code == 200
        assert response.get_json() == {'success': True, 'user': {'name': 'Dana', 'team': 'A'}}
        assert store.find_user('Dana', 'A') is not None

    @pytest.mark.integration
    def test_login_twice_same_user(self, client, store):
        client.post('/api/login', json={'name': 'Dana', 'team': 'A'})
        response = client.post('/api/login', json={'name': 'Dana', 'team': 'A'})

        assert response.status_code == 200
        assert len(store.users) == 1

    @pytest.mark.integration
    @pytest.mark.parametrize('body', [
        {'name': 'Dana'},
        {'team': 'A'},
        {'name': '', 'team': 'A'},
        {'name': 'Dana', 'team': 'Z'},
    ])
    def test_login_validation(self, client, body):
        response = client.post('/api/login', json=body)

        assert response.status_code == 400
        assert response.get_json()['error'] == 'ValidationError'

    @pytest.mark.integration
    def test_login_requires_json(self, client):
        response = client.post('/api/login', data='name=Dana', content_type='text/plain')
        assert response.status_code == 400

    @pytest.mark.integration
    def test_teams(self, client):
        data = client.get('/api/teams').get_json()
        assert [team['id'] for team in data] == ['A', 'B', 'C', 'D']
        assert data[0]['label'] == 'Team A - Front Half Days'
        assert data[2]['fullName'] == 'Back Half Days (Wed-Sat 6a-6p)'


class TestWashEntriesAPI:

    @pytest.mark.integration
    def test_empty_dump(self, client):
        response = client.get('/api/wash-entries')
        assert response.status_code == 200
        assert response.get_json() == []

    @pytest.mark.integration
    def test_create_then_update(self, client, entry_payload):
        created = client.post('/api/wash-entries', json=entry_payload())
        updated = client.post('/api/wash-entries', json=entry_payload(author='Lee'))

        assert created.status_code == 201
        assert updated.status_code == 200
        assert updated.get_json()['id'] == created.get_json()['id']

        entries = client.get('/api/wash-entries').get_json()
        assert len(entries) == 1
        assert entries[0]['author'] == 'Lee'
        assert entries[0]['vretMetrics']['Transfer Out'] == {'achieved': '100', 'goal': '80'}

    @pytest.mark.integration
    def test_persisted_to_snapshot(self, client, entry_payload, data_file):
        client.post('/api/wash-entries', json=entry_payload())

        with open(data_file, encoding='utf-8') as f:
            document = json.load(f)
        assert document['washEntries'][0]['date'] == '2026-01-05'
        assert document['nextId']['wash'] == 2

    @pytest.mark.integration
    def test_locked_save_notifies(self, client, entry_payload, sent_messages):
        client.post('/api/wash-entries', json=entry_payload(locked=True))
        client.post('/api/wash-entries', json=entry_payload(locked=True))

        assert sent_messages.call_count == 1

    @pytest.mark.integration
    def test_invalid_entry(self, client, entry_payload):
        response = client.post('/api/wash-entries', json=entry_payload(date='yesterday'))

        assert response.status_code == 400
        assert client.get('/api/wash-entries').get_json() == []

    @pytest.mark.integration
    @pytest.mark.parametrize('locked', ['false', 'true', 0, 1])
    def test_locked_must_be_boolean(self, client, store, entry_payload, sent_messages, locked):
        response = client.post('/api/wash-entries', json=entry_payload(locked=locked))

        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == 'ValidationError'
        assert any(problem.startswith('locked:') for problem in data['fields'])
        assert store.get_entry('2026-01-05', 'A') is None
        assert sent_messages.call_count == 0

    @pytest.mark.integration
    def test_null_and_numeric_fields_accepted(self, client, entry_payload):
        response = client.post('/api/wash-entries', json=entry_payload(
            metrics={'Transfer Out': (120, 100)}, handoffNotes=None, wriIncidents=None,
        ))

        assert response.status_code == 201
        data = response.get_json()
        assert data['vretMetrics']['Transfer Out'] == {'achieved': '120', 'goal': '100'}
        assert data['handoffNotes'] == ''
        assert data['wriIncidents'] == []

    @pytest.mark.integration
    def test_get_stored_entry(self, client, entry_payload):
        created = client.post('/api/wash-entries', json=entry_payload(author='Lee')).get_json()

        response = client.get('/api/wash-entries/2026-01-05/A')

        assert response.status_code == 200
        assert response.get_json() == created

    @pytest.mark.integration
    def test_get_missing_entry_is_blank(self, client, store):
        response = client.get('/api/wash-entries/2026-01-06/B?author=Lee')

        assert response.status_code == 200
        data = response.get_json()
        assert 'id' not in data
        assert data['author'] == 'Lee'
        assert data['locked'] is False
        assert len(data['vretMetrics']) == 10
        assert data['vretMetrics']['OB Total'] == {'achieved': '', 'goal': ''}
        assert store.get_entry('2026-01-06', 'B') is None

    @pytest.mark.integration
    @pytest.mark.parametrize('path', [
        '/api/wash-entries/2026-01-06/Z',
        '/api/wash-entries/06-01-2026/A',
    ])
    def test_get_entry_validation(self, client, path):
        response = client.get(path)

        assert response.status_code == 400
        assert response.get_json()['error'] == 'ValidationError'


class TestEntryLockAPI:

    @pytest.mark.integration
    def test_lock_requires_confirmation(self, client, entry_payload, sent_messages):
        client.post('/api/wash-entries', json=entry_payload())

        response = client.post('/api/wash-entries/2026-01-05/A/lock', json={})

        assert response.status_code == 400
        assert sent_messages.call_count == 0

    @pytest.mark.integration
    def test_lock_and_unlock(self, client, store, entry_payload, sent_messages):
        client.post('/api/wash-entries', json=entry_payload())

        locked = client.post('/api/wash-entries/2026-01-05/A/lock', json={'confirm': True, 'lockedBy': 'Dana'})
        assert locked.status_code == 200
        assert locked.get_json()['entry']['locked'] is True
        assert sent_messages.call_count == 1

        again = client.post('/api/wash-entries/2026-01-05/A/lock', json={'confirm': True})
        assert again.status_code == 409

        unlocked = client.delete('/api/wash-entries/2026-01-05/A/lock', json={'confirm': True})
        assert unlocked.status_code == 200
        assert store.get_entry('2026-01-05', 'A').locked is False

    @pytest.mark.integration
    def test_lock_missing_entry(self, client):
        response = client.post('/api/wash-entries/2026-01-05/A/lock', json={'confirm': True})

        assert response.status_code == 404
        assert response.get_json()['error'] == 'NotFound'


class TestWeeklyActionsAPI:

    @pytest.mark.integration
    def test_create_and_update(self, client, action_payload):
        created = client.post('/api/weekly-actions', json=action_payload())
        assert created.status_code == 201
        action = created.get_json()
        assert action['id'] == 1
        assert action['createdAt']
        assert action['weeksPushed'] == 0

        action['status'] = 'Closed'
        updated = client.post('/api/weekly-actions', json=action)
        assert updated.status_code == 200
        assert client.get('/api/weekly-actions').get_json()[0]['status'] == 'Closed'

    @pytest.mark.integration
    def test_unknown_id_not_stored(self, client, action_payload):
        response = client.post('/api/weekly-actions', json=action_payload(id=77))

        assert response.status_code == 200
        assert response.get_json() == {'success': False, 'action': None}
        assert client.get('/api/weekly-actions').get_json() == []

    @pytest.mark.integration
    def test_invalid_status(self, client, action_payload):
        response = client.post('/api/weekly-actions', json=action_payload(status='Done'))
        assert response.status_code == 400


class TestWeekLockAPI:

    @pytest.mark.integration
    def test_lock_week_carries_actions(self, client, action_payload, sent_messages):
        client.post('/api/weekly-actions', json=action_payload(status='Open'))
        client.post('/api/weekly-actions', json=action_payload(status='Closed'))

        response = client.post('/api/lock-week', json={
            'team': 'A', 'weekStart': WEEK_START, 'weekEnd': '2026-01-10', 'lockedBy': 'Dana',
            'entries': [], 'actions': [],
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['carried'] == 1
        assert data['carriedActions'][0]['weekStart'] == NEXT_WEEK_START
        assert data['carriedActions'][0]['weeksPushed'] == 1
        assert sent_messages.call_count == 1

        actions = client.get('/api/weekly-actions').get_json()
        assert len(actions) == 3
        assert client.get('/api/week-locks').get_json()[0]['lockedBy'] == 'Dana'

    @pytest.mark.integration
    def test_relock_conflict(self, client, sent_messages):
        body = {'team': 'A', 'weekStart': WEEK_START, 'lockedBy': 'Dana'}
        client.post('/api/lock-week', json=body)

        response = client.post('/api/lock-week', json=body)

        assert response.status_code == 409
        assert sent_messages.call_count == 1

    @pytest.mark.integration
    def test_notification_failure_returns_500(self, client, store, action_payload, failing_notifier):
        client.post('/api/weekly-actions', json=action_payload())

        response = client.post('/api/lock-week', json={'team': 'A', 'weekStart': WEEK_START})

        assert response.status_code == 500
        data = response.get_json()
        assert data['success'] is False
        assert data['error'] == 'Failed to send Slack notification'
        assert data['status_code'] == 500
        assert data['carried'] == 1
        assert store.get_week_lock('A', WEEK_START) is not None

    @pytest.mark.integration
    @pytest.mark.parametrize('body', [
        {'weekStart': WEEK_START},
        {'team': 'A'},
        {'team': 'A', 'weekStart': '2026-01-06'},
    ])
    def test_lock_week_validation(self, client, body):
        assert client.post('/api/lock-week', json=body).status_code == 400

    @pytest.mark.integration
    @pytest.mark.parametrize('week_end', ['01/10/2026', '2026-13-01', '2026-01-03'])
    def test_bad_week_end_rejected_before_lock(self, client, store, action_payload, sent_messages, week_end):
        client.post('/api/weekly-actions', json=action_payload())

        response = client.post('/api/lock-week', json={
            'team': 'A', 'weekStart': WEEK_START, 'weekEnd': week_end, 'lockedBy': 'Dana',
        })

        assert response.status_code == 400
        assert store.get_week_lock('A', WEEK_START) is None
        assert len(client.get('/api/weekly-actions').get_json()) == 1
        assert sent_messages.call_count == 0

        retry = client.post('/api/lock-week', json={'team': 'A', 'weekStart': WEEK_START, 'weekEnd': '2026-01-10'})
        assert retry.status_code == 200

    @pytest.mark.integration
    def test_non_finite_metric_locks_cleanly(self, client, entry_payload, sent_messages):
        client.post('/api/wash-entries', json=entry_payload(metrics={'Transfer Out': ('nan', '80')}))
        client.post('/api/wash-entries', json=entry_payload(
            date='2026-01-06', metrics={'Transfer Out': ('Infinity', '80')},
        ))

        response = client.post('/api/lock-week', json={'team': 'A', 'weekStart': WEEK_START})

        assert response.status_code == 200
        assert response.get_json()['notified'] is True
        assert sent_messages.call_count == 1

    @pytest.mark.integration
    def test_lock_week_without_webhook(self, client, store):
        response = client.post('/api/lock-week', json={'team': 'A', 'weekStart': WEEK_START})

        assert response.status_code == 200
        data = response.get_json()
        assert data['notified'] is False
        assert data['message'] == 'Week locked. Slack is not configured, so no summary was sent.'
        assert store.get_week_lock('A', WEEK_START) is not None

    @pytest.mark.integration
    def test_unlock_week(self, client, sent_messages):
        client.post('/api/lock-week', json={'team': 'A', 'weekStart': WEEK_START})

        response = client.delete(f'/api/lock-week/A/{WEEK_START}')

        assert response.status_code == 200
        assert response.get_json()['weekLock']['weekStart'] == WEEK_START
        assert client.get('/api/week-locks').get_json() == []
        assert client.delete(f'/api/lock-week/A/{WEEK_START}').status_code == 404
