"""
REST API Blueprint
Login, bulk dumps, upserts and the lock endpoints.
"""
from flask import Blueprint, jsonify, request, current_app

from vret_wash.error_handlers import (
    handle_errors,
    NotificationDeliveryException,
    ValidationException,
)
from vret_wash.services.entry_service import get_entry_service
from vret_wash.services.lock_workflow import get_week_lock_workflow
from vret_wash.services.record_store import get_record_store
from vret_wash.teams import TEAMS
from vret_wash.utils.validators import require_confirmation, validate_required_fields

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationException('Request body must be JSON')
    return data


@api_bp.route('/login', methods=['POST'])
@handle_errors
def login():
    """
    Log in with a name + team pair

    Request body:
        name: Display name
        team: Team id (A-D)
    """
    data = _json_body()
    user, _ = get_entry_service().login(data.get('name'), data.get('team'))
    return jsonify({'success': True, 'user': user.to_dict()})


@api_bp.route('/teams', methods=['GET'])
def list_teams():
    return jsonify([team.to_dict() for team in TEAMS])


@api_bp.route('/wash-entries', methods=['GET'])
def list_wash_entries():
    """Every daily entry, unfiltered"""
    return jsonify([entry.to_dict() for entry in get_record_store().list_entries()])


@api_bp.route('/wash-entries', methods=['POST'])
@handle_errors
def save_wash_entry():
    """Upsert a daily entry by (date, team); mirrors the save-wash-entry event"""
    result = get_entry_service().upsert_daily_entry(_json_body())
    return jsonify(result.entry.to_dict()), 201 if result.created else 200


@api_bp.route('/wash-entries/<date_str>/<team>', methods=['GET'])
@handle_errors
def get_wash_entry(date_str, team):
    """
    One team's entry for a day, or a blank entry with every metric listed

    Query parameters:
        author: Author stamped on a blank entry
    """
    entry = get_entry_service().entry_for(date_str, team, author=request.args.get('author', ''))
    return jsonify(entry.to_dict())


@api_bp.route('/wash-entries/<date_str>/<team>/lock', methods=['POST'])
@handle_errors
def lock_wash_entry(date_str, team):
    """
    Lock a daily entry and send its summary

    Request body:
        confirm: must be true
    """
    data = _json_body()
    require_confirmation(data)
    result = get_entry_service().set_entry_lock(date_str, team, True)
    current_app.logger.info(f"Entry {team} {date_str} locked by {data.get('lockedBy', 'unknown')}")
    return jsonify({'success': True, 'entry': result.entry.to_dict()})


@api_bp.route('/wash-entries/<date_str>/<team>/lock', methods=['DELETE'])
@handle_errors
def unlock_wash_entry(date_str, team):
    """
    Unlock a daily entry. The Slack summary is not recalled.

    Request body:
        confirm: must be true
    """
    require_confirmation(_json_body())
    result = get_entry_service().set_entry_lock(date_str, team, False)
    return jsonify({'success': True, 'entry': result.entry.to_dict()})


@api_bp.route('/weekly-actions', methods=['GET'])
def list_weekly_actions():
    """Every weekly action, unfiltered"""
    return jsonify([action.to_dict() for action in get_record_store().list_actions()])


@api_bp.route('/weekly-actions', methods=['POST'])
@handle_errors
def save_weekly_action():
    """Upsert a weekly action; mirrors the save-weekly-action event"""
    data = _json_body()
    action = get_entry_service().upsert_weekly_action(data)
    if action is None:
        # Unknown id: nothing stored, nothing reported as an error
        return jsonify({'success': False, 'action': None}), 200
    return jsonify(action.to_dict()), 200 if data.get('id') else 201


@api_bp.route('/week-locks', methods=['GET'])
def list_week_locks():
    return jsonify([week_lock.to_dict() for week_lock in get_record_store().list_week_locks()])


@api_bp.route('/lock-week', methods=['POST'])
@handle_errors
def lock_week():
    """
    Lock a team's week, carry incomplete actions forward and send the summary

    Request body:
        team: Team id
        weekStart: Sunday of the week (YYYY-MM-DD)
        weekEnd: Optional Saturday of the week
        lockedBy: Name of the person locking
        entries, actions: Accepted from older clients; the stored records are used

    Returns:
        200 with the rollover result, or 500 when the Slack summary failed
    """
    data = _json_body()
    validate_required_fields(data, ['team', 'weekStart'])

    result = get_week_lock_workflow().lock_week(
        data['team'],
        data['weekStart'],
        locked_by=data.get('lockedBy', ''),
        week_end=data.get('weekEnd'),
    )

    body = result.to_dict()
    if result.notification_failed:
        error = NotificationDeliveryException('Failed to send Slack notification')
        current_app.logger.error(
            f"Failed to send weekly summary for team {result.team} week {result.week_start}: "
            f"{result.notification_error}"
        )
        # Lock and carries are committed; report them alongside the failure
        body.update(error=error.message, status_code=error.status_code)
        return jsonify(body), error.status_code
    return jsonify(body)


@api_bp.route('/lock-week/<team>/<week_start>', methods=['DELETE'])
@handle_errors
def unlock_week(team, week_start):
    """Unlock a team's week. The summary is not recalled."""
    week_lock = get_week_lock_workflow().unlock_week(team, week_start)
    return jsonify({
        'success': True,
        'message': f"Week of {week_start} unlocked for team {team}",
        'weekLock': week_lock.to_dict(),
    })
