"""
Notification Formatter
Pure functions turning a daily entry or a week snapshot into a Slack
block-kit message. Nothing here performs I/O.

Free text is length-capped before it leaves the service:
    incident summaries   300
    hand-off / station / leadership callouts   400
    metric bridges and action items   200
    anything else   500
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vret_wash.models import DailyEntry, WeeklyAction
from vret_wash.teams import VRET_METRICS, get_team_full_name, get_team_name
from vret_wash.utils.dates import format_long_date, format_week_range

TRUNCATION_MARKER = '... (truncated)'

DEFAULT_TEXT_LIMIT = 500
INCIDENT_SUMMARY_LIMIT = 300
CALLOUT_LIMIT = 400
BRIDGE_LIMIT = 200
ACTION_TEXT_LIMIT = 200

MAX_INCIDENTS_SHOWN = 5
MAX_ACTIONS_SHOWN = 3

CALLOUT_FIELDS = (
    ('handoff_notes', 'Hand Off Notes'),
    ('station_readiness', 'Station Readiness'),
    ('leadership_callouts', 'Leadership Callouts'),
)


@dataclass
class WeekSnapshot:
    """Everything the weekly summary needs about one team's week"""
    team: str
    week_start: str
    week_end: Optional[str] = None
    entries: List[DailyEntry] = field(default_factory=list)
    actions: List[WeeklyAction] = field(default_factory=list)
    locked_by: str = ''
    carried_count: int = 0


def truncate_text(text: Optional[str], max_length: int = DEFAULT_TEXT_LIMIT) -> Optional[str]:
    """Cap text at max_length characters, marking the cut"""
    if not text:
        return text
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER


def parse_number(value: Any) -> Optional[float]:
    """Parse a free-form metric value; blank, non-numeric or non-finite gives None"""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(',', '')
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def calculate_percentage(achieved: Any, goal: Any) -> Optional[float]:
    """
    achieved / goal * 100 rounded to one decimal.

    Returns None when either side is missing, non-numeric or zero, which
    callers render as "N/A".
    """
    achieved_value = parse_number(achieved)
    goal_value = parse_number(goal)
    if not achieved_value or not goal_value:
        return None
    return round(achieved_value / goal_value * 100, 1)


def status_icon(percentage: Optional[float]) -> str:
    return '✅' if percentage is not None and percentage >= 100 else '⚠️'


def format_percentage(percentage: Optional[float]) -> str:
    return f"{percentage:.1f}%" if percentage is not None else 'N/A'


def _format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:.1f}"


def _section(text: str) -> Dict[str, Any]:
    return {'type': 'section', 'text': {'type': 'mrkdwn', 'text': text}}


def _header(text: str) -> Dict[str, Any]:
    return {'type': 'header', 'text': {'type': 'plain_text', 'text': text, 'emoji': True}}


DIVIDER = {'type': 'divider'}


# ---------------------------------------------------------------------------
# Daily entry
# ---------------------------------------------------------------------------

def format_metric_line(metric: str, achieved: str, goal: str, bridge: Optional[str] = None) -> str:
    if not (achieved or '').strip() and not (goal or '').strip():
        line = f"⚠️ *{metric}*: No data"
    else:
        percentage = calculate_percentage(achieved, goal)
        line = (
            f"{status_icon(percentage)} *{metric}*: "
            f"{achieved or 'N/A'}/{goal or 'N/A'} ({format_percentage(percentage)})"
        )
    if bridge:
        line += f"\n   _Bridge: {truncate_text(bridge, BRIDGE_LIMIT)}_"
    return line


def _ordered_metrics(entry: DailyEntry) -> List[str]:
    known = [metric for metric in VRET_METRICS if metric in entry.vret_metrics]
    extra = [metric for metric in entry.vret_metrics if metric not in VRET_METRICS]
    return known + extra


def format_safety_section(entry: DailyEntry) -> str:
    incidents = entry.wri_incidents
    if not incidents:
        return '*✅ Safety*: No incidents reported'

    section = f"*🚨 Safety - {len(incidents)} WRI Incident(s) Reported*"
    for number, incident in enumerate(incidents[:MAX_INCIDENTS_SHOWN], start=1):
        section += f"\n\n*Incident #{number}*\n{truncate_text(incident.summary, INCIDENT_SUMMARY_LIMIT)}"
        if incident.austin_link:
            section += f"\n<{incident.austin_link}|View in Austin>"
    if len(incidents) > MAX_INCIDENTS_SHOWN:
        section += f"\n\n_...and {len(incidents) - MAX_INCIDENTS_SHOWN} more incident(s)_"
    return section


def format_callouts_section(entry: DailyEntry) -> str:
    """Shift callouts, or '' when every callout field is blank"""
    parts = []
    for attr, title in CALLOUT_FIELDS:
        value = getattr(entry, attr)
        if value and value.strip():
            parts.append(f"*{title}:*\n{truncate_text(value, CALLOUT_LIMIT)}")
    if not parts:
        return ''
    return '*📢 Shift Callouts*\n\n' + '\n\n'.join(parts)


def format_daily_entry_message(entry: DailyEntry) -> Dict[str, Any]:
    """Slack message announcing a locked daily entry"""
    team_name = get_team_name(entry.team)

    metric_lines = [
        format_metric_line(
            metric,
            entry.vret_metrics[metric].achieved,
            entry.vret_metrics[metric].goal,
            entry.vret_bridges.get(metric),
        )
        for metric in _ordered_metrics(entry)
    ]
    metrics_text = '\n'.join(metric_lines) if metric_lines else 'No data'

    blocks = [
        _header(f"🔒 WASH Entry Locked - {team_name}"),
        _section(
            f"*Date:* {format_long_date(entry.date)}\n"
            f"*Submitted by:* {truncate_text(entry.author) or 'Unknown'}"
        ),
        _section(format_safety_section(entry)),
        DIVIDER,
        _section(f"*📊 VRETs*\n{metrics_text}"),
    ]

    callouts = format_callouts_section(entry)
    if callouts:
        blocks.append(DIVIDER)
        blocks.append(_section(callouts))

    return {
        'text': f"WASH Entry Completed - {team_name}",
        'blocks': blocks,
    }


# ---------------------------------------------------------------------------
# Weekly summary
# ---------------------------------------------------------------------------

def weekly_metric_totals(entries: List[DailyEntry]) -> Dict[str, Dict[str, float]]:
    """
    Per-metric sums over the days that have both values for that metric.

    Returns:
        {metric: {'achieved': sum, 'goal': sum, 'days': count}}
    """
    totals: Dict[str, Dict[str, float]] = {}
    for entry in entries:
        for metric, value in entry.vret_metrics.items():
            achieved = parse_number(value.achieved)
            goal = parse_number(value.goal)
            if achieved is None or goal is None:
                continue
            bucket = totals.setdefault(metric, {'achieved': 0.0, 'goal': 0.0, 'days': 0})
            bucket['achieved'] += achieved
            bucket['goal'] += goal
            bucket['days'] += 1
    return totals


def weekly_metric_percentage(totals: Dict[str, float]) -> Optional[float]:
    """Sum of achieved over sum of goal, so larger-goal days weigh more"""
    return calculate_percentage(totals['achieved'], totals['goal'])


def format_weekly_metric_line(metric: str, totals: Optional[Dict[str, float]]) -> str:
    if not totals:
        return f"⚠️ *{metric}*: No data"
    percentage = weekly_metric_percentage(totals)
    days = int(totals['days'])
    avg_achieved = _format_number(totals['achieved'] / days)
    avg_goal = _format_number(totals['goal'] / days)
    return (
        f"{status_icon(percentage)} *{metric}*: avg {avg_achieved}/{avg_goal} "
        f"({format_percentage(percentage)}) over {days} day(s)"
    )


def format_action_line(action: WeeklyAction) -> str:
    line = f"• {truncate_text(action.action, ACTION_TEXT_LIMIT)} - {action.owner or 'Unassigned'} ({action.status})"
    if action.due_date:
        line += f", due {action.due_date}"
    if action.weeks_pushed:
        line += f"\n   _Pushed {action.weeks_pushed} week(s)_"
    return line


def format_actions_section(actions: List[WeeklyAction]) -> str:
    if not actions:
        return '*📋 Weekly Actions*\nNo action items this week'

    open_count = sum(1 for action in actions if not action.is_closed)
    lines = [format_action_line(action) for action in actions[:MAX_ACTIONS_SHOWN]]
    section = f"*📋 Weekly Actions* ({len(actions)} total, {open_count} not closed)\n" + '\n'.join(lines)
    if len(actions) > MAX_ACTIONS_SHOWN:
        section += f"\n_...and {len(actions) - MAX_ACTIONS_SHOWN} more action(s)_"
    return section


def format_weekly_summary_message(snapshot: WeekSnapshot) -> Dict[str, Any]:
    """Slack message summarising a locked week"""
    team_name = get_team_name(snapshot.team)
    entries = snapshot.entries

    incident_total = sum(len(entry.wri_incidents) for entry in entries)
    days_locked = sum(1 for entry in entries if entry.locked)

    if incident_total:
        safety = f"*🚨 Safety*: {incident_total} WRI incident(s) reported this week"
    else:
        safety = '*✅ Safety*: No incidents reported this week'

    totals = weekly_metric_totals(entries)
    metric_names = list(VRET_METRICS) + [m for m in totals if m not in VRET_METRICS]
    metrics_text = '\n'.join(format_weekly_metric_line(m, totals.get(m)) for m in metric_names)

    blocks = [
        _header(f"📅 Week Locked - {team_name}"),
        _section(
            f"*Week:* {format_week_range(snapshot.week_start, snapshot.week_end)}\n"
            f"*Shift:* {get_team_full_name(snapshot.team)}\n"
            f"*Locked by:* {truncate_text(snapshot.locked_by) or 'Unknown'}"
        ),
        _section(
            f"{safety}\n*🔒 Days locked:* {days_locked} of {len(entries)} submitted day(s)"
        ),
        DIVIDER,
        _section(f"*📊 VRET Weekly Averages*\n{metrics_text}"),
        DIVIDER,
        _section(format_actions_section(snapshot.actions)),
    ]

    if snapshot.carried_count:
        blocks.append({
            'type': 'context',
            'elements': [{
                'type': 'mrkdwn',
                'text': f"↪️ {snapshot.carried_count} incomplete action(s) carried to next week",
            }],
        })

    return {
        'text': f"Weekly WASH Summary - {team_name}",
        'blocks': blocks,
    }
