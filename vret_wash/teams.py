"""
Shift team registry

The four fixed shift teams and the ten VRET metrics every daily entry tracks.
"""
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Team:
    """A shift team"""
    id: str
    label: str
    full_name: str

    @property
    def short_name(self) -> str:
        """Label without the 'Team X - ' prefix, e.g. 'Front Half Days'"""
        return self.label.split(' - ', 1)[-1]

    def to_dict(self) -> Dict[str, str]:
        data = asdict(self)
        return {'id': data['id'], 'label': data['label'], 'fullName': data['full_name']}


TEAMS: List[Team] = [
    Team('A', 'Team A - Front Half Days', 'Front Half Days (Sun-Wed 6a-6p)'),
    Team('B', 'Team B - Front Half Nights', 'Front Half Nights (Sun-Wed 6p-6a)'),
    Team('C', 'Team C - Back Half Days', 'Back Half Days (Wed-Sat 6a-6p)'),
    Team('D', 'Team D - Back Half Nights', 'Back Half Nights (Wed-Sat 6p-6a)'),
]

TEAM_IDS = tuple(team.id for team in TEAMS)

VRET_METRICS = (
    'Transfer Out',
    'Transfer Out Dock',
    'Pick - Total',
    'Pick - Support',
    'OB Total',
    'C-Return Stow Total',
    'V-Return Pick Total',
    'V-Return Pack - Total',
    'V-Return Support',
    'Vendor Returns - Total',
)


def get_team(team_id: str) -> Optional[Team]:
    return next((team for team in TEAMS if team.id == team_id), None)


def is_known_team(team_id: str) -> bool:
    return get_team(team_id) is not None


def get_team_full_name(team_id: str) -> str:
    team = get_team(team_id)
    return team.full_name if team else f"Team {team_id}"


def get_team_name(team_id: str) -> str:
    """Name used in chat notifications"""
    team = get_team(team_id)
    return team.short_name if team else f"Team {team_id}"
