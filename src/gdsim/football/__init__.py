from .coaching import CoachAI, choose_weighted
from .kicking import KickingResolver
from .models import GameResult, SnapRecord
from .penalties import PenaltyResolver
from .resolver import PlayResolver, clock_runoff
from .session import GameSession, GameStateMachine, validate_state
from .tables import (
    CoachProfiles,
    KickingTable,
    MatchupTable,
    PenaltyTable,
    Playbook,
    TableStore,
    coach_profile_from_mapping,
)
from .validation import TableValidator

__all__ = [
    "CoachAI",
    "CoachProfiles",
    "GameResult",
    "GameSession",
    "GameStateMachine",
    "KickingResolver",
    "KickingTable",
    "MatchupTable",
    "PenaltyResolver",
    "PenaltyTable",
    "PlayResolver",
    "Playbook",
    "SnapRecord",
    "TableStore",
    "TableValidator",
    "choose_weighted",
    "clock_runoff",
    "coach_profile_from_mapping",
    "validate_state",
]
