from .types import (
    CoachProfile,
    ConversionChoice,
    EventType,
    FieldGoalBand,
    FieldState,
    ForensicArtifact,
    FourthDownChoice,
    FreeKickChoice,
    GameEvent,
    GameState,
    KickoffDecision,
    KickoffEntry,
    KickoffResult,
    KickoffType,
    LongGainEntry,
    MatchupChart,
    MatchupEntry,
    OnsideEntry,
    Outcome,
    PenaltyEntry,
    PenaltyResult,
    PenaltySide,
    PlayDefinition,
    PlayDepth,
    PlayType,
    PuntResult,
    PuntReturnEntry,
    RandomSource,
    RiskProfile,
    Side,
    Tempo,
    TurnoverSpec,
    TurnoverType,
    ValidationIssue,
)

__all__ = [
    "CoachProfile",
    "ConversionChoice",
    "EventType",
    "FieldGoalBand",
    "FieldState",
    "ForensicArtifact",
    "FourthDownChoice",
    "FreeKickChoice",
    "GameEvent",
    "GameState",
    "KickoffDecision",
    "KickoffEntry",
    "KickoffResult",
    "KickoffType",
    "LongGainEntry",
    "MatchupChart",
    "MatchupEntry",
    "OnsideEntry",
    "Outcome",
    "PenaltyEntry",
    "PenaltyResult",
    "PenaltySide",
    "PlayDefinition",
    "PlayDepth",
    "PlayType",
    "PuntResult",
    "PuntReturnEntry",
    "RandomSource",
    "RiskProfile",
    "Side",
    "Tempo",
    "TurnoverSpec",
    "TurnoverType",
    "ValidationIssue",
]
