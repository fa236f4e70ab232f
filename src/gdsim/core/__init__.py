from .errors import (
    EngineIntegrityError,
    InvalidState,
    RandomSourceExhausted,
    SchemaViolation,
    TableGap,
    build_forensic_artifact,
    persist_forensic_artifact,
)
from .events import EventBus
from .randomness import PythonRandomSource, SequenceRandomSource, face_to_draw, gameplay_random, roll_2d6, roll_die, seeded_random
from .settings import EngineSettings, default_settings, settings_from_mapping

__all__ = [
    "EngineIntegrityError",
    "EngineSettings",
    "EventBus",
    "InvalidState",
    "PythonRandomSource",
    "RandomSourceExhausted",
    "SchemaViolation",
    "SequenceRandomSource",
    "TableGap",
    "build_forensic_artifact",
    "default_settings",
    "face_to_draw",
    "gameplay_random",
    "persist_forensic_artifact",
    "roll_2d6",
    "roll_die",
    "seeded_random",
    "settings_from_mapping",
]
