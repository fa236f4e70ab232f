from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Sequence
from uuid import uuid4

from gdsim.contracts import ForensicArtifact, ValidationIssue


class EngineIntegrityError(RuntimeError):
    def __init__(self, artifact: ForensicArtifact) -> None:
        super().__init__(artifact.message)
        self.artifact = artifact


class SchemaViolation(ValueError):
    """Raised at load time when table data is malformed or inconsistent."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.field_path}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = list(issues)

    @property
    def field_paths(self) -> list[str]:
        return [i.field_path for i in self.issues]


class TableGap(EngineIntegrityError):
    pass


class InvalidState(EngineIntegrityError):
    pass


class RandomSourceExhausted(EngineIntegrityError):
    pass


def build_forensic_artifact(
    engine_scope: str,
    error_code: str,
    message: str,
    state_snapshot: dict[str, object],
    context: dict[str, object],
    identifiers: dict[str, str],
    causal_fragment: list[str],
) -> ForensicArtifact:
    return ForensicArtifact(
        artifact_id=str(uuid4()),
        timestamp=datetime.now(UTC),
        engine_scope=engine_scope,
        error_code=error_code,
        message=message,
        state_snapshot=state_snapshot,
        context=context,
        identifiers=identifiers,
        causal_fragment=causal_fragment,
    )


def table_gap(table: str, key: str, message: str, context: dict[str, Any] | None = None) -> TableGap:
    return TableGap(
        build_forensic_artifact(
            engine_scope="tables",
            error_code="TABLE_GAP",
            message=message,
            state_snapshot={"table": table, "key": key},
            context=context or {},
            identifiers={"table": table},
            causal_fragment=["table_lookup", table],
        )
    )


def invalid_state(message: str, state_snapshot: dict[str, object], phase: str) -> InvalidState:
    return InvalidState(
        build_forensic_artifact(
            engine_scope="game_state",
            error_code="INVALID_STATE",
            message=message,
            state_snapshot=state_snapshot,
            context={"phase": phase},
            identifiers={},
            causal_fragment=["state_transition", phase],
        )
    )


def persist_forensic_artifact(artifact: ForensicArtifact, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"forensic_{artifact.artifact_id}.json"
    path.write_text(json.dumps(asdict(artifact), default=str, indent=2), encoding="utf-8")
    return path
