"""Bulk "add to SRS" from a question manifest (YAML or JSON)."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from cadence.domain.models import Difficulty

from .service import SrsService

logger = logging.getLogger(__name__)


class QuestionRef(BaseModel):
    """The subset of a question record needed to track it."""

    model_config = ConfigDict(extra="ignore")

    question_id: str = Field(
        min_length=1, validation_alias=AliasChoices("id", "questionId", "question_id")
    )
    channel: str = Field(min_length=1)
    difficulty: Difficulty


@dataclass
class ImportResult:
    added: list[str] = field(default_factory=list)
    already_tracked: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)  # "#<index>: <reason>"


def load_manifest(path: Path) -> list[dict[str, Any]]:
    """
    Read question entries from .yaml/.yml/.json.

    The document may be a list of entries or a mapping with a `questions` list
    (the shape the content pipeline writes per channel).
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = json.loads(text)
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    else:
        raise ValueError("Unsupported format. Use .yaml, .yml, or .json")

    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise ValueError(
            "Manifest must be a list of questions or a mapping with a 'questions' list."
        )
    return data


def import_questions(
    service: SrsService,
    entries: list[Any],
    default_channel: str | None = None,
    now: datetime | None = None,
) -> ImportResult:
    """Add every valid entry; invalid ones are reported, not raised."""
    result = ImportResult()

    for index, raw in enumerate(entries):
        if not isinstance(raw, dict):
            result.invalid.append(f"#{index}: not a mapping")
            continue
        if default_channel and not raw.get("channel"):
            raw = {**raw, "channel": default_channel}

        try:
            ref = QuestionRef.model_validate(raw)
        except ValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            result.invalid.append(f"#{index}: {reason}")
            continue

        label = f"{ref.channel}/{ref.difficulty.value}/{ref.question_id}"
        if service.is_in_srs(ref.question_id, ref.channel, ref.difficulty):
            result.already_tracked.append(label)
            continue

        service.add_to_srs(ref.question_id, ref.channel, ref.difficulty, now=now)
        result.added.append(label)

    logger.info(
        f"[import] added={len(result.added)} already_tracked={len(result.already_tracked)} "
        f"invalid={len(result.invalid)}"
    )
    return result
