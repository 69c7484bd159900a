"""
JSON File Store: Infrastructure adapter persisting cards to one JSON document.

Implements CardStore and StreakStore. The file is re-read on every call so a
put is always visible to the next get/list, including from another process.
Writes go through a temporary file and os.replace.
"""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cadence.domain.constants import STORE_FORMAT_VERSION
from cadence.domain.errors import StoreCorruptedError
from cadence.domain.models import CardKey, Difficulty, ReviewCard, ReviewStreak
from cadence.domain.ports import CardStore, StreakStore

logger = logging.getLogger(__name__)


def _blank_to_none(v: Any) -> Any:
    return None if v == "" else v


class CardRecord(BaseModel):
    """On-disk shape of a card (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    question_id: str = Field(alias="questionId", min_length=1)
    channel: str = Field(min_length=1)
    difficulty: Difficulty
    interval_days: int = Field(alias="interval", ge=0)
    ease_factor: float = Field(alias="easeFactor", gt=0)
    repetitions: int = Field(ge=0)
    due_date: datetime = Field(alias="nextReview")
    last_reviewed_at: datetime | None = Field(default=None, alias="lastReview")
    total_reviews: int = Field(default=0, alias="totalReviews", ge=0)
    # Written for readers of the file; re-derived on load
    mastery_level: int = Field(default=0, alias="masteryLevel")

    @field_validator("last_reviewed_at", mode="before")
    @classmethod
    def blank_last_review(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def key(self) -> CardKey:
        return CardKey(self.question_id, self.channel, self.difficulty)

    @classmethod
    def from_card(cls, card: ReviewCard) -> CardRecord:
        return cls(
            question_id=card.question_id,
            channel=card.channel,
            difficulty=card.difficulty,
            interval_days=card.interval_days,
            ease_factor=card.ease_factor,
            repetitions=card.repetitions,
            due_date=card.due_date,
            last_reviewed_at=card.last_reviewed_at,
            total_reviews=card.total_reviews,
            mastery_level=card.mastery_level,
        )

    def to_card(self) -> ReviewCard:
        return ReviewCard(
            question_id=self.question_id,
            channel=self.channel,
            difficulty=self.difficulty,
            ease_factor=self.ease_factor,
            interval_days=self.interval_days,
            repetitions=self.repetitions,
            due_date=self.due_date,
            last_reviewed_at=self.last_reviewed_at,
            total_reviews=self.total_reviews,
        )


class StreakRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    streak_days: int = Field(default=0, alias="reviewStreak", ge=0)
    last_review_date: date | None = Field(default=None, alias="lastReviewDate")

    @field_validator("last_review_date", mode="before")
    @classmethod
    def blank_last_date(cls, v: Any) -> Any:
        return _blank_to_none(v)


class StoreDocument(BaseModel):
    version: int = STORE_FORMAT_VERSION
    cards: list[CardRecord] = Field(default_factory=list)
    streak: StreakRecord = Field(default_factory=StreakRecord)


class JsonFileCardStore(CardStore, StreakStore):
    """
    Stores every card of one user in a single JSON file.

    Missing file means an empty store. Content that is not valid JSON or does
    not match the schema raises StoreCorruptedError; OSError propagates as is.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    # -- CardStore --

    def get(self, key: CardKey) -> ReviewCard | None:
        return self._load_cards().get(key)

    def put(self, card: ReviewCard) -> None:
        doc = self._read()
        records = [r for r in doc.cards if r.key != card.key]
        records.append(CardRecord.from_card(card))
        doc.cards = records
        self._write(doc)

    def list(self) -> list[ReviewCard]:
        return [*self._load_cards().values()]

    # -- StreakStore --

    def load_streak(self) -> ReviewStreak:
        record = self._read().streak
        return ReviewStreak(
            streak_days=record.streak_days, last_review_date=record.last_review_date
        )

    def save_streak(self, streak: ReviewStreak) -> None:
        doc = self._read()
        doc.streak = StreakRecord(
            streak_days=streak.streak_days, last_review_date=streak.last_review_date
        )
        self._write(doc)

    # -- internals --

    def _load_cards(self) -> dict[CardKey, ReviewCard]:
        cards: dict[CardKey, ReviewCard] = {}
        for record in self._read().cards:
            card = record.to_card()
            cards[card.key] = card  # later duplicates win
        return cards

    def _read(self) -> StoreDocument:
        if not self.path.exists():
            return StoreDocument()

        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StoreCorruptedError(f"Cannot read card store {self.path}: {e}") from e
        if not text.strip():
            return StoreDocument()

        try:
            doc = StoreDocument.model_validate_json(text)
        except ValidationError as e:
            raise StoreCorruptedError(f"Cannot read card store {self.path}: {e}") from e

        if doc.version > STORE_FORMAT_VERSION:
            raise StoreCorruptedError(
                f"Card store {self.path} has format version {doc.version}, "
                f"this build reads up to {STORE_FORMAT_VERSION}"
            )
        return doc

    def _write(self, doc: StoreDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        doc.version = STORE_FORMAT_VERSION
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(doc.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug(f"[store] Wrote {len(doc.cards)} card(s) to {self.path}")
