"""Score records and the ranking they are reported to."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field, field_validator

from .config import get_settings
from .models import GameMode

logger = logging.getLogger(__name__)


class ScoreRecord(BaseModel):
    """A finished game reported to the ranking."""

    player_name: str = Field(..., min_length=1, description="Name confirmed by the player")
    elapsed_seconds: float = Field(..., ge=0.0, description="Time taken to finish the game")
    grid_size: int = Field(..., ge=1, description="Rows (and columns) of the solved puzzle")
    item_count: int = Field(..., ge=1, description="Number of pieces in the puzzle")
    mode: GameMode = GameMode.PUZZLE
    date: datetime = Field(default_factory=datetime.now)

    @field_validator("player_name")
    @classmethod
    def strip_player_name(cls, value: str) -> str:
        """Reject names made only of whitespace."""
        value = value.strip()
        if not value:
            raise ValueError("player_name must not be blank")
        return value

    @property
    def display_time(self) -> str:
        """Elapsed time as MM:SS."""
        minutes, seconds = divmod(int(self.elapsed_seconds), 60)
        return f"{minutes:02d}:{seconds:02d}"


class ScoreReporter(Protocol):
    """Receives finished-game records for ranking."""

    def submit(self, record: ScoreRecord) -> None: ...


class RankingManager:
    """Keeps the best scores per game mode in memory."""

    def __init__(self, size: Optional[int] = None):
        """Initialize the ranking.

        Args:
            size: Number of scores kept per mode (RANKING_SIZE if None).
        """
        self.size = size if size is not None else get_settings().RANKING_SIZE
        self._scores: Dict[GameMode, List[ScoreRecord]] = {}

    def submit(self, record: ScoreRecord) -> None:
        """Add a score, keeping only the fastest ``size`` records of its mode."""
        scores = self._scores.setdefault(record.mode, [])
        scores.append(record)
        scores.sort(key=lambda score: score.elapsed_seconds)
        del scores[self.size :]
        logger.info(
            "Recorded %s score for %s: %.1fs (%d items)",
            record.mode.value,
            record.player_name,
            record.elapsed_seconds,
            record.item_count,
        )

    def get_top(self, mode: GameMode = GameMode.PUZZLE) -> List[ScoreRecord]:
        """Fastest scores of a mode, best first."""
        return list(self._scores.get(mode, []))

    @property
    def all_scores(self) -> List[ScoreRecord]:
        return [score for mode in GameMode for score in self._scores.get(mode, [])]
