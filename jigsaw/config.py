"""Configuration for the jigsaw puzzle core."""

from functools import lru_cache
from typing import Protocol

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings
from typing_extensions import Self


class SettingsProvider(Protocol):
    """Read-only view of the game settings shared by all mini-games."""

    @property
    def number_of_pairs(self) -> int: ...

    @property
    def show_matched_cards(self) -> bool: ...

    @property
    def music_enabled(self) -> bool: ...

    @property
    def show_puzzle_hint(self) -> bool: ...

    @property
    def math_operation_count(self) -> int: ...


class Settings(BaseSettings):
    """Application settings configuration."""

    # Game settings
    NUMBER_OF_PAIRS: int = Field(default=10, ge=1)
    SHOW_MATCHED_CARDS: bool = False
    MUSIC_ENABLED: bool = True
    SHOW_PUZZLE_HINT: bool = True
    MATH_OPERATION_COUNT: int = Field(default=10, ge=1)

    # Puzzle settings
    PUZZLE_MIN_GRID_SIZE: int = Field(default=3, ge=1)
    PUZZLE_MAX_GRID_SIZE: int = Field(default=10, ge=1)
    PUZZLE_TAB_RATIO: float = Field(default=0.3, gt=0.0, lt=0.5)
    PUZZLE_POINTS_PER_CURVE: int = Field(default=20, ge=2)
    PUZZLE_MASK_ANTIALIAS: int = Field(default=4, ge=1)

    # Timer tick interval in seconds
    TIMER_TICK_SECONDS: float = Field(default=1.0, gt=0.0)

    # Ranking settings
    RANKING_SIZE: int = Field(default=10, ge=1)

    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic configuration class."""

        case_sensitive = True
        env_file = ".env"

    @model_validator(mode="after")
    def check_grid_bounds(self) -> Self:
        """Reject an empty grid size range."""
        if self.PUZZLE_MIN_GRID_SIZE > self.PUZZLE_MAX_GRID_SIZE:
            raise ValueError(
                f"PUZZLE_MIN_GRID_SIZE ({self.PUZZLE_MIN_GRID_SIZE}) must not exceed "
                f"PUZZLE_MAX_GRID_SIZE ({self.PUZZLE_MAX_GRID_SIZE})"
            )
        return self

    # SettingsProvider view

    @property
    def number_of_pairs(self) -> int:
        return self.NUMBER_OF_PAIRS

    @property
    def show_matched_cards(self) -> bool:
        return self.SHOW_MATCHED_CARDS

    @property
    def music_enabled(self) -> bool:
        return self.MUSIC_ENABLED

    @property
    def show_puzzle_hint(self) -> bool:
        return self.SHOW_PUZZLE_HINT

    @property
    def math_operation_count(self) -> int:
        return self.MATH_OPERATION_COUNT


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
