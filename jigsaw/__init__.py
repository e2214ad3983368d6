"""Jigsaw puzzle core - piece generation and play state for the puzzle mini-game.

This package generates interlocking piece edges, builds Bezier outlines for
each piece, slices a source image into overscanned per-piece images, and
tracks the hand/board state of a puzzle session until it is solved.
"""

from .config import Settings, SettingsProvider, get_settings
from .edge_grid import (
    EdgeGrid,
    flatten_grid,
    generate_edge_grid,
    get_opposite_edge_type,
    iter_border_edges,
    iter_shared_edges,
)
from .exceptions import (
    EmptyPuzzleError,
    InvalidGridSizeError,
    InvalidPlayerNameError,
    PuzzleError,
    PuzzleNotSolvedError,
)
from .geometry import build_outline, generate_tab_edge, tab_margins
from .image_slicing import capture_box, capture_rect, capture_size, load_image, slice_image, slice_piece
from .logging_config import configure_logging
from .masking import apply_mask, create_piece_mask
from .models import BezierCurve, ClosedPath, EdgeKind, EdgeSet, GameMode, PieceRecord, Rect
from .puzzle_cutter import PuzzleCutter
from .scoring import RankingManager, ScoreRecord, ScoreReporter
from .session import EventKind, PuzzleEvent, PuzzleSession, PuzzleState, validate_grid_size
from .timer import ElapsedTimer, SessionTicker

__all__ = [
    # Models
    "BezierCurve",
    "ClosedPath",
    "EdgeKind",
    "EdgeSet",
    "GameMode",
    "PieceRecord",
    "Rect",
    # Edge grid
    "EdgeGrid",
    "flatten_grid",
    "generate_edge_grid",
    "get_opposite_edge_type",
    "iter_border_edges",
    "iter_shared_edges",
    # Geometry
    "build_outline",
    "generate_tab_edge",
    "tab_margins",
    # Image slicing and masking
    "capture_box",
    "capture_rect",
    "capture_size",
    "load_image",
    "slice_image",
    "slice_piece",
    "apply_mask",
    "create_piece_mask",
    "PuzzleCutter",
    # Session
    "EventKind",
    "PuzzleEvent",
    "PuzzleSession",
    "PuzzleState",
    "validate_grid_size",
    "ElapsedTimer",
    "SessionTicker",
    # Scoring
    "RankingManager",
    "ScoreRecord",
    "ScoreReporter",
    # Configuration
    "Settings",
    "SettingsProvider",
    "get_settings",
    "configure_logging",
    # Errors
    "PuzzleError",
    "InvalidGridSizeError",
    "EmptyPuzzleError",
    "PuzzleNotSolvedError",
    "InvalidPlayerNameError",
]
