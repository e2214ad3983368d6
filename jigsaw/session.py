"""Puzzle session state: pieces in hand, pieces on the board, and the clock.

Pieces are stored once, in a table keyed by id. The hand and the board only
hold ids, so a piece can never be duplicated or lost by moving it around.
Operations that refer to a piece that is not where the caller expects it are
ignored, because drag-and-drop deliveries can arrive after the piece has
already moved.
"""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from PIL import Image

from .config import Settings, SettingsProvider, get_settings
from .exceptions import EmptyPuzzleError, InvalidGridSizeError, InvalidPlayerNameError, PuzzleNotSolvedError
from .models import ClosedPath, PieceRecord
from .puzzle_cutter import PuzzleCutter
from .scoring import ScoreRecord, ScoreReporter
from .timer import Clock, ElapsedTimer, SessionTicker

logger = logging.getLogger(__name__)

PieceRef = Union[PieceRecord, str]


class PuzzleState(str, Enum):
    """Progress of a puzzle session."""

    IN_PROGRESS = "in_progress"
    SOLVED = "solved"


class EventKind(str, Enum):
    """Kinds of events published by a puzzle session."""

    PLACED = "placed"
    RETURNED = "returned"
    REORDERED = "reordered"
    SOLVED = "solved"
    UNSOLVED = "unsolved"
    TICK = "tick"
    ENDED = "ended"


@dataclass(frozen=True)
class PuzzleEvent:
    """Notification sent to session subscribers."""

    kind: EventKind
    elapsed: float
    piece_id: Optional[str] = None
    board_index: Optional[int] = None


Listener = Callable[[PuzzleEvent], None]


def validate_grid_size(grid_size: int, settings: Optional[Settings] = None) -> int:
    """Check a grid size against the configured bounds.

    Raises:
        InvalidGridSizeError: If the size is out of bounds.
    """
    settings = settings or get_settings()
    if not settings.PUZZLE_MIN_GRID_SIZE <= grid_size <= settings.PUZZLE_MAX_GRID_SIZE:
        raise InvalidGridSizeError(grid_size, settings.PUZZLE_MIN_GRID_SIZE, settings.PUZZLE_MAX_GRID_SIZE)
    return grid_size


class PuzzleSession:
    """A single play-through of a jigsaw puzzle."""

    def __init__(
        self,
        pieces: Sequence[PieceRecord],
        grid_size: int,
        settings: Optional[SettingsProvider] = None,
        reporter: Optional[ScoreReporter] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = time.monotonic,
        tick_interval: float = 1.0,
        shuffle: bool = True,
    ):
        """Initialize the session with every piece in hand and an empty board.

        Args:
            pieces: All pieces of the puzzle.
            grid_size: Number of rows and columns.
            settings: Game settings; only the puzzle hint flag is read.
            reporter: Receives the score once the solved puzzle is confirmed.
            rng: Random generator used to shuffle the hand.
            clock: Monotonic time source for the elapsed time.
            tick_interval: Seconds between elapsed-time ticks.
            shuffle: Whether to shuffle the hand.

        Raises:
            EmptyPuzzleError: If there are no pieces.
            ValueError: If the pieces do not fill a grid_size x grid_size board
                exactly once each.
        """
        if not pieces:
            raise EmptyPuzzleError("Cannot start a puzzle without pieces")
        if len(pieces) != grid_size * grid_size:
            raise ValueError(
                f"Expected {grid_size * grid_size} pieces for a {grid_size}x{grid_size} grid, got {len(pieces)}"
            )
        if sorted(piece.original_index for piece in pieces) != list(range(grid_size * grid_size)):
            raise ValueError("Piece original indices must cover every board slot exactly once")
        if len({piece.id for piece in pieces}) != len(pieces):
            raise ValueError("Piece ids must be unique")

        self.grid_size = grid_size
        self.settings = settings
        self.reporter = reporter

        self._pieces: Dict[str, PieceRecord] = {piece.id: piece for piece in pieces}
        self._by_index: Dict[int, str] = {piece.original_index: piece.id for piece in pieces}
        self._hand: List[str] = [piece.id for piece in pieces]
        if shuffle:
            (rng or random.Random()).shuffle(self._hand)
        self._board: List[Optional[str]] = [None] * (grid_size * grid_size)

        self._state = PuzzleState.IN_PROGRESS
        self._ended = False
        self._score: Optional[ScoreRecord] = None
        self._listeners: List[Listener] = []

        self._timer = ElapsedTimer(clock)
        self._ticker = SessionTicker(self.tick, lambda: self.is_ticking, interval=tick_interval)

        logger.info("Started %dx%d puzzle with %d pieces", grid_size, grid_size, len(pieces))

    @classmethod
    def start(
        cls,
        image: Optional[Image.Image],
        grid_size: int,
        settings: Optional[Settings] = None,
        reporter: Optional[ScoreReporter] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = time.monotonic,
        cutter: Optional[PuzzleCutter] = None,
    ) -> "PuzzleSession":
        """Cut an image and start a session with its pieces.

        Args:
            image: Source image, or None if it failed to decode.
            grid_size: Number of rows and columns.
            settings: Configuration (cached settings if None).
            reporter: Receives the score of the solved puzzle.
            rng: Random generator for edges and shuffling.
            clock: Monotonic time source for the elapsed time.
            cutter: Cutter to use instead of one built from settings.

        Returns:
            The new session.

        Raises:
            InvalidGridSizeError: If grid_size is out of the configured bounds.
            EmptyPuzzleError: If the image yields no pieces.
        """
        settings = settings or get_settings()
        validate_grid_size(grid_size, settings)

        if cutter is None:
            cutter = PuzzleCutter(
                tab_ratio=settings.PUZZLE_TAB_RATIO,
                points_per_curve=settings.PUZZLE_POINTS_PER_CURVE,
                antialias_scale=settings.PUZZLE_MASK_ANTIALIAS,
            )
        pieces = cutter.cut(image, grid_size, rng=rng)
        if not pieces:
            logger.error("Puzzle image produced no pieces")
            raise EmptyPuzzleError("The puzzle image produced no pieces")

        return cls(
            pieces,
            grid_size,
            settings=settings,
            reporter=reporter,
            rng=rng,
            clock=clock,
            tick_interval=settings.TIMER_TICK_SECONDS,
        )

    # Queries

    @property
    def state(self) -> PuzzleState:
        return self._state

    @property
    def is_solved(self) -> bool:
        return self._state is PuzzleState.SOLVED

    @property
    def is_ended(self) -> bool:
        return self._ended

    @property
    def is_ticking(self) -> bool:
        """Whether the elapsed time is still advancing."""
        return not self._ended and not self._timer.is_frozen

    @property
    def is_timer_running(self) -> bool:
        """Whether elapsed-time ticks are scheduled on the event loop."""
        return self._ticker.running

    @property
    def elapsed(self) -> float:
        return self._timer.elapsed

    @property
    def hand(self) -> List[PieceRecord]:
        return [self._pieces[piece_id] for piece_id in self._hand]

    @property
    def board(self) -> List[Optional[PieceRecord]]:
        return [self._pieces[piece_id] if piece_id is not None else None for piece_id in self._board]

    @property
    def pieces(self) -> List[PieceRecord]:
        return list(self._pieces.values())

    @property
    def placed_count(self) -> int:
        return sum(1 for piece_id in self._board if piece_id is not None)

    @property
    def score(self) -> Optional[ScoreRecord]:
        return self._score

    def get_piece(self, piece_id: str) -> Optional[PieceRecord]:
        return self._pieces.get(piece_id)

    def hint_outline(self, board_index: int) -> Optional[ClosedPath]:
        """Outline of the piece that belongs in an empty slot, when hints are enabled."""
        if self.settings is None or not self.settings.show_puzzle_hint:
            return None
        if not self._valid_index(board_index) or self._board[board_index] is not None:
            return None
        return self._pieces[self._by_index[board_index]].outline

    # Events

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: EventKind, piece_id: Optional[str] = None, board_index: Optional[int] = None) -> None:
        event = PuzzleEvent(kind=kind, elapsed=self.elapsed, piece_id=piece_id, board_index=board_index)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener failed on %s event", kind.value)

    # Operations

    def place_piece(self, piece: PieceRef, board_index: int) -> None:
        """Move a piece from the hand onto a board slot.

        A piece already in the slot goes back to the end of the hand. Pieces
        that are not in the hand and invalid slots are ignored.
        """
        piece_id = self._piece_id(piece)
        if self._ended or piece_id not in self._hand or not self._valid_index(board_index):
            logger.debug("Ignoring placement of %s at %s", piece_id, board_index)
            return

        occupant = self._board[board_index]
        if occupant is not None:
            self._hand.append(occupant)
        self._hand.remove(piece_id)
        self._board[board_index] = piece_id
        solved = self._evaluate()

        # Subscribers only see the state after the whole move
        if occupant is not None:
            self._emit(EventKind.RETURNED, occupant, board_index)
        self._emit(EventKind.PLACED, piece_id, board_index)
        if solved:
            self._emit(EventKind.SOLVED)

    def return_piece(self, board_index: int) -> None:
        """Move the piece in a board slot back to the end of the hand."""
        if self._ended or not self._valid_index(board_index):
            return
        piece_id = self._board[board_index]
        if piece_id is None:
            logger.debug("Ignoring return from empty slot %d", board_index)
            return

        self._board[board_index] = None
        self._hand.append(piece_id)
        was_solved = self._state is PuzzleState.SOLVED
        # The timer stays frozen at the solve time
        self._state = PuzzleState.IN_PROGRESS

        self._emit(EventKind.RETURNED, piece_id, board_index)
        if was_solved:
            self._emit(EventKind.UNSOLVED, piece_id, board_index)

    def remove_piece(self, piece: PieceRef) -> None:
        """Move a piece from wherever it sits on the board back to the hand."""
        piece_id = self._piece_id(piece)
        if piece_id not in self._board:
            logger.debug("Ignoring removal of %s, not on the board", piece_id)
            return
        self.return_piece(self._board.index(piece_id))

    def reorder_hand(self, piece: PieceRef, target: PieceRef) -> None:
        """Move a piece in the hand into the position of another hand piece.

        Moving forward places the piece after the target, moving backward
        places it before the target.
        """
        piece_id = self._piece_id(piece)
        target_id = self._piece_id(target)
        if self._ended or piece_id == target_id or piece_id not in self._hand or target_id not in self._hand:
            return

        moving_forward = self._hand.index(piece_id) < self._hand.index(target_id)
        self._hand.remove(piece_id)
        target_position = self._hand.index(target_id)
        self._hand.insert(target_position + 1 if moving_forward else target_position, piece_id)
        self._emit(EventKind.REORDERED, piece_id)

    def tick(self) -> float:
        """Publish the current elapsed time to subscribers."""
        elapsed = self.elapsed
        if not self._ended:
            self._emit(EventKind.TICK)
        return elapsed

    def start_timer(self) -> None:
        """Start publishing elapsed-time ticks on the running asyncio loop."""
        if self.is_ticking:
            self._ticker.start()

    def submit_score(self, player_name: str) -> ScoreRecord:
        """Report the solved puzzle to the ranking.

        Only one record is reported per session; later calls return it again.

        Args:
            player_name: Name confirmed by the player.

        Returns:
            The reported score record.

        Raises:
            PuzzleNotSolvedError: If the puzzle is not solved.
            InvalidPlayerNameError: If the name is blank.
        """
        if self._score is not None:
            return self._score
        if self._state is not PuzzleState.SOLVED:
            raise PuzzleNotSolvedError("The puzzle has not been solved")
        if not player_name or not player_name.strip():
            raise InvalidPlayerNameError("Player name must not be empty")

        self._score = ScoreRecord(
            player_name=player_name,
            elapsed_seconds=self.elapsed,
            grid_size=self.grid_size,
            item_count=self.grid_size * self.grid_size,
        )
        if self.reporter is not None:
            self.reporter.submit(self._score)
        logger.info("Submitted score for %s: %.1fs", self._score.player_name, self._score.elapsed_seconds)
        return self._score

    def end(self) -> None:
        """Finish the session, stopping the timer and releasing piece images."""
        if self._ended:
            return
        self._ended = True
        self._ticker.cancel()
        self._timer.freeze()
        for piece in self._pieces.values():
            if piece.image is not None:
                piece.image.close()
                piece.image = None
        logger.info("Ended puzzle session after %.1fs", self.elapsed)
        self._emit(EventKind.ENDED)

    # Internals

    def _evaluate(self) -> bool:
        """Mark the session solved if the board is complete and correct.

        Returns True only on the transition into SOLVED.
        """
        if self._state is PuzzleState.SOLVED or not self._is_board_solved():
            return False

        self._state = PuzzleState.SOLVED
        self._timer.freeze()
        self._ticker.cancel()
        logger.info("Puzzle solved in %.1fs", self.elapsed)
        return True

    def _is_board_solved(self) -> bool:
        for index, piece_id in enumerate(self._board):
            if piece_id is None or self._pieces[piece_id].original_index != index:
                return False
        return True

    def _valid_index(self, board_index: int) -> bool:
        return 0 <= board_index < len(self._board)

    @staticmethod
    def _piece_id(piece: PieceRef) -> str:
        return piece.id if isinstance(piece, PieceRecord) else piece
