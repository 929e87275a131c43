"""Core rules for a two-player, 3x3 game of tic-tac-toe."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

Mark = str  # "X", "O", or EMPTY

EMPTY: Mark = ""
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

INVALID_MOVE_MESSAGE = (
    "Invalid move. The cell is occupied or the index is out of range."
)
GAME_OVER_MESSAGE = "The game is over. Press restart to play again."


@dataclass(frozen=True)
class Player:
    name: str
    mark: Mark

    def __str__(self) -> str:
        return f"{self.name} ({self.mark})"


class GameStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    OVER = "over"


class Outcome(str, Enum):
    """Tag describing how a single round resolved."""

    INVALID = "invalid"
    GAME_OVER = "game_over"
    WIN = "win"
    TIE = "tie"
    CONTINUE = "continue"


@dataclass(frozen=True)
class RoundResult:
    """Result of ``Game.play_round``.

    ``player`` is the winner for ``WIN``, the player whose turn it now is for
    ``CONTINUE``, and ``None`` for every other outcome.
    """

    outcome: Outcome
    index: int
    player: Optional[Player] = None

    @property
    def message(self) -> str:
        if self.outcome is Outcome.WIN:
            return f"{self.player} wins!"
        if self.outcome is Outcome.TIE:
            return "It's a tie!"
        if self.outcome is Outcome.CONTINUE:
            return f"Turn: {self.player}"
        if self.outcome is Outcome.GAME_OVER:
            return GAME_OVER_MESSAGE
        return INVALID_MOVE_MESSAGE


# ---------- Board ----------


@dataclass
class Board:
    _cells: List[Mark] = field(default_factory=lambda: [EMPTY] * BOARD_SIZE)

    def __post_init__(self) -> None:
        if len(self._cells) != BOARD_SIZE:
            raise ValueError(f"Board needs exactly {BOARD_SIZE} cells")
        self._cells = list(self._cells)

    def get_cells(self) -> Tuple[Mark, ...]:
        return tuple(self._cells)

    def place_mark(self, index: int, mark: Mark) -> bool:
        """Put ``mark`` on an empty cell. Returns False and leaves the board
        untouched when the index is out of range or the cell is taken."""
        if not mark:
            return False
        if not isinstance(index, int) or not 0 <= index < BOARD_SIZE:
            return False
        if self._cells[index] != EMPTY:
            return False
        self._cells[index] = mark
        return True

    def reset(self) -> None:
        self._cells = [EMPTY] * BOARD_SIZE

    def is_full(self) -> bool:
        return all(c != EMPTY for c in self._cells)

    def has_line(self, mark: Mark) -> bool:
        return any(
            all(self._cells[i] == mark for i in line) for line in WINNING_LINES
        )


# ---------- Game ----------


@dataclass(frozen=True)
class GameSnapshot:
    cells: Tuple[Mark, ...]
    active_player: Player
    is_over: bool
    status: GameStatus
    last_result: Optional[RoundResult]

    @property
    def winner(self) -> Optional[Player]:
        if self.last_result and self.last_result.outcome is Outcome.WIN:
            return self.last_result.player
        return None

    @property
    def drawn(self) -> bool:
        return bool(self.last_result and self.last_result.outcome is Outcome.TIE)


class Game:
    """Turn order and end-of-game detection for one board.

    Player A always moves first, both on construction and after every
    ``start()``.
    """

    def __init__(
        self,
        player_a: Optional[Player] = None,
        player_b: Optional[Player] = None,
    ) -> None:
        player_a = player_a or Player("Player 1", "X")
        player_b = player_b or Player("Player 2", "O")
        for player in (player_a, player_b):
            if len(player.mark) != 1 or player.mark.isspace():
                raise ValueError(f"Invalid mark {player.mark!r} for {player.name}")
        if player_a.mark == player_b.mark:
            raise ValueError("Players must use different marks")

        self._players: Tuple[Player, Player] = (player_a, player_b)
        self._board = Board()
        self._active = player_a
        self._over = False
        self._status = GameStatus.NOT_STARTED
        self._last_result: Optional[RoundResult] = None
        self._lock = threading.Lock()

    # ---- read accessors ----

    @property
    def board(self) -> Board:
        return self._board

    @property
    def players(self) -> Tuple[Player, Player]:
        return self._players

    @property
    def active_player(self) -> Player:
        return self._active

    @property
    def is_over(self) -> bool:
        return self._over

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def last_result(self) -> Optional[RoundResult]:
        return self._last_result

    def status_message(self) -> str:
        if self._last_result is not None and self._over:
            return self._last_result.message
        return f"Turn: {self._active}"

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return GameSnapshot(
                cells=self._board.get_cells(),
                active_player=self._active,
                is_over=self._over,
                status=self._status,
                last_result=self._last_result,
            )

    # ---- mutations ----

    def start(self) -> None:
        with self._lock:
            self._board.reset()
            self._active = self._players[0]
            self._over = False
            self._status = GameStatus.IN_PROGRESS
            self._last_result = None
        logger.info("Game started. Turn: %s", self._players[0])

    def play_round(self, index: int) -> RoundResult:
        with self._lock:
            result = self._resolve_round(index)
            if result.outcome not in (Outcome.INVALID, Outcome.GAME_OVER):
                self._last_result = result
        return result

    # ---- helpers ----

    def _resolve_round(self, index: int) -> RoundResult:
        if self._over:
            logger.debug("Ignoring move at %r: game is over", index)
            return RoundResult(Outcome.GAME_OVER, index)

        player = self._active
        if not self._board.place_mark(index, player.mark):
            logger.debug("Rejected move by %s at %r", player, index)
            return RoundResult(Outcome.INVALID, index)

        self._status = GameStatus.IN_PROGRESS

        # A move that fills the board and completes a line is a win
        if self._board.has_line(player.mark):
            self._over = True
            self._status = GameStatus.OVER
            logger.info("%s wins!", player)
            return RoundResult(Outcome.WIN, index, player)

        if self._board.is_full():
            self._over = True
            self._status = GameStatus.OVER
            logger.info("It's a tie!")
            return RoundResult(Outcome.TIE, index)

        self._active = (
            self._players[1] if player == self._players[0] else self._players[0]
        )
        logger.info("Turn: %s", self._active)
        return RoundResult(Outcome.CONTINUE, index, self._active)
