"""Board and piece model for the sliding block puzzle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable

BOARD_COLS = 4
BOARD_ROWS = 5

# The exit is two cells wide, centred on the bottom edge.
EXIT_X = 1
EXIT_WIDTH = 2


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Unit ``(dx, dy)`` cell offset for this direction."""
        return _DELTAS[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, value: object) -> Direction | None:
        """Return the matching direction, or ``None`` if *value* is not one."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass(frozen=True)
class Move:
    """A single-cell slide of one piece."""

    piece_id: str
    direction: Direction

    def inverse(self) -> Move:
        return Move(self.piece_id, self.direction.opposite)


@dataclass
class Piece:
    """A rectangular block. ``(x, y)`` is its top-left cell."""

    id: str
    name: str
    width: int
    height: int
    x: int
    y: int

    @property
    def shape(self) -> str:
        return f"{self.width}x{self.height}"

    def cells(self, x: int | None = None, y: int | None = None) -> Iterable[tuple[int, int]]:
        """Yield the cells covered by the piece, optionally at another origin."""
        ox = self.x if x is None else x
        oy = self.y if y is None else y
        for cy in range(oy, oy + self.height):
            for cx in range(ox, ox + self.width):
                yield cx, cy

    def copy(self) -> Piece:
        return Piece(
            id=self.id,
            name=self.name,
            width=self.width,
            height=self.height,
            x=self.x,
            y=self.y,
        )


@dataclass(frozen=True)
class Board:
    """Fixed grid geometry plus the exit span on the bottom edge."""

    cols: int = BOARD_COLS
    rows: int = BOARD_ROWS
    exit_x: int = EXIT_X
    exit_width: int = EXIT_WIDTH

    # -- geometry -------------------------------------------------------------

    def index(self, x: int, y: int) -> int:
        """Encode a cell as a single row-major integer."""
        return y * self.cols + x

    def position(self, index: int) -> tuple[int, int]:
        y, x = divmod(index, self.cols)
        return x, y

    def in_bounds(self, x: int, y: int, width: int, height: int) -> bool:
        return x >= 0 and y >= 0 and x + width <= self.cols and y + height <= self.rows

    # -- rules ----------------------------------------------------------------

    def occupied(self, pieces: Iterable[Piece], ignore: str | None = None) -> set[int]:
        """Return the cell indices covered by *pieces*, skipping id *ignore*."""
        cells: set[int] = set()
        for piece in pieces:
            if piece.id == ignore:
                continue
            for cx, cy in piece.cells():
                cells.add(self.index(cx, cy))
        return cells

    def can_move(self, piece: Piece, direction: Direction, occupied: set[int]) -> bool:
        """Check whether *piece* can shift one cell in *direction*.

        *occupied* must not contain the piece's own cells.
        """
        dx, dy = direction.delta
        nx, ny = piece.x + dx, piece.y + dy
        if not self.in_bounds(nx, ny, piece.width, piece.height):
            return False
        for cx, cy in piece.cells(nx, ny):
            if self.index(cx, cy) in occupied:
                return False
        return True

    def is_goal_position(self, x: int, y: int, width: int, height: int) -> bool:
        """Win test: bottom edge on the board edge, aligned with the exit.

        A piece exactly as wide as the exit must sit in it.  Any other width
        only needs its left column inside the exit: on the default board a
        2-wide piece needs ``x == 1``, 1- and 3-wide pieces ``x`` 1 or 2.
        """
        if y + height != self.rows:
            return False
        if width == self.exit_width:
            return x == self.exit_x
        return self.exit_x <= x < self.exit_x + self.exit_width

    def validate(self, pieces: Iterable[Piece]) -> None:
        """Raise ``ValueError`` unless *pieces* form a legal layout."""
        seen_ids: set[str] = set()
        owners: dict[int, str] = {}
        for piece in pieces:
            if piece.id in seen_ids:
                raise ValueError(f"Duplicate piece id {piece.id!r}.")
            seen_ids.add(piece.id)
            if piece.width < 1 or piece.height < 1:
                raise ValueError(
                    f"Piece {piece.id!r} has invalid size "
                    f"{piece.width}×{piece.height}."
                )
            if not self.in_bounds(piece.x, piece.y, piece.width, piece.height):
                raise ValueError(
                    f"Piece {piece.id!r} at ({piece.x}, {piece.y}) does not fit "
                    f"on a {self.cols}×{self.rows} board."
                )
            for cx, cy in piece.cells():
                cell = self.index(cx, cy)
                if cell in owners:
                    raise ValueError(
                        f"Pieces {owners[cell]!r} and {piece.id!r} overlap "
                        f"at ({cx}, {cy})."
                    )
                owners[cell] = piece.id


DEFAULT_BOARD = Board()
