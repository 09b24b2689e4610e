"""Core gameplay logic — processes moves and checks the win condition."""

from __future__ import annotations

from backend.engine.gamesolver import SolveResult, Solver
from backend.engine.gamestate import PuzzleState
from backend.models.board import DEFAULT_BOARD, Board, Direction, Move, Piece
from backend.models.layouts import DEFAULT_GOAL_PIECE_ID, classic_pieces


# -- state operations ---------------------------------------------------------


def create_initial_state(
    goal_piece_id: str = DEFAULT_GOAL_PIECE_ID,
    initial_pieces: list[Piece] | None = None,
    board: Board = DEFAULT_BOARD,
) -> PuzzleState:
    """Return a fresh game; defaults to the classic layout.

    *initial_pieces* is copied, never adopted.
    """
    if initial_pieces is None:
        pieces = classic_pieces()
    else:
        pieces = [piece.copy() for piece in initial_pieces]
    return PuzzleState(pieces, goal_piece_id, board)


def is_solved(state: PuzzleState) -> bool:
    """True if the goal piece stands in the exit; False if it is absent."""
    piece = state.get_piece(state.goal_piece_id)
    if piece is None:
        return False
    return state.board.is_goal_position(piece.x, piece.y, piece.width, piece.height)


def valid_moves(state: PuzzleState, piece_id: str) -> list[Direction]:
    """Directions *piece_id* can slide one cell in, in fixed order."""
    piece = state.get_piece(piece_id)
    if piece is None:
        return []
    occupied = state.board.occupied(state.pieces, ignore=piece_id)
    return [d for d in Direction if state.board.can_move(piece, d, occupied)]


def move(state: PuzzleState, piece_id: str, direction: Direction | str) -> bool:
    """Slide *piece_id* one cell in *direction*.

    Returns True if the move was legal and applied. Unknown pieces,
    unknown directions and blocked moves leave *state* untouched.
    """
    piece = state.get_piece(piece_id)
    if piece is None:
        return False

    parsed = Direction.parse(direction)
    if parsed is None:
        return False

    occupied = state.board.occupied(state.pieces, ignore=piece_id)
    if not state.board.can_move(piece, parsed, occupied):
        return False

    dx, dy = parsed.delta
    piece.x += dx
    piece.y += dy
    state.record_move(Move(piece_id, parsed), is_solved(state))
    return True


# -- session ------------------------------------------------------------------


class GamePlay:
    """Orchestrates a single game session."""

    def __init__(
        self,
        goal_piece_id: str = DEFAULT_GOAL_PIECE_ID,
        initial_pieces: list[Piece] | None = None,
        board: Board = DEFAULT_BOARD,
    ) -> None:
        self.state = create_initial_state(goal_piece_id, initial_pieces, board)

    @classmethod
    def from_state(cls, state: PuzzleState) -> "GamePlay":
        """Wrap an existing state (e.g. one produced by the generator)."""
        obj = object.__new__(cls)
        obj.state = state
        return obj

    # -- movement -------------------------------------------------------------

    def move(self, piece_id: str, direction: Direction | str) -> bool:
        return move(self.state, piece_id, direction)

    def valid_moves(self, piece_id: str) -> list[Direction]:
        return valid_moves(self.state, piece_id)

    def apply(self, moves: list[Move]) -> int:
        """Replay *moves*, stopping at the first illegal one or at the win.

        Returns the number of moves applied.
        """
        applied = 0
        for step in moves:
            if not self.move(step.piece_id, step.direction):
                break
            applied += 1
            if self.is_won:
                break
        return applied

    # -- solving --------------------------------------------------------------

    def auto_solve(self, max_nodes: int | None = None) -> SolveResult:
        """Search from the current position and play the solution out."""
        kwargs = {} if max_nodes is None else {"max_nodes": max_nodes}
        result = Solver.search(
            self.state.pieces,
            goal_piece_id=self.state.goal_piece_id,
            board=self.state.board,
            **kwargs,
        )
        if result.path:
            self.apply(result.path)
        return result

    def hint(self) -> Move | None:
        return Solver.hint(
            self.state.pieces,
            goal_piece_id=self.state.goal_piece_id,
            board=self.state.board,
        )

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        return is_solved(self.state)
