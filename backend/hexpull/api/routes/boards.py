"""Board session API routes."""
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from ...config import Settings
from ...core.errors import InconsistentBoardError
from ...core.session import ActionResult, GameSession, SessionStore
from ...models.schemas import (
    BoardResponse,
    BoardStatsResponse,
    ClearRequest,
    CollectRequest,
    ErrorResponse,
    NewBoardRequest,
    PullRequest,
    TapRequest,
)
from ...utils.helpers import extract_board_statistics, format_board_for_display
from ..deps import get_app_settings, get_store

router = APIRouter(prefix="/api/boards", tags=["boards"])

NOT_FOUND = {404: {"model": ErrorResponse}}
ACTION_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _get_session(store: SessionStore, board_id: str) -> GameSession:
    try:
        return store.get(board_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=e.args[0])


def _get_tile(session: GameSession, tile_index: int) -> None:
    try:
        session.board.tile(tile_index)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=e.args[0])


def _board_response(session: GameSession, result: Optional[ActionResult] = None) -> BoardResponse:
    return BoardResponse(
        **session.snapshot(),
        changed=result.changed if result else False,
        result=result.to_dict() if result else None,
    )


def _run_action(action: Callable[..., ActionResult], *args: Any) -> ActionResult:
    """Run a session action, mapping engine errors to HTTP errors."""
    try:
        return action(*args)
    except InconsistentBoardError as e:
        raise HTTPException(status_code=500, detail=f"Board invariant violated: {str(e)}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Action failed: {str(e)}")


@router.post("", response_model=BoardResponse)
async def create_board(
    request: NewBoardRequest,
    store: SessionStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> BoardResponse:
    """
    Create a new board filled with randomly colored tiles.

    Args:
        request: NewBoardRequest with optional size, palette and seed.
        store: SessionStore dependency.
        settings: Settings dependency supplying defaults.

    Returns:
        BoardResponse with the initial board and its classification.
    """
    session = store.create(
        columns=request.columns or settings.board_columns,
        rows=request.rows or settings.board_rows,
        palette_size=request.palette_size or settings.palette_size,
        seed=request.seed if request.seed is not None else settings.random_seed,
        min_line_length=settings.min_line_length,
        default_direction=settings.default_pull_direction,
        default_rotation=settings.default_rotation,
    )
    return _board_response(session)


@router.get("/{board_id}", response_model=BoardResponse, responses=NOT_FOUND)
async def get_board(board_id: str, store: SessionStore = Depends(get_store)) -> BoardResponse:
    """Get the current board state and classification."""
    return _board_response(_get_session(store, board_id))


@router.delete("/{board_id}", responses=NOT_FOUND)
async def delete_board(board_id: str, store: SessionStore = Depends(get_store)):
    """Drop a board session."""
    _get_session(store, board_id)
    store.delete(board_id)
    return {"deleted": board_id}


@router.post("/{board_id}/tap", response_model=BoardResponse, responses=ACTION_ERRORS)
async def tap_tile(
    board_id: str,
    request: TapRequest,
    store: SessionStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> BoardResponse:
    """
    Tap a tile using the selected tap-action mode.

    Taps on removed tiles and non-mutating actions are no-ops.
    """
    session = _get_session(store, board_id)
    _get_tile(session, request.tile_index)
    result = _run_action(
        session.tap,
        request.tile_index,
        request.action or settings.default_tap_action,
        request.direction,
        request.rotation,
    )
    return _board_response(session, result)


@router.post("/{board_id}/pull", response_model=BoardResponse, responses=ACTION_ERRORS)
async def pull_tile(
    board_id: str,
    request: PullRequest,
    store: SessionStore = Depends(get_store),
) -> BoardResponse:
    """Remove a tile and refill the board by spiral displacement."""
    session = _get_session(store, board_id)
    _get_tile(session, request.tile_index)
    result = _run_action(session.pull, request.tile_index, request.direction, request.rotation)
    return _board_response(session, result)


@router.post("/{board_id}/collect", response_model=BoardResponse, responses=ACTION_ERRORS)
async def collect_tile(
    board_id: str,
    request: CollectRequest,
    store: SessionStore = Depends(get_store),
) -> BoardResponse:
    """Collect the lines through a tile into a powerup."""
    session = _get_session(store, board_id)
    _get_tile(session, request.tile_index)
    result = _run_action(session.collect, request.tile_index)
    return _board_response(session, result)


@router.post("/{board_id}/clear", response_model=BoardResponse, responses=ACTION_ERRORS)
async def clear_queued(
    board_id: str,
    request: ClearRequest,
    store: SessionStore = Depends(get_store),
) -> BoardResponse:
    """Remove every tile queued for collection."""
    session = _get_session(store, board_id)
    result = _run_action(session.clear_queued, request.direction)
    return _board_response(session, result)


@router.get("/{board_id}/stats", response_model=BoardStatsResponse, responses=NOT_FOUND)
async def board_stats(board_id: str, store: SessionStore = Depends(get_store)) -> BoardStatsResponse:
    """Get summary statistics for a board."""
    session = _get_session(store, board_id)
    stats = extract_board_statistics(session.board, session.patterns)
    return BoardStatsResponse(board_id=board_id, **stats)


@router.get("/{board_id}/text", response_class=PlainTextResponse, responses=NOT_FOUND)
async def board_text(board_id: str, store: SessionStore = Depends(get_store)) -> str:
    """Get a plain-text rendering of a board."""
    session = _get_session(store, board_id)
    return format_board_for_display(session.board, session.patterns)
