"""Stateless pattern detection API routes."""
from fastapi import APIRouter, Depends, HTTPException

from ...core.errors import InconsistentBoardError
from ...core.pattern_detector import PatternDetector
from ...models.schemas import DetectRequest, DetectResponse, ErrorResponse
from ...utils.helpers import board_from_snapshot
from ..deps import get_detector

router = APIRouter(prefix="/api/patterns", tags=["patterns"])


@router.post("/detect", response_model=DetectResponse, responses={400: {"model": ErrorResponse}})
async def detect_patterns(
    request: DetectRequest,
    detector: PatternDetector = Depends(get_detector),
) -> DetectResponse:
    """
    Classify a submitted tile snapshot.

    Args:
        request: DetectRequest with the tiles and minimum line length.
        detector: PatternDetector dependency.

    Returns:
        DetectResponse with one classification record per on-board tile.
    """
    try:
        board = board_from_snapshot([t.model_dump() for t in request.tiles])
    except (ValueError, InconsistentBoardError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid snapshot: {str(e)}")

    if request.min_line_length != detector.min_line_length:
        detector = PatternDetector(min_line_length=request.min_line_length)
    detected = detector.detect(board)
    return DetectResponse(**detected.to_dict())
