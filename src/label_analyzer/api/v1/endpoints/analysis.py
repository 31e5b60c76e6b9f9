"""Ingredient label analysis endpoints.

Provides:
- POST /analyze for a full classification of label text
- POST /analyze/stream for the same, streamed as NDJSON progress events
- POST /parse for parsing and quality checks without classification
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from label_analyzer.api.dependencies import (
    get_analysis_service,
    get_caller_identity,
    get_rate_limiter,
)
from label_analyzer.core.exceptions import (
    BadRequestException,
    RateLimitException,
    ServiceUnavailableException,
)
from label_analyzer.observability.logging import bind_context, get_logger
from label_analyzer.parsing.exceptions import LabelTextError
from label_analyzer.parsing.pipeline import parse
from label_analyzer.parsing.quality import (
    validate_ingredient_list,
    validate_ocr_extraction,
)
from label_analyzer.parsing.sanitize import validate_extracted_text
from label_analyzer.schemas.analysis import (
    AnalysisResult,
    AnalysisStreamMessage,
    AnalyzeRequest,
)
from label_analyzer.schemas.ingredient import ParseRequest, ParseResponse
from label_analyzer.schemas.ocr import OCRResult
from label_analyzer.services.analysis.exceptions import ServiceNotInitializedError
from label_analyzer.services.analysis.service import AnalysisService  # noqa: TC001
from label_analyzer.services.rate_limit.constants import OperationClass
from label_analyzer.services.rate_limit.exceptions import RateLimitExceededError
from label_analyzer.services.rate_limit.service import RateLimiter  # noqa: TC001


if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from label_analyzer.schemas.progress import ProgressEvent


logger = get_logger(__name__)

router = APIRouter(tags=["Analysis"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


def _stream_line(message: AnalysisStreamMessage) -> bytes:
    return (message.model_dump_json(exclude_none=True) + "\n").encode()


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    summary="Analyze an ingredient label",
    description=(
        "Parses raw OCR text from a food label, classifies every ingredient "
        "as clean or concerning, and returns a conservative product verdict."
    ),
    responses={
        400: {"description": "Label text is empty, oversized or unreadable"},
        429: {"description": "Classification quota exceeded for this caller"},
        503: {"description": "Analysis service not available"},
    },
)
async def analyze_label(
    body: AnalyzeRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
    caller: Annotated[str, Depends(get_caller_identity)],
) -> AnalysisResult:
    """Classify every ingredient on a label."""
    bind_context(caller=caller)
    try:
        return await service.analyze(body.text, caller)
    except LabelTextError as e:
        raise BadRequestException(str(e)) from e
    except RateLimitExceededError as e:
        raise RateLimitException(retry_after=e.retry_after) from e
    except ServiceNotInitializedError as e:
        raise ServiceUnavailableException(e.message) from e


@router.post(
    "/analyze/stream",
    summary="Analyze an ingredient label with live progress",
    description=(
        "Same analysis as POST /analyze, streamed as newline-delimited JSON: "
        'zero or more {"event": "progress"} lines followed by exactly one '
        '{"event": "result"} or {"event": "error"} line.'
    ),
    response_class=StreamingResponse,
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}},
        400: {"description": "Label text is empty, oversized or unreadable"},
    },
)
async def analyze_label_stream(
    body: AnalyzeRequest,
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
    caller: Annotated[str, Depends(get_caller_identity)],
) -> StreamingResponse:
    """Stream progress events, then the analysis result."""
    # Reject bad input before committing to a 200 streaming response
    try:
        validate_extracted_text(body.text)
    except LabelTextError as e:
        raise BadRequestException(str(e)) from e

    bind_context(caller=caller)
    queue: asyncio.Queue[AnalysisStreamMessage | None] = asyncio.Queue()

    async def on_progress(event: ProgressEvent) -> None:
        await queue.put(AnalysisStreamMessage(event="progress", progress=event))

    async def run() -> None:
        try:
            result = await service.analyze(body.text, caller, on_progress)
            await queue.put(AnalysisStreamMessage(event="result", result=result))
        except RateLimitExceededError as e:
            await queue.put(
                AnalysisStreamMessage(
                    event="error",
                    error=f"Rate limit exceeded, retry after {e.retry_after}s",
                )
            )
        except (LabelTextError, ServiceNotInitializedError) as e:
            await queue.put(AnalysisStreamMessage(event="error", error=str(e)))
        except Exception:
            logger.exception("Streaming analysis failed")
            await queue.put(
                AnalysisStreamMessage(
                    event="error", error="An unexpected error occurred"
                )
            )
        finally:
            await queue.put(None)

    async def stream() -> AsyncIterator[bytes]:
        task = asyncio.create_task(run())
        try:
            while (message := await queue.get()) is not None:
                yield _stream_line(message)
        finally:
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    return StreamingResponse(stream(), media_type=NDJSON_MEDIA_TYPE)


@router.post(
    "/parse",
    response_model=ParseResponse,
    summary="Parse an ingredient label",
    description=(
        "Parses raw OCR text into ingredients without classifying them, and "
        "reports whether the text looks like a complete ingredient list."
    ),
    responses={
        400: {"description": "Label text is empty, oversized or unreadable"},
        429: {"description": "Request quota exceeded for this caller"},
    },
)
async def parse_label(
    body: ParseRequest,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    caller: Annotated[str, Depends(get_caller_identity)],
) -> ParseResponse:
    """Parse label text and run the list and extraction quality checks."""
    try:
        await limiter.enforce(caller, OperationClass.GENERAL)
    except RateLimitExceededError as e:
        raise RateLimitException(retry_after=e.retry_after) from e

    try:
        ingredients = parse(body.text)
    except LabelTextError as e:
        raise BadRequestException(str(e)) from e

    extraction_check = None
    if body.ocr_confidence is not None or body.ocr_error is not None:
        extraction_check = validate_ocr_extraction(
            OCRResult(
                text=body.text,
                confidence=body.ocr_confidence or 0.0,
                error=body.ocr_error,
            ),
            ingredients,
        )

    return ParseResponse(
        ingredients=ingredients,
        total_ingredients=len(ingredients),
        list_check=validate_ingredient_list(body.text),
        extraction_check=extraction_check,
    )
