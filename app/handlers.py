"""HTTP handlers for the explanation endpoint."""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import Depends, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.dependencies import get_pipeline
from app.domain import Attachment, Submission
from app.exceptions import DecodeError, GenerationFailure, InvalidSubmission
from app.models import ErrorResponse, ExplanationResponse
from app.services.classifier import normalize_content_type
from app.services.pipeline import ExplanationPipeline

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
GENERATION_ERROR = "Failed to generate explanation"
DECODE_ERROR = "Attachment could not be decoded as UTF-8 text"


async def explain_endpoint(
    request: Request,
    pipeline: Annotated[ExplanationPipeline, Depends(get_pipeline)],
    text: Annotated[str, Form()] = "",
    file: Annotated[UploadFile | None, File()] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> JSONResponse:
    """Main HTTP workflow: submission -> classify -> assemble -> generate."""

    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    uploads = [upload for upload in (file, image) if upload is not None]

    try:
        if file is not None and image is not None:
            raise InvalidSubmission("Only one file may be attached.")

        attachment = await _read_attachment(uploads[0]) if uploads else None
        submission = Submission(text=text, attachment=attachment)

        result = await pipeline.run(submission, request_id=request_id)
    except InvalidSubmission as exc:
        return _error(exc.status_code, exc.message)
    except DecodeError as exc:
        logger.warning(
            "Attachment decode failed",
            extra={"request_id": request_id, "detail": exc.message},
        )
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, DECODE_ERROR)
    except GenerationFailure as exc:
        logger.error(
            "Explanation generation failed",
            exc_info=exc,
            extra={
                "request_id": request_id,
                "detail": exc.message,
                "upstream_status": exc.upstream_status,
            },
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERATION_ERROR)
    except Exception:
        logger.exception("Unexpected explanation error", extra={"request_id": request_id})
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERATION_ERROR)
    finally:
        for upload in uploads:
            await upload.close()

    payload = ExplanationResponse(explanation=result.explanation_text)
    return JSONResponse(payload.model_dump(), headers={"x-request-id": request_id})


async def _read_attachment(upload: UploadFile) -> Attachment | None:
    """Read an upload into memory; an empty, unnamed part counts as absent."""

    data = await upload.read()
    if not upload.filename and not data:
        return None

    content_type = upload.content_type
    if not normalize_content_type(content_type):
        content_type = DEFAULT_CONTENT_TYPE

    return Attachment(
        data=data,
        content_type=content_type,
        filename=upload.filename or "attachment",
    )


def _error(status_code: int, message: str) -> JSONResponse:
    """Render the uniform error body."""

    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed form submissions in the uniform error shape."""

    fields = sorted({str(error["loc"][-1]) for error in exc.errors() if error.get("loc")})
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "errors": exc.errors()},
    )
    message = "Invalid submission"
    if fields:
        message = f"Invalid submission field(s): {', '.join(fields)}"
    return _error(status.HTTP_400_BAD_REQUEST, message)
