from typing import Dict, Mapping, Type

from .models import (
    BinaryResponse,
    ContentType,
    ErrorResponse,
    JpegImageResponse,
    JsonResponse,
    PlainTextResponse,
    PngImageResponse,
    Response,
)

SUCCESS_VARIANTS: Dict[ContentType, Type[Response]] = {
    ContentType.JSON: JsonResponse,
    ContentType.PLAIN_TEXT: PlainTextResponse,
    ContentType.JPEG: JpegImageResponse,
    ContentType.PNG: PngImageResponse,
    ContentType.BINARY: BinaryResponse,
}


def is_success_status(status_code: int) -> bool:
    # Anything below 400 counts, 1xx included.
    return (status_code - 200) < 200


def classify_response(
    status_code: int,
    content_type: ContentType,
    body: bytes,
    headers: Mapping[str, str],
) -> Response:
    """Pick the response variant for a status code and detected content type."""
    if is_success_status(status_code):
        variant = SUCCESS_VARIANTS.get(content_type, BinaryResponse)
        return variant(body=body, status_code=status_code, headers=headers)
    return ErrorResponse(body=body, status_code=status_code, headers=headers, content_type=content_type)
