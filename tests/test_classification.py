import pytest

from relaynet.core.classification import SUCCESS_VARIANTS, classify_response, is_success_status
from relaynet.core.models import (
    BinaryResponse,
    ContentType,
    ErrorResponse,
    JpegImageResponse,
    JsonResponse,
    PlainTextResponse,
    PngImageResponse,
)


@pytest.mark.parametrize(
    "status, content_type, expected",
    [
        (200, ContentType.JSON, JsonResponse),
        (201, ContentType.PLAIN_TEXT, PlainTextResponse),
        (204, ContentType.JPEG, JpegImageResponse),
        (206, ContentType.PNG, PngImageResponse),
        (301, ContentType.BINARY, BinaryResponse),
        (399, ContentType.JSON, JsonResponse),
        (150, ContentType.PLAIN_TEXT, PlainTextResponse),
        (100, ContentType.BINARY, BinaryResponse),
        (400, ContentType.JSON, ErrorResponse),
        (404, ContentType.JSON, ErrorResponse),
        (500, ContentType.PNG, ErrorResponse),
    ],
)
def test_classification_examples(status, content_type, expected):
    response = classify_response(status, content_type, b"payload", {"X-Id": "7"})

    assert type(response) is expected
    assert response.status_code == status
    assert response.body == b"payload"
    assert response.headers["x-id"] == "7"


def test_error_response_carries_detected_content_type():
    response = classify_response(404, ContentType.JSON, b'{"error": "nope"}', {})

    assert isinstance(response, ErrorResponse)
    assert response.content_type is ContentType.JSON


def test_classification_is_a_function_of_status_and_content_type():
    for status in range(100, 600):
        for content_type in ContentType:
            response = classify_response(status, content_type, b"", {})
            if status < 400:
                assert type(response) is SUCCESS_VARIANTS[content_type]
            else:
                assert type(response) is ErrorResponse
                assert response.content_type is content_type


def test_status_boundary_treats_informational_codes_as_success():
    assert is_success_status(101)
    assert is_success_status(399)
    assert not is_success_status(400)
