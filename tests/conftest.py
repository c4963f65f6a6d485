from typing import Callable, Dict, List, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict


def make_response(status: int = 200, body: bytes = b"", headers: Optional[Dict[str, str]] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response._content_consumed = True
    response.headers = CaseInsensitiveDict(headers or {})
    return response


class FakeSession:
    """Stands in for requests.Session, recording every prepared request it is given."""

    def __init__(self):
        self.sent: List[requests.PreparedRequest] = []
        self.timeouts: List[float] = []
        self.closed = False
        self.handler: Callable[[requests.PreparedRequest], requests.Response] = lambda prepared: make_response()

    def respond_with(self, status: int = 200, body: bytes = b"", headers: Optional[Dict[str, str]] = None) -> None:
        self.handler = lambda prepared: make_response(status, body, headers)

    def raise_error(self, error: BaseException) -> None:
        def handler(prepared):
            raise error

        self.handler = handler

    def send(self, prepared, timeout=None, stream=False):
        self.sent.append(prepared)
        self.timeouts.append(timeout)
        return self.handler(prepared)

    def close(self):
        self.closed = True

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
