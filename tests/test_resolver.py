import pytest

from relaynet.core.resolver import is_absolute, resolve_uri


@pytest.mark.parametrize("base", ["https://api.x.com", "https://api.x.com/v1", "https://api.x.com/v1/"])
def test_empty_endpoint_and_query_returns_base(base):
    assert resolve_uri(base, "", {}) == base
    assert resolve_uri(base, "") == base


@pytest.mark.parametrize("base", ["https://api.x.com", "https://api.x.com/"])
@pytest.mark.parametrize("endpoint", ["users", "/users"])
def test_joins_with_single_separator(base, endpoint):
    assert resolve_uri(base, endpoint, {"id": "1"}) == "https://api.x.com/users?id=1"


def test_keeps_base_path_and_endpoint_trailing_slash():
    assert resolve_uri("https://api.x.com/v1/", "/users/", None) == "https://api.x.com/v1/users/"


def test_empty_endpoint_appends_query_only():
    assert resolve_uri("https://api.x.com/v1", "", {"page": "2"}) == "https://api.x.com/v1?page=2"


def test_query_is_url_encoded():
    assert resolve_uri("https://api.x.com", "search", {"q": "a b&c"}) == "https://api.x.com/search?q=a+b%26c"


def test_sequence_values_repeat_the_key():
    assert resolve_uri("https://api.x.com", "items", {"tag": ["a", "b"]}) == "https://api.x.com/items?tag=a&tag=b"


def test_base_query_and_fragment_are_replaced():
    assert resolve_uri("https://api.x.com/v1?old=1#top", "users") == "https://api.x.com/v1/users"


def test_is_absolute():
    assert is_absolute("https://api.x.com/users")
    assert not is_absolute("/users")
    assert not is_absolute("users")
