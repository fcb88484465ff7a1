import json

import pytest
import requests

from config import Settings
from errors import IndexFetchError
from index_fetcher import fetch_index
from models import IndexEntry

INDEX_URL = "https://site.test/posts/index.json"


class FakeResponse:
    def __init__(self, status=200, text=""):
        self.status_code = status
        self.text = text

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, response):
        self._response = response
        self.kwargs = None

    def get(self, url, **kwargs):
        self.kwargs = kwargs
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


SETTINGS = Settings(website_json_index_url=INDEX_URL, request_timeout=7)


def test_parses_index_in_order():
    body = json.dumps([{"url": "https://site.test/a.json", "id": "a"}, {"url": "https://site.test/b.json", "id": "b"}])
    session = FakeSession(FakeResponse(200, body))
    assert fetch_index(session, SETTINGS) == [
        IndexEntry(url="https://site.test/a.json", id="a"),
        IndexEntry(url="https://site.test/b.json", id="b"),
    ]
    assert session.kwargs["timeout"] == 7


def test_malformed_items_are_tolerated():
    body = json.dumps([{"url": "a"}, "junk", {"url": "b", "id": 42}, {"url": None, "id": None}])
    entries = fetch_index(FakeSession(FakeResponse(200, body)), SETTINGS)
    assert entries == [
        IndexEntry(url="a", id=""),
        IndexEntry(url="", id=""),
        IndexEntry(url="b", id="42"),
        IndexEntry(url="", id=""),
    ]


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(404, "missing"),
        FakeResponse(200, "<html></html>"),
        FakeResponse(200, json.dumps({"items": []})),
        requests.ConnectionError("refused"),
    ],
)
def test_fetch_failures_are_fatal(response):
    with pytest.raises(IndexFetchError):
        fetch_index(FakeSession(response), SETTINGS)
