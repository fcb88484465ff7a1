from __future__ import annotations

from typing import List

import requests

from config import Settings
from errors import IndexFetchError
from models import IndexEntry


def fetch_index(session: requests.Session, settings: Settings) -> List[IndexEntry]:
    url = settings.website_json_index_url
    try:
        r = session.get(url, timeout=settings.request_timeout)
        r.raise_for_status()
        payload = r.json()
    except requests.RequestException as exc:
        raise IndexFetchError(f"cannot fetch article index {url}: {exc}") from exc
    except ValueError as exc:
        raise IndexFetchError(f"article index {url} is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise IndexFetchError(f"article index {url} must be a JSON array")
    return [IndexEntry.from_dict(item) for item in payload]
