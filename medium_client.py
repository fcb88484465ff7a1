from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from config import Settings
from errors import MediumApiError
from models import ArticleContent

PUBLISH_STATUS = "draft"


def _error_message(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text[:500]
    errors = body.get("errors") if isinstance(body, dict) else None
    if errors and isinstance(errors, list) and isinstance(errors[0], dict):
        return f"{errors[0].get('message', '')} (code {errors[0].get('code', '')})"
    return r.text[:500]


def build_post_payload(article: ArticleContent) -> Dict[str, Any]:
    return {
        "title": article.title,
        "contentFormat": article.content_format,
        "content": article.content,
        "tags": list(article.tags),
        "canonicalUrl": article.canonical_url,
        "publishStatus": PUBLISH_STATUS,
    }


class MediumClient:
    def __init__(self, session: requests.Session, settings: Settings):
        self.session = session
        self.prefix = settings.medium_endpoint_prefix
        self.token = settings.medium_bearer_token
        self.timeout = settings.request_timeout
        self._user_id: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
            "Accept-Charset": "utf-8",
        }

    def _data(self, r: requests.Response, what: str) -> Dict[str, Any]:
        if r.status_code >= 400:
            raise MediumApiError(f"{what} failed status={r.status_code}: {_error_message(r)}", r.status_code)
        try:
            data = r.json().get("data")
        except (ValueError, AttributeError) as exc:
            raise MediumApiError(f"{what} returned an unreadable body", r.status_code) from exc
        if not isinstance(data, dict):
            raise MediumApiError(f"{what} response has no data object", r.status_code)
        return data

    def get_user_id(self) -> str:
        if self._user_id is None:
            r = self.session.get(f"{self.prefix}/me", headers=self._headers(), timeout=self.timeout)
            user_id = self._data(r, "get user").get("id")
            if not user_id:
                raise MediumApiError("get user response has no id", r.status_code)
            self._user_id = str(user_id)
        return self._user_id

    def create_post(self, article: ArticleContent) -> Dict[str, Any]:
        user_id = self.get_user_id()
        r = self.session.post(
            f"{self.prefix}/users/{user_id}/posts",
            headers=self._headers(),
            json=build_post_payload(article),
            timeout=self.timeout,
        )
        return self._data(r, f"create post {article.title!r}")
