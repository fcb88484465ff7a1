from __future__ import annotations

from typing import Callable, Optional

import requests

from errors import ArticleFetchError, PublishError
from medium_client import MediumClient
from models import ArticleContent, IndexEntry, PublishedRecord
from state import now_utc


def fetch_article(session: requests.Session, url: str, timeout: int) -> ArticleContent:
    try:
        r = session.get(url, timeout=timeout)
        r.raise_for_status()
        payload = r.json()
    except requests.RequestException as exc:
        raise ArticleFetchError(f"cannot fetch article {url}: {exc}") from exc
    except ValueError as exc:
        raise ArticleFetchError(f"article {url} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ArticleFetchError(f"article {url} must be a JSON object")
    try:
        return ArticleContent.from_dict(payload)
    except ValueError as exc:
        raise ArticleFetchError(f"article {url}: {exc}") from exc


class Publisher:
    def __init__(self, session: requests.Session, medium: MediumClient, timeout: int, logger: Callable[[str], None]):
        self.session = session
        self.medium = medium
        self.timeout = timeout
        self.logger = logger

    def publish(self, entry: IndexEntry) -> Optional[PublishedRecord]:
        """Post one index entry as a Medium draft.

        Returns None on any per-article failure; the entry stays unrecorded
        and comes back in the next run's work set.
        """
        try:
            article = fetch_article(self.session, entry.url, self.timeout)
            self.logger(f"publishing id={entry.id} title={article.title}")
            response = self.medium.create_post(article)
        except (PublishError, requests.RequestException) as exc:
            self.logger(f"publish_failed id={entry.id} url={entry.url} error={exc}")
            return None

        self.logger(f"published id={entry.id} url={article.canonical_url}")
        return PublishedRecord(
            url=article.canonical_url,
            id=entry.id,
            publish_timestamp=now_utc().isoformat(),
            platform_response=response,
        )
