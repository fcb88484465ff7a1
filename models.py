from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

CONTENT_FORMATS = {"html", "markdown"}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class IndexEntry:
    url: str
    id: str

    @classmethod
    def from_dict(cls, item: Any) -> "IndexEntry":
        # Malformed items survive as empty entries; reconcile drops them.
        if not isinstance(item, dict):
            return cls(url="", id="")
        return cls(url=_text(item.get("url")), id=_text(item.get("id")))


@dataclass(frozen=True)
class ArticleContent:
    title: str
    content_format: str
    content: str
    canonical_url: str
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ArticleContent":
        raw_tags = payload.get("tags") or []
        if not isinstance(raw_tags, list):
            raise ValueError("tags must be a list")
        content_format = _text(payload.get("contentFormat"))
        if content_format not in CONTENT_FORMATS:
            raise ValueError(f"unsupported contentFormat {content_format!r}")
        return cls(
            title=_text(payload.get("title")),
            content_format=content_format,
            content=_text(payload.get("content")),
            canonical_url=_text(payload.get("canonicalUrl")),
            tags=tuple(_text(t) for t in raw_tags),
        )


@dataclass(frozen=True)
class PublishedRecord:
    url: str
    id: str
    publish_timestamp: str
    platform_response: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "id": self.id,
            "publishTimestamp": self.publish_timestamp,
            "mediumResponse": self.platform_response,
        }

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "PublishedRecord":
        response = item.get("mediumResponse")
        return cls(
            url=_text(item.get("url")),
            id=_text(item.get("id")),
            publish_timestamp=_text(item.get("publishTimestamp")),
            platform_response=response if isinstance(response, dict) else {},
        )
