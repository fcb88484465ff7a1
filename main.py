from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

import requests
from requests.adapters import HTTPAdapter

from config import Settings, load_settings, validate_settings
from errors import AutoPostError, ConfigError, MediumApiError
from index_fetcher import fetch_index
from medium_client import MediumClient
from models import PublishedRecord
from publisher import Publisher
from reconcile import reconcile
from state import StateStore, build_state_store


@dataclass(frozen=True)
class RunSummary:
    prior: int
    candidates: int
    work: int
    published: int

    @property
    def failed(self) -> int:
        return self.work - self.published


def log(message: str) -> None:
    print(f"[{datetime.now(timezone.utc).isoformat()}] {message}")


def create_session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": settings.user_agent})
    session.mount("http://", HTTPAdapter(pool_connections=4, pool_maxsize=4))
    session.mount("https://", HTTPAdapter(pool_connections=4, pool_maxsize=4))
    return session


def run(
    settings: Settings,
    store: StateStore,
    session: requests.Session,
    medium: MediumClient,
    logger: Callable[[str], None] = log,
) -> RunSummary:
    prior = store.load()
    logger(f"state_loaded records={len(prior)}")

    candidates = fetch_index(session, settings)
    logger(f"index_fetched entries={len(candidates)}")

    work = reconcile(prior, candidates)
    logger(f"reconciled to_publish={len(work)}")

    published: List[PublishedRecord] = []
    if work:
        try:
            user_id = medium.get_user_id()
        except requests.RequestException as exc:
            raise MediumApiError(f"cannot look up medium user: {exc}") from exc
        logger(f"medium_user id={user_id}")

        publisher = Publisher(session, medium, settings.request_timeout, logger)
        results = [publisher.publish(entry) for entry in work]
        published = [r for r in results if r is not None]

    updated = list(prior) + published
    store.save(updated)
    logger(f"state_saved records={len(updated)}")

    return RunSummary(prior=len(prior), candidates=len(candidates), work=len(work), published=len(published))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="medium-auto-post",
        description="Post website articles that are not on medium.com yet as Medium drafts.",
    )
    parser.add_argument(
        "-e",
        "--envfilepath",
        default="",
        help="Path to an environment file. If empty, only process environment variables are used.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(args.envfilepath)
        problems = validate_settings(settings)
        if problems:
            raise ConfigError("; ".join(problems))
        session = create_session(settings)
        store = build_state_store(settings, session)
        log(f"storage backend={type(store).__name__}")
        summary = run(settings, store, session, MediumClient(session, settings))
    except AutoPostError as exc:
        log(f"fatal error={exc}")
        return 1

    log(
        f"run_complete candidates={summary.candidates} to_publish={summary.work} "
        f"published={summary.published} failed={summary.failed}"
    )
    print("Done.")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
