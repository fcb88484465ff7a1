from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import List, Protocol, Sequence

import requests

from config import STATUS_FILE_PATH, Settings
from errors import CommitStepError, StateLoadError, StateSaveError
from github_client import GithubClient
from models import PublishedRecord

COMMIT_MESSAGE = "update the medium content"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def dump_records(records: Sequence[PublishedRecord]) -> str:
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def parse_records(raw: str) -> List[PublishedRecord]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StateLoadError(f"status file is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise StateLoadError("status file must contain a JSON array")
    return [PublishedRecord.from_dict(item) for item in data if isinstance(item, dict)]


class StateStore(Protocol):
    def load(self) -> List[PublishedRecord]: ...

    def save(self, records: Sequence[PublishedRecord]) -> None: ...


class FileStateStore:
    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[PublishedRecord]:
        # A missing file is a first run, same as the GitHub store.
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as exc:
            raise StateLoadError(f"cannot read {self.path}: {exc}") from exc
        return parse_records(raw)

    def save(self, records: Sequence[PublishedRecord]) -> None:
        content = dump_records(records)
        parent = os.path.dirname(self.path) or "."
        try:
            os.makedirs(parent, exist_ok=True)
            # Write beside the target and swap, so a crash never leaves a half file.
            fd, tmp_path = tempfile.mkstemp(prefix=".status-", suffix=".tmp", dir=parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_path, self.path)
            except OSError:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as exc:
            raise StateSaveError(f"cannot write {self.path}: {exc}") from exc


class GithubStateStore:
    """Keeps the status file on a branch of a GitHub repository.

    ``save`` is a blob -> tree -> commit -> ref sequence on top of the branch
    tip read at the start of the save. Nothing is rolled back if a later step
    fails; the dangling blob/tree/commit objects are harmless and the branch
    only moves on the final step.
    """

    def __init__(self, client: GithubClient, path: str = STATUS_FILE_PATH):
        self.client = client
        self.path = path

    def load(self) -> List[PublishedRecord]:
        try:
            raw = self.client.download_file(self.path)
        except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
            raise StateLoadError(f"cannot download {self.path}: {exc}") from exc
        if raw is None:
            return []
        return parse_records(raw)

    def save(self, records: Sequence[PublishedRecord]) -> None:
        content = dump_records(records)

        step = "branch"
        try:
            parent_sha, base_tree = self.client.get_branch_tip()
            step = "blob"
            blob_sha = self.client.create_blob(content)
            step = "tree"
            tree_sha = self.client.create_tree(base_tree, self.path, blob_sha)
            step = "commit"
            commit_sha = self.client.create_commit(COMMIT_MESSAGE, tree_sha, parent_sha)
            step = "ref"
            self.client.update_ref(commit_sha)
        except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
            raise CommitStepError(step, exc) from exc


def build_state_store(settings: Settings, session: requests.Session) -> StateStore:
    if settings.uses_file_storage:
        return FileStateStore(settings.storage_file_path)
    return GithubStateStore(GithubClient(session, settings))
