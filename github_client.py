from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import requests

from config import STATUS_BRANCH, Settings


class GithubClient:
    """Just enough of the GitHub contents and git-data API to keep one file
    committed on one branch."""

    def __init__(self, session: requests.Session, settings: Settings, branch: str = STATUS_BRANCH):
        self.session = session
        self.api_url = settings.github_api_url
        self.owner = settings.github_status_repo_owner
        self.repo = settings.github_status_repo
        self.token = settings.github_personal_token
        self.timeout = settings.request_timeout
        self.branch = branch

    def _url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/{path}"

    def _headers(self, accept: str = "application/vnd.github+json") -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _send(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        r = self.session.request(
            method,
            self._url(path),
            headers=self._headers(),
            json=payload,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json()

    def download_file(self, path: str) -> Optional[str]:
        """Raw file text at the branch tip, or None when the branch exists but
        has no such file.

        GitHub answers 404 for a missing repo, branch or token scope as well,
        so a 404 only means "no file" once the branch itself resolves.
        """
        r = self.session.get(
            self._url(f"contents/{path}"),
            headers=self._headers("application/vnd.github.raw"),
            params={"ref": self.branch},
            timeout=self.timeout,
        )
        if r.status_code == 404:
            self.get_branch_tip()
            return None
        r.raise_for_status()
        return r.text

    def get_branch_tip(self) -> Tuple[str, str]:
        data = self._send("GET", f"branches/{self.branch}")
        commit = data["commit"]
        return commit["sha"], commit["commit"]["tree"]["sha"]

    def create_blob(self, content: str) -> str:
        return self._send("POST", "git/blobs", {"content": content, "encoding": "utf-8"})["sha"]

    def create_tree(self, base_tree: str, path: str, blob_sha: str) -> str:
        data = self._send(
            "POST",
            "git/trees",
            {
                "base_tree": base_tree,
                "tree": [{"path": path, "mode": "100644", "type": "blob", "sha": blob_sha}],
            },
        )
        return data["sha"]

    def create_commit(self, message: str, tree_sha: str, parent_sha: str) -> str:
        data = self._send("POST", "git/commits", {"message": message, "tree": tree_sha, "parents": [parent_sha]})
        return data["sha"]

    def update_ref(self, commit_sha: str) -> None:
        self._send("PATCH", f"git/refs/heads/{self.branch}", {"sha": commit_sha, "force": False})
