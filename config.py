from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

from errors import ConfigError

STORAGE_FILE = "FILE"
STORAGE_GITHUB = "GITHUB"

DEFAULT_MEDIUM_ENDPOINT_PREFIX = "https://api.medium.com/v1"
DEFAULT_GITHUB_API_URL = "https://api.github.com"

STATUS_FILE_PATH = "status.json"
STATUS_BRANCH = "main"


@dataclass(frozen=True)
class Settings:
    medium_endpoint_prefix: str = DEFAULT_MEDIUM_ENDPOINT_PREFIX
    medium_bearer_token: str = ""
    website_json_index_url: str = ""
    github_personal_token: str = ""
    github_status_repo_owner: str = ""
    github_status_repo: str = ""
    github_api_url: str = DEFAULT_GITHUB_API_URL
    storage_type: str = STORAGE_GITHUB  # FILE | GITHUB
    storage_file_path: str = ""
    request_timeout: int = 30
    user_agent: str = "MediumAutoPost/1.0"

    @property
    def uses_file_storage(self) -> bool:
        return self.storage_type == STORAGE_FILE and bool(self.storage_file_path)


def read_environment(env_file: str = "", environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Merge an optional dotenv file under the process environment.

    Values already present in the environment win, so a dotenv file only
    fills gaps. ``os.environ`` itself is never modified.
    """
    merged: Dict[str, str] = {}
    if env_file:
        if not os.path.isfile(env_file):
            raise ConfigError(f"env file not found: {env_file}")
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                merged[key] = value
    merged.update(os.environ if environ is None else environ)
    return merged


def settings_from_env(env: Mapping[str, str]) -> Settings:
    raw_timeout = env.get("REQUEST_TIMEOUT", "").strip() or "30"
    try:
        timeout = int(raw_timeout)
    except ValueError as exc:
        raise ConfigError(f"REQUEST_TIMEOUT must be an integer, got {raw_timeout!r}") from exc

    storage = STORAGE_FILE if env.get("STORAGE_TYPE", "") == STORAGE_FILE else STORAGE_GITHUB

    return Settings(
        medium_endpoint_prefix=(env.get("MEDIUM_ENDPOINT_PREFIX", "") or DEFAULT_MEDIUM_ENDPOINT_PREFIX).rstrip("/"),
        medium_bearer_token=env.get("MEDIUM_BEARER_TOKEN", ""),
        website_json_index_url=env.get("WEBSITE_JSON_INDEX_URL", ""),
        github_personal_token=env.get("GITHUB_PERSONAL_TOKEN", ""),
        github_status_repo_owner=env.get("GITHUB_STATUS_REPO_OWNER", ""),
        github_status_repo=env.get("GITHUB_STATUS_REPO", ""),
        github_api_url=(env.get("GITHUB_API_URL", "") or DEFAULT_GITHUB_API_URL).rstrip("/"),
        storage_type=storage,
        storage_file_path=env.get("STORAGE_FILE_PATH", ""),
        request_timeout=timeout,
        user_agent=env.get("USER_AGENT", "") or "MediumAutoPost/1.0",
    )


def load_settings(env_file: str = "", environ: Optional[Mapping[str, str]] = None) -> Settings:
    return settings_from_env(read_environment(env_file, environ))


def validate_settings(settings: Settings) -> List[str]:
    problems: List[str] = []
    if not settings.website_json_index_url:
        problems.append("WEBSITE_JSON_INDEX_URL is not set")
    if not settings.medium_bearer_token:
        problems.append("MEDIUM_BEARER_TOKEN is not set")
    if not settings.uses_file_storage:
        if not settings.github_personal_token:
            problems.append("GITHUB_PERSONAL_TOKEN is not set")
        if not settings.github_status_repo_owner:
            problems.append("GITHUB_STATUS_REPO_OWNER is not set")
        if not settings.github_status_repo:
            problems.append("GITHUB_STATUS_REPO is not set")
    return problems
