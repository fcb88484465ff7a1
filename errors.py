from __future__ import annotations


class AutoPostError(Exception):
    pass


class ConfigError(AutoPostError):
    pass


class StateLoadError(AutoPostError):
    pass


class StateSaveError(AutoPostError):
    pass


class CommitStepError(StateSaveError):
    """One step of the remote status commit failed; later steps were not run."""

    STEPS = ("branch", "blob", "tree", "commit", "ref")

    def __init__(self, step: str, cause: object):
        if step not in self.STEPS:
            raise ValueError(f"unknown commit step {step!r}")
        self.step = step
        self.cause = cause
        super().__init__(f"status commit failed at step={step}: {cause}")


class IndexFetchError(AutoPostError):
    pass


# Per-article failures. The publisher catches these, everything else is fatal.
class PublishError(AutoPostError):
    pass


class ArticleFetchError(PublishError):
    pass


class MediumApiError(PublishError):
    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)
