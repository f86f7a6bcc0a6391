from __future__ import annotations

from typing import Any, Protocol

from .models import AnalysisResult


class AnalysisStore(Protocol):
    """Persistence collaborator (users, saved analyses, usage counts).

    The analysis core only writes through it after a run completes; it never
    gates the analysis itself.
    """

    def get_or_create_user(self, identity: str) -> dict[str, Any]: ...

    def save_analysis(self, identity: str, url: str, result: AnalysisResult) -> str | None: ...

    def list_analyses(self, identity: str) -> list[dict[str, Any]]: ...

    def increment_usage(self, identity: str) -> None: ...

    def can_scan(self, identity: str) -> tuple[bool, str | None]: ...


class NullAnalysisStore:
    """Default store: persists nothing and allows every scan."""

    def get_or_create_user(self, identity: str) -> dict[str, Any]:
        return {"identity": identity}

    def save_analysis(self, identity: str, url: str, result: AnalysisResult) -> str | None:
        return None

    def list_analyses(self, identity: str) -> list[dict[str, Any]]:
        return []

    def increment_usage(self, identity: str) -> None:
        return None

    def can_scan(self, identity: str) -> tuple[bool, str | None]:
        return True, None
