"""Check models: endpoint declarations, results and the run report."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── Declarations ─────────────────────────────────────────────────────────────


class Outcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True)
class BodyAssertion:
    """Expect ``field_path`` (dotted, e.g. ``deps.db``) to equal ``expected``."""

    field_path: str
    expected: Any


@dataclass(frozen=True)
class EndpointCheck:
    """A single declarative GET against an absolute URL."""

    name: str
    url: str
    expected_status: int = 200
    body_assertions: tuple[BodyAssertion, ...] = ()
    tolerate_statuses: frozenset[int] = frozenset()
    group: str = ""
    method: str = "GET"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "group": self.group,
            "method": self.method,
            "url": self.url,
            "expected_status": self.expected_status,
            "tolerate_statuses": sorted(self.tolerate_statuses),
            "body_assertions": [
                {"field": a.field_path, "expected": a.expected} for a in self.body_assertions
            ],
        }


# ── Results ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CheckResult:
    """Outcome of executing one EndpointCheck. Created once, never mutated."""

    check: EndpointCheck
    outcome: Outcome
    detail: str
    status_code: int | None = None
    latency_ms: float = 0.0
    timestamp: str = field(default_factory=utc_now)

    @property
    def name(self) -> str:
        return self.check.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.check.name,
            "group": self.check.group,
            "url": self.check.url,
            "outcome": self.outcome.value,
            "detail": self.detail,
            "status_code": self.status_code,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Report:
    """Ordered results of one harness run, one entry per declared check."""

    results: tuple[CheckResult, ...]
    started_at: str = ""
    finished_at: str = ""

    def __len__(self) -> int:
        return len(self.results)

    def _with(self, outcome: Outcome) -> list[CheckResult]:
        return [r for r in self.results if r.outcome == outcome]

    @property
    def passed(self) -> list[CheckResult]:
        return self._with(Outcome.PASS)

    @property
    def failed(self) -> list[CheckResult]:
        return self._with(Outcome.FAIL)

    @property
    def skipped(self) -> list[CheckResult]:
        return self._with(Outcome.SKIP)

    def counts(self) -> dict[str, int]:
        tally = Counter(r.outcome for r in self.results)
        return {o.value: tally.get(o, 0) for o in Outcome}

    @property
    def ok(self) -> bool:
        """True when no check failed. Skips never count against the run."""
        return not self.failed

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "counts": self.counts(),
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "results": [r.to_dict() for r in self.results],
        }
