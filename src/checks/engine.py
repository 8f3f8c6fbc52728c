"""Check engine. Runs declared endpoint checks and builds a Report.

Checks run sequentially in declaration order, one GET each, no retries.
Every failure is captured as a CheckResult; nothing escapes ``run``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

import httpx

from .models import CheckResult, EndpointCheck, Outcome, Report, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000

_MISSING = object()


# ── Body lookup ──────────────────────────────────────────────────────────────


def lookup_field(body: Any, path: str) -> Any:
    """Resolve a dotted ``path`` in a parsed JSON body.

    Returns the module sentinel ``_MISSING`` when any segment is absent.
    List segments may be addressed by index (``items.0.id``).
    """
    current = body
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return _MISSING
            current = current[part]
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def strict_equal(value: Any, expected: Any) -> bool:
    """Equality without Python's bool/int coercion.

    Booleans only match booleans; ints and floats match each other by value;
    anything else must share the exact type.
    """
    if isinstance(value, bool) or isinstance(expected, bool):
        return type(value) is type(expected) and value == expected
    if isinstance(value, (int, float)) and isinstance(expected, (int, float)):
        return value == expected
    return type(value) is type(expected) and value == expected


def _evaluate_body(check: EndpointCheck, resp: httpx.Response) -> str | None:
    """Return a failure detail for the first failing assertion, else None."""
    if not check.body_assertions:
        return None

    try:
        body = resp.json()
    except (ValueError, RecursionError):
        first = check.body_assertions[0].field_path
        return f"field '{first}' unavailable: response body is not valid JSON"

    for assertion in check.body_assertions:
        value = lookup_field(body, assertion.field_path)
        if value is _MISSING:
            return f"field '{assertion.field_path}' missing from response body"
        if not strict_equal(value, assertion.expected):
            return f"field '{assertion.field_path}': expected {assertion.expected!r}, got {value!r}"
    return None


# ── Single check ─────────────────────────────────────────────────────────────


def _classify(check: EndpointCheck, resp: httpx.Response) -> tuple[Outcome, str]:
    status = resp.status_code
    if status in check.tolerate_statuses:
        return Outcome.SKIP, f"tolerated status {status}"
    if status != check.expected_status:
        return Outcome.FAIL, f"expected status {check.expected_status}, got {status}"
    failure = _evaluate_body(check, resp)
    if failure:
        return Outcome.FAIL, failure
    return Outcome.PASS, "ok"


def run_check(
    check: EndpointCheck,
    client: httpx.Client,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> CheckResult:
    """Issue one request for ``check`` and classify the response."""
    t0 = time.perf_counter()
    try:
        resp = client.request(check.method, check.url, timeout=timeout_ms / 1000)
    except httpx.TimeoutException as e:
        return CheckResult(
            check=check, outcome=Outcome.FAIL,
            detail=f"Connection timed out ({timeout_ms}ms): {e}",
            latency_ms=float(timeout_ms),
        )
    except httpx.ConnectError as e:
        latency = (time.perf_counter() - t0) * 1000
        return CheckResult(
            check=check, outcome=Outcome.FAIL,
            detail=f"Connection error: {e}",
            latency_ms=round(latency, 1),
        )
    except httpx.TransportError as e:
        latency = (time.perf_counter() - t0) * 1000
        return CheckResult(
            check=check, outcome=Outcome.FAIL,
            detail=f"Transport error: {type(e).__name__}: {e}",
            latency_ms=round(latency, 1),
        )
    except Exception as e:
        latency = (time.perf_counter() - t0) * 1000
        return CheckResult(
            check=check, outcome=Outcome.FAIL,
            detail=f"Error: {type(e).__name__}: {e}",
            latency_ms=round(latency, 1),
        )

    latency = (time.perf_counter() - t0) * 1000
    try:
        outcome, detail = _classify(check, resp)
    except Exception as e:
        outcome, detail = Outcome.FAIL, f"Error: {type(e).__name__}: {e}"
    return CheckResult(
        check=check, outcome=outcome, detail=detail,
        status_code=resp.status_code, latency_ms=round(latency, 1),
    )


# ── Run ──────────────────────────────────────────────────────────────────────


def _log_result(result: CheckResult) -> None:
    if result.outcome == Outcome.FAIL:
        logger.warning("%s FAIL: %s", result.name, result.detail)
    else:
        logger.info(
            "%s %s: %s (%.1fms)",
            result.name, result.outcome.value.upper(), result.detail, result.latency_ms,
        )


def run(
    checks: Sequence[EndpointCheck],
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    client: httpx.Client | None = None,
) -> Report:
    """Execute every check once, in order, and return the Report.

    A caller-supplied ``client`` is used as-is and left open.
    """
    started = utc_now()
    results: list[CheckResult] = []

    owned = client is None
    if owned:
        client = httpx.Client(timeout=timeout_ms / 1000, follow_redirects=True)
    try:
        for check in checks:
            result = run_check(check, client, timeout_ms)
            _log_result(result)
            results.append(result)
    finally:
        if owned:
            client.close()

    report = Report(results=tuple(results), started_at=started, finished_at=utc_now())
    logger.info("Run finished: %s", report.counts())
    return report
