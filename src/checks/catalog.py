"""Check catalog: the built-in connectivity checks and a YAML loader.

A checks file replaces the built-in list entirely:

    checks:
      - name: backend-health
        group: Backend Service
        base: api            # api | frontend
        path: /health
        expected_status: 200
        tolerate: [404]
        body:
          status: ok
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml

from .models import BodyAssertion, EndpointCheck

logger = logging.getLogger(__name__)

FRONTEND = "Frontend Service"
BACKEND = "Backend Service"
END_TO_END = "End-to-End Flow"


class CatalogError(Exception):
    """Raised when a checks file cannot be turned into EndpointChecks."""


def is_http_url(value: str) -> bool:
    """True for an absolute http(s) URL with a host."""
    parts = urlsplit(value.strip())
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def join_url(base: str, path: str) -> str:
    """Compose an absolute URL from a base URL and a path."""
    if not path.startswith("/"):
        path = "/" + path
    return base.rstrip("/") + path


# ── Built-in checks ──────────────────────────────────────────────────────────


def default_checks(api_url: str, frontend_url: str) -> list[EndpointCheck]:
    """The five checks covering frontend, backend, database and proxy."""
    return [
        EndpointCheck(
            name="frontend-root",
            url=join_url(frontend_url, "/"),
            group=FRONTEND,
        ),
        EndpointCheck(
            name="frontend-health",
            url=join_url(frontend_url, "/health"),
            tolerate_statuses=frozenset({404}),
            group=FRONTEND,
        ),
        EndpointCheck(
            name="backend-health",
            url=join_url(api_url, "/health"),
            body_assertions=(BodyAssertion("status", "ok"),),
            group=BACKEND,
        ),
        EndpointCheck(
            name="backend-db-check",
            url=join_url(api_url, "/api/db-check"),
            body_assertions=(BodyAssertion("database", "connected"),),
            group=BACKEND,
        ),
        EndpointCheck(
            name="e2e-proxy-health",
            url=join_url(frontend_url, "/api/health"),
            tolerate_statuses=frozenset({404}),
            group=END_TO_END,
        ),
    ]


# ── YAML loader ──────────────────────────────────────────────────────────────


def _status_code(value: Any, name: str) -> int:
    # YAML booleans are ints in Python; quoted numbers are strings
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"Check '{name}': status codes must be integers, got {value!r}")
    return value


def _parse_check(raw: Any, bases: dict[str, str], index: int) -> EndpointCheck:
    if not isinstance(raw, dict):
        raise CatalogError(f"Check #{index} must be a mapping, got {type(raw).__name__}")

    name = str(raw.get("name") or "").strip()
    if not name:
        raise CatalogError(f"Check #{index} is missing 'name'")

    if "url" in raw:
        url = str(raw["url"])
        if not is_http_url(url):
            raise CatalogError(f"Check '{name}': not an absolute http(s) URL: {url!r}")
    else:
        base_key = raw.get("base", "api")
        if base_key not in bases:
            raise CatalogError(f"Check '{name}': unknown base '{base_key}' (expected one of {sorted(bases)})")
        url = join_url(bases[base_key], str(raw.get("path", "/")))

    body = raw.get("body") or {}
    if not isinstance(body, dict):
        raise CatalogError(f"Check '{name}': 'body' must be a mapping of field -> expected value")

    expected_status = _status_code(raw.get("expected_status", 200), name)

    tolerate = raw.get("tolerate")
    if tolerate is None:
        tolerate = []
    elif not isinstance(tolerate, list):
        tolerate = [tolerate]
    tolerate_statuses = frozenset(_status_code(s, name) for s in tolerate)

    return EndpointCheck(
        name=name,
        url=url,
        expected_status=expected_status,
        body_assertions=tuple(BodyAssertion(str(k), v) for k, v in body.items()),
        tolerate_statuses=tolerate_statuses,
        group=str(raw.get("group") or ""),
    )


def load_checks(path: Path, *, api_url: str, frontend_url: str) -> list[EndpointCheck]:
    """Parse a YAML checks file. Any malformed entry fails the whole file."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Could not read checks file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Could not parse checks file {path}: {e}") from e

    entries = raw.get("checks") if isinstance(raw, dict) else None
    if not isinstance(entries, list) or not entries:
        raise CatalogError(f"{path}: expected a non-empty 'checks' list")

    bases = {"api": api_url, "frontend": frontend_url}
    checks = [_parse_check(entry, bases, i) for i, entry in enumerate(entries, start=1)]

    names = [c.name for c in checks]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise CatalogError(f"{path}: duplicate check names {duplicates}")

    logger.info("Loaded %d checks from %s", len(checks), path)
    return checks
