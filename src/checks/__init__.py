"""Connectivity checks and their runner."""

from .catalog import CatalogError, default_checks, load_checks
from .engine import run, run_check
from .models import BodyAssertion, CheckResult, EndpointCheck, Outcome, Report
