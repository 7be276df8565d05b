"""Test data factories for deterministic test data generation."""

from tests.factories.security_hub import (
    make_client_error,
    make_finding,
    make_findings,
    make_findings_pages,
    make_not_subscribed_error,
)

__all__ = [
    "make_client_error",
    "make_finding",
    "make_findings",
    "make_findings_pages",
    "make_not_subscribed_error",
]
