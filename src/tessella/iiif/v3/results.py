"""
Result objects returned by validation and compliance checks.

Validators report problems through these values instead of raising, so a
caller can show every problem with a request or document at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ParamResult(Generic[T]):
    """
    Outcome of validating a single request parameter.

    Attributes:
        valid: Whether the parameter is acceptable
        parsed: Structured value when the parameter parsed (None for quality/format)
        error: Human-readable description of the problem when invalid
    """

    valid: bool
    parsed: T | None = None
    error: str | None = None


@dataclass(frozen=True)
class ValidationReport:
    """
    Outcome of validating a whole request or ``info.json`` document.

    Attributes:
        valid: True when ``errors`` is empty
        errors: Every violation found, in check order
        warnings: Non-fatal recommendations
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ComplianceResult:
    """
    Outcome of comparing a service against a compliance level.

    Attributes:
        compliant: True when no required feature is missing
        missing_features: Required features the service does not declare
        missing_formats: Required formats the service does not declare
        missing_qualities: Required qualities the service does not declare
    """

    compliant: bool
    missing_features: list[str] = field(default_factory=list)
    missing_formats: list[str] = field(default_factory=list)
    missing_qualities: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParsedImageUri:
    """Path segments recovered from an image request URI."""

    base_uri: str
    identifier: str
    region: str
    size: str
    rotation: str
    quality: str
    format: str
