"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DocumentMode(StrEnum):
    """Lifecycle variant of a logical document."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ContentKind(StrEnum):
    """Which store manager family handles a content type."""

    PAGE = "page"
    PIECE = "piece"


class FieldType(StrEnum):
    """Schema field types the relationship walker understands.

    Any other field type is treated as an opaque scalar.
    """

    ATTACHMENT = "attachment"
    RELATIONSHIP = "relationship"
    ARRAY = "array"
    OBJECT = "object"
    AREA = "area"


class JobStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
