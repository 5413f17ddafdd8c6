"""Extract related-entity references from a document using its type schema."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from contentport.domain.model import FieldType, logical_document_id

if TYPE_CHECKING:
    from contentport.domain.content_types import ContentTypeRegistry
    from contentport.domain.model import DocumentRecord, Schema

log = logging.getLogger(__name__)

_ID_KEYS = ("_id", "id", "attachment_id", "document_id")


@dataclass(frozen=True, slots=True)
class RelatedRef:
    """One reference found while walking a document.

    ``type`` is the related content type for relationships and ``None`` for
    attachments.
    """

    id: str
    type: str | None = None


@dataclass(slots=True)
class RelationshipResolver:
    content_types: ContentTypeRegistry

    def related(self, document: DocumentRecord, *, kind: FieldType) -> list[RelatedRef]:
        """Return refs of ``kind`` (attachment or relationship) in first-seen order.

        Raises ``LookupError`` when the document's type is not registered.
        """

        if kind not in (FieldType.ATTACHMENT, FieldType.RELATIONSHIP):
            raise ValueError(f"Unsupported relation kind: {kind}")
        handler = self.content_types.resolve(document.type)
        if handler is None:
            raise LookupError(f"No schema found for content type: {document.type}")

        found: dict[str, RelatedRef] = {}
        self._walk(document.fields, handler.schema, kind, found)
        return list(found.values())

    def related_attachment_ids(self, document: DocumentRecord) -> list[str]:
        return [ref.id for ref in self.related(document, kind=FieldType.ATTACHMENT)]

    def _walk(
        self,
        values: Mapping[str, Any],
        schema: Schema,
        kind: FieldType,
        found: dict[str, RelatedRef],
    ) -> None:
        for schema_field in schema:
            value = values.get(schema_field.name)
            if value is None:
                continue

            if schema_field.type == kind == FieldType.ATTACHMENT:
                self._collect(value, None, found)
            elif schema_field.type == kind == FieldType.RELATIONSHIP:
                for item in _as_items(value):
                    self._collect(item, schema_field.with_type, found)
            elif schema_field.type == FieldType.ARRAY:
                for item in _as_items(value):
                    if isinstance(item, Mapping):
                        self._walk(cast(Mapping[str, Any], item), schema_field.fields, kind, found)
            elif schema_field.type == FieldType.OBJECT and isinstance(value, Mapping):
                self._walk(cast(Mapping[str, Any], value), schema_field.fields, kind, found)
            elif schema_field.type == FieldType.AREA and isinstance(value, Mapping):
                self._walk_area(
                    cast(Mapping[str, Any], value),
                    schema_field.widgets,
                    kind,
                    found,
                )

    def _walk_area(
        self,
        area: Mapping[str, Any],
        allowed_widgets: tuple[str, ...],
        kind: FieldType,
        found: dict[str, RelatedRef],
    ) -> None:
        """Walk the widgets of an area; an empty ``allowed_widgets`` accepts every type."""

        for widget in _as_items(area.get("items")):
            if not isinstance(widget, Mapping):
                continue
            widget_values = cast(Mapping[str, Any], widget)
            widget_type = widget_values.get("type")
            if not isinstance(widget_type, str):
                continue
            if allowed_widgets and widget_type not in allowed_widgets:
                log.debug("Widget %s is not allowed in this area, skipping", widget_type)
                continue
            schema = self.content_types.widget_schema(widget_type)
            if not schema:
                log.debug("No schema for widget %s, skipping", widget_type)
                continue
            self._walk(widget_values, schema, kind, found)

    @staticmethod
    def _collect(value: object, related_type: str | None, found: dict[str, RelatedRef]) -> None:
        ref_id = _extract_id(value)
        if ref_id is None:
            return
        if related_type is not None:
            ref_id = logical_document_id(ref_id)
        found.setdefault(ref_id, RelatedRef(id=ref_id, type=related_type))


def _as_items(value: object) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return cast(Sequence[object], value)
    return ()


def _extract_id(value: object) -> str | None:
    if isinstance(value, str):
        return value or None
    if isinstance(value, Mapping):
        mapping = cast(Mapping[str, object], value)
        for key in _ID_KEYS:
            candidate = mapping.get(key)
            if isinstance(candidate, str) and candidate:
                return candidate
    return None
