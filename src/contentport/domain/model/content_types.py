"""Content type definitions: per-type options and field schemas."""

from __future__ import annotations

from dataclasses import dataclass

from contentport.domain.model.enums import ContentKind


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaField:
    """One field of a content type or widget schema.

    ``fields`` holds the nested schema of ``array`` and ``object`` fields;
    ``widgets`` lists the widget types an ``area`` accepts.
    """

    name: str
    type: str
    with_type: str | None = None
    fields: tuple[SchemaField, ...] = ()
    widgets: tuple[str, ...] = ()


type Schema = tuple[SchemaField, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class ContentTypeOptions:
    singleton: bool = False
    autopublish: bool = False
    import_enabled: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class ContentTypeDefinition:
    name: str
    kind: ContentKind = ContentKind.PIECE
    options: ContentTypeOptions = ContentTypeOptions()
    schema: Schema = ()

    @property
    def is_page(self) -> bool:
        return self.kind == ContentKind.PAGE
