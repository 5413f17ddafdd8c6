"""Content type definitions loaded from a TOML file.

Example::

    [types.article]
    kind = "piece"
    autopublish = false

    [[types.article.fields]]
    name = "image"
    type = "attachment"

    [[types.article.fields]]
    name = "_authors"
    type = "relationship"
    with_type = "author"

    [widgets.image]
    fields = [{ name = "_image", type = "attachment" }]
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from contentport.domain.model import (
    ContentKind,
    ContentTypeDefinition,
    ContentTypeOptions,
    Schema,
    SchemaField,
)

from .env import require_env_path
from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

CONTENT_TYPES_ENV = "CONTENTPORT_CONTENT_TYPES"


class _FieldModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    with_type: str | None = None
    fields: list[_FieldModel] = Field(default_factory=list["_FieldModel"])
    widgets: list[str] = Field(default_factory=list[str])

    def to_domain(self) -> SchemaField:
        return SchemaField(
            name=self.name,
            type=self.type,
            with_type=self.with_type,
            fields=tuple(nested.to_domain() for nested in self.fields),
            widgets=tuple(self.widgets),
        )


class _TypeModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: ContentKind = ContentKind.PIECE
    singleton: bool = False
    autopublish: bool = False
    import_enabled: bool = Field(default=True, alias="import")
    fields: list[_FieldModel] = Field(default_factory=list[_FieldModel])


class _WidgetModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fields: list[_FieldModel] = Field(default_factory=list[_FieldModel])


class _ContentTypesDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    types: dict[str, _TypeModel] = Field(default_factory=dict[str, _TypeModel])
    widgets: dict[str, _WidgetModel] = Field(default_factory=dict[str, _WidgetModel])


@dataclass(frozen=True, slots=True)
class ContentTypesConfig:
    definitions: tuple[ContentTypeDefinition, ...] = ()
    widget_schemas: dict[str, Schema] = field(default_factory=dict[str, Schema])

    def names(self) -> tuple[str, ...]:
        return tuple(definition.name for definition in self.definitions)


def parse_content_types(document: dict[str, Any]) -> ContentTypesConfig:
    """Build content type definitions from an already-parsed TOML document."""

    try:
        parsed = _ContentTypesDocument.model_validate(document)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid content type configuration: {exc}") from exc

    definitions = tuple(
        ContentTypeDefinition(
            name=name,
            kind=entry.kind,
            options=ContentTypeOptions(
                singleton=entry.singleton,
                autopublish=entry.autopublish,
                import_enabled=entry.import_enabled,
            ),
            schema=tuple(schema_field.to_domain() for schema_field in entry.fields),
        )
        for name, entry in parsed.types.items()
    )
    widget_schemas = {
        name: tuple(schema_field.to_domain() for schema_field in widget.fields)
        for name, widget in parsed.widgets.items()
    }
    return ContentTypesConfig(definitions=definitions, widget_schemas=widget_schemas)


def load_content_types(path: Path) -> ContentTypesConfig:
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise MissingConfigurationError(f"Content type file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Content type file {path} is not valid TOML: {exc}") from exc
    return parse_content_types(document)


def get_content_types_config() -> ContentTypesConfig:
    return load_content_types(require_env_path(CONTENT_TYPES_ENV))
