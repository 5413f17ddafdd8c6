"""Capability mapping from content type name to its store manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from contentport.domain.model import ContentTypeDefinition, ContentTypeOptions, Schema
    from contentport.domain.ports import ContentManager, PageManager

type ManagerFactory = Callable[[ContentTypeDefinition], ContentManager | PageManager]


@dataclass(frozen=True, slots=True)
class ContentTypeHandler:
    definition: ContentTypeDefinition
    manager: ContentManager | PageManager

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def options(self) -> ContentTypeOptions:
        return self.definition.options

    @property
    def schema(self) -> Schema:
        return self.definition.schema

    @property
    def is_page(self) -> bool:
        return self.definition.is_page


@dataclass(slots=True)
class ContentTypeRegistry:
    """Resolve handlers by type discriminator; unknown types resolve to ``None``."""

    handlers: dict[str, ContentTypeHandler] = field(default_factory=dict[str, "ContentTypeHandler"])
    widget_schemas: dict[str, Schema] = field(default_factory=dict[str, "Schema"])

    @classmethod
    def build(
        cls,
        definitions: Iterable[ContentTypeDefinition],
        *,
        manager_factory: ManagerFactory,
        widget_schemas: Mapping[str, Schema] | None = None,
    ) -> ContentTypeRegistry:
        registry = cls(widget_schemas=dict(widget_schemas or {}))
        for definition in definitions:
            registry.register(definition, manager_factory(definition))
        return registry

    def register(
        self,
        definition: ContentTypeDefinition,
        manager: ContentManager | PageManager,
    ) -> ContentTypeHandler:
        if definition.name in self.handlers:
            raise ValueError(f"Content type already registered: {definition.name}")
        handler = ContentTypeHandler(definition=definition, manager=manager)
        self.handlers[definition.name] = handler
        return handler

    def resolve(self, type_name: str) -> ContentTypeHandler | None:
        return self.handlers.get(type_name)

    def widget_schema(self, widget_type: str) -> Schema:
        return self.widget_schemas.get(widget_type, ())
