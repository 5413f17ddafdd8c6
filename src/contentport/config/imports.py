"""Import workflow defaults."""

from __future__ import annotations

from dataclasses import dataclass

from contentport.domain.reconciliation.documents import (
    DEFAULT_PAGE_ANCHOR,
    DEFAULT_PAGE_POSITION,
    PAGE_POSITIONS,
)

from .env import optional_env_var
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ImportConfig:
    """Where newly imported pages are placed in the page tree."""

    page_anchor: str = DEFAULT_PAGE_ANCHOR
    page_position: str = DEFAULT_PAGE_POSITION


def get_import_config() -> ImportConfig:
    anchor = optional_env_var("CONTENTPORT_PAGE_ANCHOR") or DEFAULT_PAGE_ANCHOR
    position = optional_env_var("CONTENTPORT_PAGE_POSITION") or DEFAULT_PAGE_POSITION
    if position not in PAGE_POSITIONS:
        raise ConfigurationError(
            f"CONTENTPORT_PAGE_POSITION must be one of {', '.join(PAGE_POSITIONS)}, "
            f"got {position!r}"
        )
    return ImportConfig(page_anchor=anchor, page_position=position)
