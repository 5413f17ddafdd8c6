from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from contentport.config import (
    ConfigurationError,
    MissingConfigurationError,
    load_content_types,
    parse_content_types,
)
from contentport.config.content_types import get_content_types_config
from contentport.domain.model import ContentKind

CONTENT_TYPES_TOML = """
[types.article]
autopublish = true

[[types.article.fields]]
name = "image"
type = "attachment"

[[types.article.fields]]
name = "_authors"
type = "relationship"
with_type = "author"

[[types.article.fields]]
name = "gallery"
type = "array"
fields = [{ name = "photo", type = "attachment" }]

[types.settings]
singleton = true
import = false

[types.default-page]
kind = "page"

[widgets.image]
fields = [{ name = "_image", type = "attachment" }]
"""


def test_load_content_types_builds_definitions(tmp_path: Path) -> None:
    path = tmp_path / "content-types.toml"
    path.write_text(CONTENT_TYPES_TOML)

    config = load_content_types(path)

    assert config.names() == ("article", "settings", "default-page")
    article, settings, page = config.definitions
    assert article.options.autopublish
    assert article.kind == ContentKind.PIECE
    assert [field.name for field in article.schema] == ["image", "_authors", "gallery"]
    assert article.schema[1].with_type == "author"
    assert article.schema[2].fields[0].type == "attachment"
    assert settings.options.singleton
    assert not settings.options.import_enabled
    assert page.is_page
    assert config.widget_schemas["image"][0].name == "_image"


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Invalid content type configuration"):
        parse_content_types({"types": {"article": {"kind": "piece", "colour": "red"}}})


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        parse_content_types({"types": {"article": {"kind": "folder"}}})


def test_missing_file_raises_missing_configuration(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigurationError):
        load_content_types(tmp_path / "absent.toml")


def test_invalid_toml_raises_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "content-types.toml"
    path.write_text("[types.article\n")

    with pytest.raises(ConfigurationError, match="not valid TOML"):
        load_content_types(path)


def test_content_types_path_comes_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "content-types.toml"
    path.write_text(CONTENT_TYPES_TOML)
    monkeypatch.setenv("CONTENTPORT_CONTENT_TYPES", str(path))

    assert get_content_types_config().names() == ("article", "settings", "default-page")


def test_content_types_env_is_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONTENTPORT_CONTENT_TYPES", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_content_types_config()
