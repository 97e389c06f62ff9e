"""
Проверяем YAML-загрузчик `xps.config.load_render_config`:

1. Корректный файл разбирается в RenderConfig и переопределяет дефолты.
2. Отсутствие файла дает настройки по умолчанию.
3. Ошибки формата дают ConfigError с понятным текстом.
"""

from pathlib import Path

import pytest

from xps.config import RenderConfig, load_render_config
from xps.context import RenderContext
from xps.errors import ConfigError
from xps.interpolation import DEFAULT_INTERPOLATION_REGEX
from xps.registry import TemplateRegistry
from tests.infrastructure import make_engine, parse_xml


def test_load_valid_yaml(tmp_path: Path) -> None:
    cfg_path = tmp_path / "render.yaml"
    cfg_path.write_text(
        """
interpolation: false
binmode: true
interpolation_regex: '\\$\\{(.*?)\\}'
namespaces:
  h: http://www.w3.org/1999/xhtml
"""
    )

    cfg = load_render_config(cfg_path)

    assert cfg.interpolation is False
    assert cfg.binmode is True
    assert cfg.interpolation_regex == r"\$\{(.*?)\}"
    assert cfg.namespaces == {"h": "http://www.w3.org/1999/xhtml"}
    assert cfg.backend == "lxml"                  # не задано - дефолт


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    cfg = load_render_config(tmp_path / "absent.yaml")

    assert cfg == RenderConfig()
    assert cfg.interpolation is True
    assert cfg.interpolation_regex == DEFAULT_INTERPOLATION_REGEX


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    cfg_path = tmp_path / "render.yaml"
    cfg_path.write_text("")

    assert load_render_config(cfg_path) == RenderConfig()


@pytest.mark.parametrize("body, message", [
    ("- a\n- b\n", "must be a mapping"),
    ("colour: red\n", "Unknown render config keys: colour"),
    ("binmode: 'yes'\n", "'binmode' must be a boolean"),
    ("backend: 3\n", "'backend' must be a string"),
    ("namespaces: [a, b]\n", "'namespaces' must be a mapping"),
    ("interpolation_regex: '{(.*'\n", "Invalid interpolation_regex"),
    ("interpolation_regex: '\\{.*?\\}'\n", "must capture the path in group 1"),
    ("a: [unclosed\n", "Failed to parse render config"),
])
def test_invalid_config(tmp_path: Path, body: str, message: str) -> None:
    cfg_path = tmp_path / "render.yaml"
    cfg_path.write_text(body)

    with pytest.raises(ConfigError, match=message):
        load_render_config(cfg_path)


def test_namespaces_reach_bridge() -> None:
    cfg = RenderConfig.from_dict({"namespaces": {"z": "urn:q"}})
    ctx = RenderContext.create(TemplateRegistry(), config=cfg)

    assert ctx.bridge.namespaces == {"z": "urn:q"}


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ConfigError):
        RenderContext.create(TemplateRegistry(), config=RenderConfig(backend="sablotron"))


def test_custom_regex_used_by_engine() -> None:
    doc = parse_xml('<a url="u"/>')
    engine = make_engine(
        {"a": {"pre": "{@url}=${@url}"}},
        document=doc,
        interpolation_regex=r"\$\{(.*?)\}",
    )

    assert engine.render([doc]) == "{@url}=u"
