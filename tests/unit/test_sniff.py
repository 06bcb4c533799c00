import codecs

import pytest

from rtscene.core.sniff import SceneFormat, detect_format


def test_leading_angle_bracket_is_xml() -> None:
    assert detect_format(b"<Scene></Scene>") is SceneFormat.XML
    assert detect_format(b"  \n\t<?xml version='1.0'?><Scene/>") is SceneFormat.XML


def test_brace_is_json_after_bom_and_whitespace() -> None:
    assert detect_format(codecs.BOM_UTF8 + b"  {\"Scene\": {}}") is SceneFormat.JSON
    assert detect_format(codecs.BOM_UTF8 + b"\n<Scene/>") is SceneFormat.XML


def test_empty_buffers_resolve_to_json() -> None:
    assert detect_format(b"") is SceneFormat.JSON
    assert detect_format(b"   \n ") is SceneFormat.JSON


def test_explicit_hint_overrides_sniffing() -> None:
    assert detect_format(b"<Scene/>", "json") is SceneFormat.JSON
    assert detect_format(b"{}", SceneFormat.XML) is SceneFormat.XML
    assert detect_format(b"<Scene/>", SceneFormat.AUTO) is SceneFormat.XML


def test_unknown_hint_is_rejected() -> None:
    with pytest.raises(ValueError):
        detect_format(b"{}", "yaml")


@pytest.mark.parametrize(
    "name, expected",
    [("scene.json", SceneFormat.JSON), ("SCENE.XML", SceneFormat.XML), ("scene.txt", SceneFormat.AUTO)],
)
def test_format_from_extension(name: str, expected: SceneFormat) -> None:
    assert SceneFormat.from_path(name) is expected


def test_hints_are_case_insensitive() -> None:
    assert detect_format(b"<Scene/>", "JSON") is SceneFormat.JSON
    assert detect_format(b"{}", " Xml ") is SceneFormat.XML
    assert SceneFormat("AUTO") is SceneFormat.AUTO
