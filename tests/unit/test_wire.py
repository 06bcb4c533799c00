from typing import ClassVar, Dict, Optional

import pytest

from rtscene.core.diagnostics import IssueCollector
from rtscene.core.errors import DecodingFailed, ExpectedValue, ExpectedVector
from rtscene.core.scene import Camera, Material
from rtscene.core.wire import DecodeContext, WireField, WireModel, one_or_many, read_fields


class Probe(WireModel):
    label: str = ""
    count: int = 0
    weights: tuple = ()

    WIRE_FIELDS: ClassVar[Dict[str, WireField]] = {
        "label": WireField("Label", "string", required=True),
        "count": WireField("Count", "int", 0),
        "weights": WireField("Weights", "scalars", (), required=True),
    }


def test_context_paths_join_keys_and_items() -> None:
    ctx = DecodeContext().child("Scene").child("Cameras").child("Camera").item(1).child("Gaze")
    assert ctx.path_str == "Scene.Cameras.Camera[1].Gaze"
    assert DecodeContext().path_str == ""


def test_optional_field_falls_back_and_records_notice() -> None:
    collector = IssueCollector()
    ctx = DecodeContext(path=("Camera",), collector=collector)
    values = read_fields(Camera.WIRE_FIELDS, {"NearDistance": "far", "Gaze": "0 0"}, ctx)
    assert values["near_distance"] == 1.0
    assert values["gaze"] == (0.0, 0.0, 0.0)
    assert collector.paths() == ["Camera.Gaze", "Camera.NearDistance"]


def test_absent_optional_field_is_silent() -> None:
    collector = IssueCollector()
    values = read_fields(Camera.WIRE_FIELDS, {}, DecodeContext(collector=collector))
    assert values["image_resolution"] == (512, 512)
    assert values["image_name"] == "image.png"
    assert len(collector) == 0


def test_null_counts_as_absent() -> None:
    values = read_fields(Camera.WIRE_FIELDS, {"NumSamples": None}, DecodeContext())
    assert values["num_samples"] == 1


def test_aliases_are_consulted_in_order() -> None:
    values = read_fields(Material.WIRE_FIELDS, {"AbsorptionIndex": "0.1 0.2 0.3"}, DecodeContext())
    assert values["absorption"] == (0.1, 0.2, 0.3)


def test_required_scalar_raises_expected_value_with_path() -> None:
    with pytest.raises(ExpectedValue) as info:
        Probe.from_node({"Weights": "1 2"}, DecodeContext(path=("Probe",)))
    assert info.value.path == "Probe.Label"


def test_required_list_raises_expected_vector() -> None:
    with pytest.raises(ExpectedVector):
        Probe.from_node({"Label": "a", "Weights": {"x": 1}}, DecodeContext())


def test_required_list_element_raises_expected_value_with_item_path() -> None:
    with pytest.raises(ExpectedValue) as info:
        Probe.from_node({"Label": "a", "Weights": "1 two 3"}, DecodeContext(path=("Probe",)))
    assert info.value.path == "Probe.Weights[1]"


def test_non_finite_values_fall_back_unless_allowed() -> None:
    strict = read_fields(Camera.WIRE_FIELDS, {"NearDistance": "inf"}, DecodeContext())
    lenient = read_fields(Camera.WIRE_FIELDS, {"NearDistance": "inf"}, DecodeContext(allow_nan=True))
    assert strict["near_distance"] == 1.0
    assert lenient["near_distance"] == float("inf")


def test_unknown_field_kind_is_rejected() -> None:
    with pytest.raises(ValueError):
        WireField("X", "matrix")


def test_from_node_wraps_shape_errors() -> None:
    with pytest.raises(DecodingFailed) as info:
        Camera.from_node("not a camera", DecodeContext(path=("Camera",)))
    assert info.value.path == "Camera"


def test_keyword_construction_bypasses_wire_table() -> None:
    camera = Camera(position=(1.0, 2.0, 3.0))
    assert camera.position == (1.0, 2.0, 3.0)
    assert camera.image_resolution == (512, 512)


def _decode_camera(node, ctx: DecodeContext) -> Optional[Camera]:
    return Camera.from_node(node, ctx)


def test_one_or_many_accepts_single_and_list() -> None:
    ctx = DecodeContext(path=("Camera",))
    single = one_or_many(_decode_camera, {"NumSamples": 4}, ctx)
    many = one_or_many(_decode_camera, [{"NumSamples": 1}, {"NumSamples": 2}], ctx)
    assert [c.num_samples for c in single] == [4]
    assert [c.num_samples for c in many] == [1, 2]


def test_one_or_many_treats_unusable_shapes_as_empty() -> None:
    collector = IssueCollector()
    ctx = DecodeContext(path=("Camera",), collector=collector)
    assert one_or_many(_decode_camera, "nonsense", ctx) == []
    assert one_or_many(_decode_camera, ["a", "b"], ctx) == []
    assert one_or_many(_decode_camera, None, ctx) == []
    assert collector.paths() == ["Camera", "Camera"]
