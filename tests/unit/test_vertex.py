import numpy as np
import pytest

from rtscene.core.errors import InvalidVertexData
from rtscene.core.vertex import VertexData
from rtscene.core.wire import DecodeContext


@pytest.mark.parametrize(
    "node",
    [
        "0 0 0\n1 0 0\n0 1 0",
        {"_data": "0 0 0\n1 0 0\n0 1 0", "_type": "xyz"},
        [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
        [0, 0, 0, 1, 0, 0, 0, 1, 0],
        ["0 0 0", "1 0 0", "0 1 0"],
        {"_data": [[0, 0, 0], [1, 0, 0], [0, 1, 0]]},
    ],
)
def test_vertex_data_shapes_agree(node) -> None:
    vertices = VertexData.from_node(node)
    assert len(vertices) == 3
    np.testing.assert_allclose(vertices.points, [[0, 0, 0], [1, 0, 0], [0, 1, 0]])
    assert vertices.type == "xyz"


def test_vertex_data_keeps_declared_type() -> None:
    assert VertexData.from_node({"_data": "1 2 3", "_type": "uvw"}).type == "uvw"


def test_absent_vertex_data_is_empty() -> None:
    assert len(VertexData.from_node(None)) == 0
    assert len(VertexData.from_node({"_type": "xyz"})) == 0
    assert len(VertexData.from_node("")) == 0


def test_vertex_storage_is_read_only() -> None:
    vertices = VertexData.from_node("1 2 3")
    with pytest.raises(ValueError):
        vertices.points[0, 0] = 5.0


def test_resolve_is_one_based_and_strict() -> None:
    vertices = VertexData.from_node("0 0 0 1 0 0 0 1 0")
    assert vertices.resolve(1) == (0.0, 0.0, 0.0)
    assert vertices.resolve(3) == (0.0, 1.0, 0.0)
    assert vertices[1] == (1.0, 0.0, 0.0)
    for bad in (0, 4, -1):
        with pytest.raises(InvalidVertexData):
            vertices.resolve(bad)


def test_resolve_error_carries_field_path() -> None:
    vertices = VertexData.from_node("0 0 0")
    with pytest.raises(InvalidVertexData) as info:
        vertices.resolve(2, DecodeContext(path=("Scene", "Objects", "Sphere", "Center")))
    assert info.value.path == "Scene.Objects.Sphere.Center"


@pytest.mark.parametrize(
    "node",
    ["0 0 0 1 0", "0 0 zero", [[0, 0]], 42, {"_data": {"x": 1}}],
)
def test_malformed_vertex_data_raises(node) -> None:
    with pytest.raises(InvalidVertexData):
        VertexData.from_node(node)


@pytest.mark.parametrize("node", ["nan 0 0", "0 inf 0", [[0, 0, "-Infinity"]]])
def test_non_finite_components_are_rejected(node) -> None:
    with pytest.raises(InvalidVertexData):
        VertexData.from_node(node)


def test_non_finite_components_allowed_on_request() -> None:
    vertices = VertexData.from_node("nan 0 0", DecodeContext(allow_nan=True))
    assert np.isnan(vertices.points[0, 0])


def test_oversized_integer_component_is_rejected() -> None:
    with pytest.raises(InvalidVertexData):
        VertexData.from_node([10 ** 400, 0, 0])
