import math

import pytest

from rtscene.core.coerce import to_float, to_int, to_string, to_tokens, to_vec3, to_vertex_ref


@pytest.mark.parametrize("value", [3.5, "3.5", "  3.5  ", "\t3.5\n"])
def test_scalar_number_and_numeric_string_agree(value) -> None:
    assert to_float(value) == 3.5


def test_scalar_rejects_non_numeric_and_booleans() -> None:
    assert to_float("abc") is None
    assert to_float(True) is None
    assert to_float(None) is None
    assert to_float([1.0]) is None


def test_int_accepts_integral_floats_only() -> None:
    assert to_int(6) == 6
    assert to_int(" 6 ") == 6
    assert to_int(6.0) == 6
    assert to_int("6.0") == 6
    assert to_int(6.5) is None
    assert to_int("six") is None
    assert to_int(False) is None


def test_string_stringifies_numbers() -> None:
    assert to_string("out.png") == "out.png"
    assert to_string(3) == "3"
    assert to_string(1.5) == "1.5"
    assert to_string({"a": 1}) is None


@pytest.mark.parametrize("value", [[1, 2, 3], "1 2 3", {"x": 1, "y": 2, "z": 3}, ["1", "2", "3"], " 1\t2  3 "])
def test_vector_representations_agree(value) -> None:
    assert to_vec3(value) == (1.0, 2.0, 3.0)


def test_vector_ignores_extra_components() -> None:
    assert to_vec3("1 2 3 4") == (1.0, 2.0, 3.0)
    assert to_vec3([1, 2, 3, 4]) == (1.0, 2.0, 3.0)


def test_vector_only_splits_on_whitespace() -> None:
    assert to_vec3("1,2,3") is None
    assert to_vec3("1, 2, 3") is None


def test_vector_rejects_short_or_partial_input() -> None:
    assert to_vec3("1 2") is None
    assert to_vec3([1, 2]) is None
    assert to_vec3({"x": 1, "y": 2}) is None
    assert to_vec3(5) is None


def test_tokens_split_strings_and_accept_flat_lists() -> None:
    assert to_tokens("1 2\t3\n4") == ["1", "2", "3", "4"]
    assert to_tokens([1, "2", 3.0]) == [1, "2", 3.0]
    assert to_tokens([[1, 2]]) is None
    assert to_tokens(7) is None


def test_vertex_ref_prefers_lone_integer_as_index() -> None:
    assert to_vertex_ref(6) == (6, None)
    assert to_vertex_ref("6") == (6, None)
    assert to_vertex_ref(" 6 ") == (6, None)
    assert to_vertex_ref("1 2 3") == (None, (1.0, 2.0, 3.0))
    assert to_vertex_ref([0, 0, -1]) == (None, (0.0, 0.0, -1.0))
    assert to_vertex_ref("x") is None
    assert to_vertex_ref(2.5) is None


def test_nan_strings_parse_as_floats() -> None:
    assert math.isnan(to_float("nan"))


def test_integers_beyond_double_range_do_not_coerce() -> None:
    assert to_float(10 ** 400) is None
    assert to_float(-(10 ** 400)) is None
    assert to_vec3([10 ** 400, 0, 0]) is None
