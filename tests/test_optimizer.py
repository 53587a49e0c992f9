import random

import pytest

from layoutopt import optimizer
from layoutopt.errors import LayoutInvariantError
from layoutopt.layout import compute_layout
from layoutopt.models import Architecture, FieldSpec
from layoutopt.optimizer import optimize, optimized_order
from layoutopt.type_table import supported_types


def _fields(*types):
    return [{"name": f"f{i}", "type": t} for i, t in enumerate(types)]


def test_reorder_bool_int64_bool():
    result = optimize(
        [
            {"name": "a", "type": "bool"},
            {"name": "b", "type": "int64"},
            {"name": "c", "type": "bool"},
        ],
        "amd64",
    )

    assert result.original.total_size == 24
    assert result.optimized.total_size == 16
    assert result.bytes_saved == 8
    assert result.reordered_fields == ["b", "a", "c"]
    assert [(e.offset, e.size) for e in result.optimized.entries] == [(0, 8), (8, 1), (9, 1), (10, 6)]
    assert not result.already_optimal


def test_sort_is_stable_for_equal_keys():
    order = optimized_order(_fields("int8", "string", "bool", "interface", "uint8"), "amd64")
    assert [f.name for f in order] == ["f1", "f3", "f0", "f2", "f4"]


def test_ties_on_alignment_break_by_size():
    # on 386 int64 and pointer share alignment 4
    order = optimized_order(_fields("pointer", "int64", "slice"), "386")
    assert [f.name for f in order] == ["f2", "f1", "f0"]


def test_already_optimal():
    result = optimize(_fields("int64", "int32", "int16", "bool"), "amd64")
    assert result.bytes_saved == 0
    assert result.already_optimal


def test_empty_struct():
    result = optimize([], "386")
    assert result.bytes_saved == 0
    assert result.reordered_fields == []


def test_unknown_types_are_left_out_of_the_order():
    result = optimize(_fields("bool", "mystery", "int64"), "amd64")
    assert result.reordered_fields == ["f2", "f0"]


@pytest.mark.parametrize("arch", list(Architecture))
def test_optimized_never_larger_and_idempotent(arch):
    rng = random.Random(7)
    catalog = supported_types(arch)
    for _ in range(200):
        fields = _fields(*[rng.choice(catalog) for _ in range(rng.randint(0, 10))])
        result = optimize(fields, arch)

        assert result.optimized.total_size <= compute_layout(fields, arch).total_size
        assert result.bytes_saved == result.original.total_size - result.optimized.total_size

        again = optimize(
            [FieldSpec(name=e.name, type_name=e.type_name) for e in result.optimized.fields],
            arch,
        )
        assert again.bytes_saved == 0
        assert again.optimized.total_size == result.optimized.total_size


def test_growing_reorder_is_an_invariant_error(monkeypatch):
    fields = _fields("int64", "bool", "bool")
    monkeypatch.setattr(
        optimizer, "optimized_order", lambda specs, arch: [specs[1], specs[0], specs[2]]
    )
    with pytest.raises(LayoutInvariantError):
        optimizer.optimize(fields, "amd64")
