import random

import pytest

from layoutopt.cache_lines import analyze_cache_lines, field_cache_info, hot_fields
from layoutopt.layout import compute_layout
from layoutopt.models import Architecture, FieldEntry
from layoutopt.type_table import supported_types


def _fields(*types):
    return [{"name": f"f{i}", "type": t} for i, t in enumerate(types)]


def test_field_at_60_crosses_a_64_byte_line():
    entry = FieldEntry(name="x", type_name="int64", offset=60, size=8, alignment=4)
    info = field_cache_info(entry)

    assert info.start_line == 0
    assert info.end_line == 1
    assert info.crosses_line_boundary


def test_field_ending_on_the_boundary_does_not_cross():
    entry = FieldEntry(name="x", type_name="int64", offset=56, size=8, alignment=8)
    assert not field_cache_info(entry).crosses_line_boundary


def test_split_field_counts_in_both_lines():
    # fifteen int32 then an int64 at offset 60 (386 aligns int64 to 4)
    layout = compute_layout(_fields(*(["int32"] * 15 + ["int64"])), "386")
    report = analyze_cache_lines(layout)

    assert layout.total_size == 68
    assert report.hot_fields == ["f15"]
    assert report.lines_spanned == 2

    first, second = report.lines
    assert (first.start_offset, first.end_offset) == (0, 64)
    assert first.bytes_used == 64
    assert "f15" in first.field_names
    assert (second.start_offset, second.end_offset) == (64, 68)
    assert second.field_names == ["f15"]
    assert second.bytes_used == 4
    assert second.bytes_padding == 0


def test_padding_is_tracked_per_line():
    layout = compute_layout(_fields("bool", "int64", "bool"), "amd64")
    report = analyze_cache_lines(layout)

    (line,) = report.lines
    assert line.bytes_used == 10
    assert line.bytes_padding == 14
    assert line.end_offset == 24
    assert line.field_names == ["f0", "f1", "f2"]


def test_empty_layout_has_no_lines():
    report = analyze_cache_lines(compute_layout([], "amd64"))
    assert report.lines == []
    assert report.fields == []
    assert report.lines_spanned == 0


def test_line_size_must_be_positive():
    with pytest.raises(ValueError):
        analyze_cache_lines(compute_layout([], "amd64"), line_size=0)


def test_hot_fields_filters_crossing_fields():
    layout = compute_layout(_fields("int32", "string", "string", "string", "string"), "amd64")
    report = analyze_cache_lines(layout, line_size=32)
    # strings at 8, 24, 40, 56: the ones at 24 and 56 straddle a 32-byte line
    assert hot_fields(report.fields) == ["f2", "f4"]


@pytest.mark.parametrize("arch", list(Architecture))
def test_lines_cover_the_struct_exactly(arch):
    rng = random.Random(3)
    catalog = supported_types(arch)
    for _ in range(100):
        layout = compute_layout(_fields(*[rng.choice(catalog) for _ in range(rng.randint(0, 20))]), arch)
        report = analyze_cache_lines(layout, line_size=64)

        cursor = 0
        for expected_number, line in enumerate(report.lines):
            assert line.line_number == expected_number
            assert line.start_offset == cursor
            assert line.bytes_used + line.bytes_padding == line.end_offset - line.start_offset
            cursor = line.end_offset
        assert cursor == layout.total_size
        assert sum(line.bytes_used for line in report.lines) == layout.data_bytes
