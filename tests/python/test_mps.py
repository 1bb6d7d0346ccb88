"""
Tests for the MPS format writer.

This module tests:
- Section order and optional RANGES
- ROWS senses, COLUMNS transposition and integer markers
- RHS, RANGES and BOUNDS encoding
- Fixed / free format selection
- Failure on maximization and out-of-range indices
"""

import math

import pytest

from mpexport.core.model import Constraint, Model, Objective, ObjectiveSense, Variable
from mpexport.export.context import ExportOptions, setup
from mpexport.export.exporter import ModelExporter
from mpexport.export.mps import MpsFormatWriter
from mpexport.export.result import ExportError, ExportStatus


def export_mps(model, **options):
    result = ModelExporter(model).export_as_mps_format(options=ExportOptions(**options))
    assert result.is_ok, result.message
    return result


def tokens(lines):
    return [line.split() for line in lines]


# =============================================================================
# Test sections
# =============================================================================

class TestMpsSections:
    """Tests for the MPS sections of the mixed model."""

    def test_section_order(self, mixed_model):
        lines = export_mps(mixed_model).text.splitlines()
        headers = [line.split()[0] for line in lines if line[:1] not in (" ", "*")]
        assert headers == ["NAME", "ROWS", "COLUMNS", "RHS", "RANGES", "BOUNDS", "ENDATA"]

    def test_name(self, mixed_model):
        lines = export_mps(mixed_model).text.splitlines()
        assert "NAME          mixed" in lines

    def test_comment_header(self, mixed_model):
        text = export_mps(mixed_model).text
        assert text.startswith("* Generated by mpexport\n")
        assert "*   Format           : MPS (free)" in text

    def test_rows(self, mixed_model, section_lines):
        rows = tokens(section_lines(export_mps(mixed_model).text, "ROWS"))
        assert rows == [
            ["N", "COST"],
            ["G", "c1"],
            ["L", "r"],
            ["E", "e"],
            ["L", "cap"],
        ]

    def test_columns(self, mixed_model, section_lines):
        columns = tokens(section_lines(export_mps(mixed_model).text, "COLUMNS"))
        assert columns == [
            ["x", "COST", "1", "c1", "1"],
            ["x", "r", "1", "e", "1"],
            ["w", "e", "2"],
            ["MARKER", "'MARKER'", "'INTORG'"],
            ["y", "COST", "2", "c1", "1"],
            ["y", "cap", "3"],
            ["z", "COST", "-3", "r", "-1"],
            ["z", "cap", "4"],
            ["MARKER", "'MARKER'", "'INTEND'"],
        ]

    def test_rhs(self, mixed_model, section_lines):
        rhs = tokens(section_lines(export_mps(mixed_model).text, "RHS"))
        assert rhs == [
            ["RHS", "c1", "2", "r", "5"],
            ["RHS", "e", "4", "cap", "10"],
        ]

    def test_ranges(self, mixed_model, section_lines):
        ranges = tokens(section_lines(export_mps(mixed_model).text, "RANGES"))
        assert ranges == [["RANGE", "r", "3"]]

    def test_bounds(self, mixed_model, section_lines):
        bounds = tokens(section_lines(export_mps(mixed_model).text, "BOUNDS"))
        assert bounds == [
            ["BV", "BOUND", "y"],
            ["UP", "BOUND", "z", "10"],
            ["FR", "BOUND", "w"],
        ]

    def test_ends_with_endata(self, mixed_model):
        assert export_mps(mixed_model).text.endswith("ENDATA\n")

    def test_at_most_two_pairs_per_line(self, section_lines):
        model = Model(
            variables=[Variable(f"x{j}") for j in range(3)],
            constraints=[
                Constraint(f"c{i}", 1, 1 + i, {j: float(i + j + 1) for j in range(3)})
                for i in range(7)
            ],
            objective=Objective({0: 1.0, 1: 1.0, 2: 1.0}, offset=2.0),
        )
        text = export_mps(model).text
        for section in ("COLUMNS", "RHS", "RANGES"):
            for fields in tokens(section_lines(text, section)):
                # head name followed by at most two (name, value) pairs
                assert len(fields) <= 5


# =============================================================================
# Test edge cases
# =============================================================================

class TestMpsEdgeCases:
    """Edge cases of the MPS writer."""

    def test_range_row(self, section_lines):
        model = Model(
            variables=[Variable("x")],
            constraints=[Constraint("c", 2, 5, {0: 1.0})],
            objective=Objective({0: 1.0}),
        )
        text = export_mps(model).text
        assert tokens(section_lines(text, "ROWS"))[1] == ["L", "c"]
        assert tokens(section_lines(text, "RHS")) == [["RHS", "c", "5"]]
        assert tokens(section_lines(text, "RANGES")) == [["RANGE", "c", "3"]]

    def test_no_ranges_section(self):
        model = Model(
            variables=[Variable("x")],
            constraints=[Constraint("c", 2, math.inf, {0: 1.0})],
        )
        assert "RANGES" not in export_mps(model).text.splitlines()

    def test_free_row(self, section_lines):
        model = Model(
            variables=[Variable("x")],
            constraints=[Constraint("f", -math.inf, math.inf, {0: 1.0})],
        )
        text = export_mps(model).text
        assert tokens(section_lines(text, "ROWS")) == [["N", "COST"], ["N", "f"]]
        assert section_lines(text, "RHS") == []

    def test_objective_offset(self, section_lines):
        model = Model(
            variables=[Variable("x")],
            constraints=[Constraint("c", 1, math.inf, {0: 1.0})],
            objective=Objective({0: 1.0}, offset=7.5),
        )
        rhs = tokens(section_lines(export_mps(model).text, "RHS"))
        assert rhs == [["RHS", "COST", "-7.5", "c", "1"]]

    def test_constraint_named_cost(self, section_lines):
        model = Model(
            variables=[Variable("x")],
            constraints=[Constraint("COST", 1, math.inf, {0: 1.0})],
        )
        result = export_mps(model)
        assert result.constraint_names == ["COST_1"]
        assert tokens(section_lines(result.text, "ROWS")) == [["N", "COST"], ["G", "COST_1"]]

    def test_empty_column_kept(self, section_lines):
        model = Model(
            variables=[Variable("x"), Variable("u", 0, 3)],
            constraints=[Constraint("c", 1, math.inf, {0: 1.0})],
        )
        text = export_mps(model).text
        assert ["u", "COST", "0"] in tokens(section_lines(text, "COLUMNS"))
        assert ["UP", "BOUND", "u", "3"] in tokens(section_lines(text, "BOUNDS"))

    def test_zero_coefficients_dropped(self, section_lines):
        model = Model(
            variables=[Variable("x")],
            constraints=[
                Constraint("a", 1, math.inf, {0: 0.0}),
                Constraint("b", 1, math.inf, {0: 2.0}),
            ],
            objective=Objective({0: 1.0}),
        )
        columns = tokens(section_lines(export_mps(model).text, "COLUMNS"))
        assert columns == [["x", "COST", "1", "b", "2"]]

    def test_no_integer_markers_without_integers(self):
        model = Model(
            variables=[Variable("x")],
            constraints=[Constraint("c", 1, math.inf, {0: 1.0})],
        )
        assert "INTORG" not in export_mps(model).text

    @pytest.mark.parametrize("variable, expected", [
        (Variable("v", -math.inf, math.inf), [["FR", "BOUND", "v"]]),
        (Variable("v", 2, 2), [["FX", "BOUND", "v", "2"]]),
        (Variable("v", 0, 1, True), [["BV", "BOUND", "v"]]),
        (Variable("v", -math.inf, 4), [["MI", "BOUND", "v"], ["UP", "BOUND", "v", "4"]]),
        (Variable("v", -3, math.inf), [["LO", "BOUND", "v", "-3"]]),
        (Variable("v", 1, 6), [["LO", "BOUND", "v", "1"], ["UP", "BOUND", "v", "6"]]),
        (Variable("v", 0, -2), [["LO", "BOUND", "v", "0"], ["UP", "BOUND", "v", "-2"]]),
        (Variable("v", 0, math.inf, True), [["PL", "BOUND", "v"]]),
        (Variable("v", 2, math.inf, True), [["LO", "BOUND", "v", "2"], ["PL", "BOUND", "v"]]),
        (Variable("v", 0, 5, True), [["UP", "BOUND", "v", "5"]]),
        (Variable("v"), []),
    ])
    def test_bound_types(self, variable, expected, section_lines):
        model = Model(variables=[variable], objective=Objective({0: 1.0}))
        assert tokens(section_lines(export_mps(model).text, "BOUNDS")) == expected

    def test_model_name_stays_in_comment(self):
        model = Model(name="a\nROWS", variables=[Variable("x")], objective=Objective({0: 1.0}))
        lines = export_mps(model).text.splitlines()
        name_line = lines.index("NAME          a_ROWS")
        assert all(line.startswith("*") for line in lines[:name_line])
        assert lines.count("ROWS") == 1

    def test_brackets_kept(self):
        model = Model(variables=[Variable("x[1]")], objective=Objective({0: 1.0}))
        assert export_mps(model).variable_names == ["x[1]"]

    def test_deterministic(self, mixed_model):
        assert export_mps(mixed_model).text == export_mps(mixed_model).text


# =============================================================================
# Test fixed / free selection
# =============================================================================

class TestMpsFormatSelection:
    """Tests for the fixed / free MPS decision."""

    def test_fixed_when_names_fit(self, mixed_model):
        result = export_mps(mixed_model, fixed_format=True)
        assert result.use_fixed_mps_format
        assert result.format_name == "MPS (fixed)"
        assert "*   Format           : MPS (fixed)" in result.text

    def test_free_unless_requested(self, mixed_model):
        result = export_mps(mixed_model)
        assert not result.use_fixed_mps_format

    def test_nine_character_name_forces_free(self):
        model = Model(
            variables=[Variable("abcdefghi")],
            constraints=[Constraint("c", 1, math.inf, {0: 1.0})],
        )
        result = export_mps(model, fixed_format=True)
        assert result.is_ok
        assert not result.use_fixed_mps_format
        assert result.format_name == "MPS (free)"

    def test_eight_character_name_allows_fixed(self):
        model = Model(
            variables=[Variable("abcdefgh")],
            constraints=[Constraint("c", 1, math.inf, {0: 1.0})],
        )
        assert export_mps(model, fixed_format=True).use_fixed_mps_format

    def test_obfuscated_fixed(self, mixed_model):
        result = export_mps(mixed_model, fixed_format=True, obfuscate=True)
        assert result.use_fixed_mps_format
        assert result.variable_names == ["V1", "V2", "V3", "V4"]
        assert result.constraint_names == ["C1", "C2", "C3", "C4"]

    def test_fixed_column_positions(self, mixed_model, section_lines):
        text = export_mps(mixed_model, fixed_format=True).text
        first = section_lines(text, "COLUMNS")[0]
        assert first[4:12].strip() == "x"
        assert first[14:22].strip() == "COST"
        assert first[24:36].strip() == "1"
        assert first[39:47].strip() == "c1"

    def test_fixed_marker_positions(self, mixed_model, section_lines):
        text = export_mps(mixed_model, fixed_format=True).text
        marker = [line for line in section_lines(text, "COLUMNS") if "INTORG" in line][0]
        assert marker[4:12].strip() == "MARKER"
        assert marker[14:22] == "'MARKER'"
        assert marker[39:47] == "'INTORG'"


# =============================================================================
# Test failures
# =============================================================================

class TestMpsFailures:
    """Failure handling of the MPS export."""

    def test_maximization_rejected(self, maximize_model):
        result = ModelExporter(maximize_model).export_as_mps_format()
        assert not result.is_ok
        assert result.status == ExportStatus.MAXIMIZATION_NOT_SUPPORTED
        assert result.text is None

    def test_maximization_rejected_by_writer(self, make_mixed_model):
        ctx = setup(make_mixed_model(ObjectiveSense.MAXIMIZE), ExportOptions())
        with pytest.raises(ExportError) as info:
            MpsFormatWriter(ctx).write()
        assert info.value.status == ExportStatus.MAXIMIZATION_NOT_SUPPORTED

    def test_bad_constraint_index(self, bad_index_model):
        result = ModelExporter(bad_index_model).export_as_mps_format()
        assert result.status == ExportStatus.INVALID_VARIABLE_INDEX
        assert result.text is None

    @pytest.mark.parametrize("lower, upper", [
        (-math.inf, -math.inf),
        (math.inf, math.inf),
        (1.0, math.nan),
    ])
    def test_unwritable_bounds(self, lower, upper):
        model = Model(variables=[Variable("x", lower, upper)], objective=Objective({0: 1.0}))
        result = ModelExporter(model).export_as_mps_format()
        assert result.status == ExportStatus.INVALID_VARIABLE_BOUNDS
        assert result.text is None

    def test_bad_objective_index(self):
        model = Model(variables=[Variable("x")], objective=Objective({1: 1.0}))
        result = ModelExporter(model).export_as_mps_format()
        assert result.status == ExportStatus.INVALID_VARIABLE_INDEX
