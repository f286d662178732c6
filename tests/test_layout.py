"""Tests for CellLayout, CoordinateMap and LayoutComposer."""

import dataclasses

import numpy as np
import pytest

from heatcanvas.config import DEFAULT_STYLE, HeatmapConfig, LabelConfig, SidePanelConfig
from heatcanvas.errors import ConfigurationError
from heatcanvas.layout.cell_layout import CellLayout, CoordinateMap
from heatcanvas.layout.composer import LayoutComposer
from heatcanvas.layout.geometry import Rect


class TestCellLayout:
    def test_positions(self):
        layout = CellLayout(3, 10.0, offset=5.0)
        assert layout.to_list() == [5.0, 15.0, 25.0]
        assert layout.centers().tolist() == [10.0, 20.0, 30.0]
        assert layout.end == 35.0
        assert layout.total_size == 30.0

    def test_edges(self):
        layout = CellLayout(3, 10.0)
        assert [layout.edge(k) for k in range(4)] == [0.0, 10.0, 20.0, 30.0]

    def test_positions_read_only(self):
        with pytest.raises(ValueError):
            CellLayout(2, 1.0).positions[0] = 3.0


class TestCoordinateMap:
    def test_matrix_rect(self):
        coords = CoordinateMap(rows=CellLayout(3, 10.0, offset=5.0), cols=CellLayout(2, 8.0, offset=1.0))
        assert coords.matrix_rect == Rect(1.0, 5.0, 16.0, 30.0)

    def test_cell_rect(self):
        coords = CoordinateMap(rows=CellLayout(3, 10.0), cols=CellLayout(2, 8.0))
        assert coords.cell_rect(2, 1) == Rect(8.0, 20.0, 8.0, 10.0)

    def test_for_axis(self):
        rows, cols = CellLayout(1, 1.0), CellLayout(1, 2.0)
        coords = CoordinateMap(rows=rows, cols=cols)
        assert coords.for_axis("row") is rows
        assert coords.for_axis("col") is cols


class TestLayoutCompute:
    def test_defaults(self):
        # 3x2 matrix, 20-unit cells, row labels left (0.2), column labels bottom (0.2)
        spec = LayoutComposer(DEFAULT_STYLE).compute(3, 2, {})
        assert spec.matrix_rect == Rect(42.0, 30.0, 40.0, 60.0)
        assert spec.panel_rects["row_labels"] == Rect(30.0, 30.0, 8.0, 60.0)
        assert spec.panel_rects["col_labels"] == Rect(42.0, 94.0, 40.0, 12.0)
        assert spec.total_width == pytest.approx(112.0)
        assert spec.total_height == pytest.approx(136.0)

    def test_side_panels_add_fractions_of_matrix(self):
        spec = LayoutComposer(DEFAULT_STYLE).compute(3, 2, {"right": 0.5, "top": 0.25})
        assert spec.panel_rects["right"] == Rect(86.0, 49.0, 20.0, 60.0)
        assert spec.panel_rects["top"] == Rect(42.0, 30.0, 40.0, 15.0)
        assert spec.total_width == pytest.approx(136.0)
        assert spec.total_height == pytest.approx(155.0)

    def test_labels_between_matrix_and_panels(self):
        config = dataclasses.replace(DEFAULT_STYLE, row_labels=LabelConfig(side="right"))
        spec = LayoutComposer(config).compute(3, 2, {"right": 0.5})
        labels, panel, matrix = spec.panel_rects["row_labels"], spec.panel_rects["right"], spec.matrix_rect
        assert matrix.right < labels.x < panel.x

    def test_hidden_labels_take_no_space(self):
        config = dataclasses.replace(
            DEFAULT_STYLE,
            row_labels=LabelConfig(side="left", visible=False),
            col_labels=LabelConfig(side="bottom", visible=False),
        )
        spec = LayoutComposer(config).compute(3, 2, {})
        assert "row_labels" not in spec.panel_rects
        assert spec.total_width == pytest.approx(100.0)

    def test_title_band(self):
        config = dataclasses.replace(DEFAULT_STYLE, title="T", title_size=10.0)
        spec = LayoutComposer(config).compute(3, 2, {})
        assert spec.title_rect.y == 30.0
        assert spec.title_rect.height == 20.0
        assert spec.matrix_rect.y == 54.0

    def test_panels_never_overlap(self):
        spec = LayoutComposer(DEFAULT_STYLE).compute(
            5, 4, {"left": 0.3, "right": 0.3, "top": 0.3, "bottom": 0.3}
        )
        rects = [spec.matrix_rect, *spec.panel_rects.values()]
        for i, a in enumerate(rects):
            for b in rects[i + 1:]:
                assert not a.overlaps(b)
        canvas = Rect(0, 0, spec.total_width, spec.total_height)
        assert all(canvas.contains_rect(r) for r in rects)

    def test_fixed_canvas_width(self):
        config = dataclasses.replace(DEFAULT_STYLE, canvas_width=200.0)
        spec = LayoutComposer(config).compute(3, 2, {})
        assert spec.total_width == pytest.approx(200.0)
        assert spec.matrix_rect.width == pytest.approx(136.0 / 1.2)
        assert spec.coords.cols.cell_size == pytest.approx(136.0 / 1.2 / 2)

    def test_over_budget_raises(self):
        config = dataclasses.replace(DEFAULT_STYLE, canvas_width=50.0)
        with pytest.raises(ConfigurationError, match="exceed the canvas width"):
            LayoutComposer(config).compute(3, 2, {})

    def test_over_budget_height_raises(self):
        config = dataclasses.replace(DEFAULT_STYLE, canvas_height=100.0, margin=40.0)
        with pytest.raises(ConfigurationError, match="canvas height"):
            LayoutComposer(config).compute(30, 2, {"top": 1.0})

    def test_to_dict(self):
        d = LayoutComposer(DEFAULT_STYLE).compute(3, 2, {}).to_dict()
        assert d["matrix"] == {"x": 42.0, "y": 30.0, "width": 40.0, "height": 60.0}
        assert d["rowPositions"] == [30.0, 50.0, 70.0]
        assert d["colCellSize"] == 20.0
        assert "row_labels" in d["panels"]


class TestComposeValidation:
    def test_negative_margin_raises(self):
        config = dataclasses.replace(DEFAULT_STYLE, margin=-1.0)
        with pytest.raises(ConfigurationError, match="margin"):
            LayoutComposer.compose(np.ones((2, 2)), config)

    def test_two_panels_same_side_raise(self):
        config = dataclasses.replace(
            DEFAULT_STYLE,
            panels=(SidePanelConfig("right", [1, 2]), SidePanelConfig("right", [3, 4])),
        )
        with pytest.raises(ConfigurationError, match="right"):
            LayoutComposer.compose(np.ones((2, 2)), config)

    def test_negative_panel_size_raises(self):
        config = dataclasses.replace(DEFAULT_STYLE, panels=(SidePanelConfig("top", [1, 2], size=-0.1),))
        with pytest.raises(ConfigurationError):
            LayoutComposer.compose(np.ones((2, 2)), config)

    def test_default_config(self):
        canvas = LayoutComposer.compose(np.ones((2, 2)))
        assert "matrix" in canvas
        assert isinstance(DEFAULT_STYLE, HeatmapConfig)
