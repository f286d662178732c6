"""End-to-end tests through Heatmap and render()."""

import json

import numpy as np
import pandas as pd
import pytest

import heatcanvas as hc
from heatcanvas.canvas import TextOp
from heatcanvas.errors import ConfigurationError


PERM = [5, 3, 0, 1, 4, 2]


class TestOrderInvariants:
    def test_cell_colors_follow_row_order(self, random_matrix_df):
        base = hc.render(random_matrix_df).cell_colors
        shown = hc.render(random_matrix_df, order_rows=PERM).cell_colors
        for i, original in enumerate(PERM):
            assert shown[i] == base[original]

    def test_cell_colors_follow_col_order(self, random_matrix_df):
        base = np.array(hc.render(random_matrix_df).cell_colors, dtype=object)
        perm = [4, 0, 3, 1, 2]
        shown = np.array(hc.Heatmap(random_matrix_df).order_cols(perm).render().cell_colors, dtype=object)
        assert (shown == base[:, perm]).all()

    def test_side_series_follows_row_order(self, random_matrix_df):
        series = [10.0, 20.0, 30.0, 40.0, 50.0, 60.0]
        canvas = (
            hc.Heatmap(random_matrix_df)
            .order_rows(PERM)
            .attach("right", series, "bar")
            .render()
        )
        values = canvas.panel("right").data["values"]
        assert values == [series[p] for p in PERM]

    def test_labels_follow_order_and_coordinates(self, random_matrix_df):
        canvas = hc.Heatmap(random_matrix_df).order_rows(PERM).render()
        labels = canvas.panel("row_labels").data
        assert labels["labels"] == [f"gene_{p}" for p in PERM]
        assert labels["positions"] == canvas.coordinates.rows.centers().tolist()

    def test_box_stats_follow_col_order(self, small_matrix_df):
        canvas = (
            hc.Heatmap(small_matrix_df)
            .order_cols([2, 0, 1])
            .attach("top", [[1, 2, 3], [4, 5, 6], [7, 8, 9]], "box")
            .render()
        )
        stats = canvas.panel("top").data["stats"]
        assert [s["median"] for s in stats] == [8.0, 2.0, 5.0]

    def test_mean_order_of_missing_matrix(self, missing_matrix):
        canvas = hc.render(missing_matrix, order_rows="mean")
        assert canvas.row_order.permutation.tolist() == [0, 1, 2]

    def test_descending_mean_order(self, missing_matrix):
        canvas = hc.Heatmap(missing_matrix).order_rows("mean", direction="descending").render()
        assert canvas.row_order.permutation.tolist() == [2, 1, 0]

    def test_order_is_repeatable(self, random_matrix_df):
        first = hc.render(random_matrix_df, order_rows="median", order_cols="sum")
        second = hc.render(random_matrix_df, order_rows="median", order_cols="sum")
        assert first.to_dict() == second.to_dict()


class TestMissingValues:
    def test_domain_and_missing_color(self, missing_matrix):
        canvas = hc.render(missing_matrix)
        assert canvas.palette_domain == (1.0, 9.0)
        assert canvas.cell_colors[0][2] == "#c8c8c8"
        assert canvas.panel("matrix").data["values"][0][2] is None

    def test_all_none_dataframe_column(self):
        df = pd.DataFrame({"a": [1.0, 2.0], "b": [None, None]})
        canvas = hc.render(df)
        assert canvas.palette_domain == (1.0, 2.0)
        assert canvas.cell_colors[0][1] == "#c8c8c8"
        with pytest.raises(hc.DataError):
            hc.render(df, order_cols={"statistic": "mean", "ignore_missing": False})


class TestCellText:
    def test_wrong_shape_raises(self):
        matrix = np.zeros((5, 9))
        text = [["x"] * 8 for _ in range(5)]
        with pytest.raises(ConfigurationError, match="5x9"):
            hc.render(matrix, X_text=text)

    def test_text_follows_order(self, small_matrix_df):
        text = [[f"{i}{j}" for j in range(3)] for i in range(4)]
        canvas = (
            hc.Heatmap(small_matrix_df)
            .order_rows([3, 2, 1, 0])
            .set_text(text, color="white")
            .render()
        )
        matrix = canvas.panel("matrix")
        assert matrix.data["cellText"][0] == ["30", "31", "32"]
        assert {op.color for op in matrix.ops_of(TextOp)} == {"white"}


class TestBuilder:
    def test_setters_chain_and_replace_config(self, small_matrix_df):
        heatmap = hc.Heatmap(small_matrix_df)
        before = heatmap.config
        assert heatmap.set_title("Expression", size=12) is heatmap
        assert before.title is None
        assert heatmap.config.title == "Expression"

    def test_title_panel(self, small_matrix_df):
        canvas = hc.Heatmap(small_matrix_df).set_title("Expression").render()
        assert canvas.title == "Expression"
        assert canvas.panel("title").rect.bottom < canvas.panel("matrix").rect.y

    def test_same_side_twice_raises(self, small_matrix_df):
        heatmap = hc.Heatmap(small_matrix_df).attach("right", [1, 2, 3, 4])
        with pytest.raises(ConfigurationError, match="right"):
            heatmap.attach("right", [4, 3, 2, 1], "line")

    def test_bad_label_axis_raises(self, small_matrix_df):
        with pytest.raises(ConfigurationError, match="axis"):
            hc.Heatmap(small_matrix_df).set_labels("z", angle=45)

    def test_hidden_labels(self, small_matrix_df):
        canvas = hc.Heatmap(small_matrix_df).set_labels("col", visible=False).render()
        assert "col_labels" not in canvas
        assert "row_labels" in canvas

    def test_set_options(self, missing_matrix):
        canvas = hc.Heatmap(missing_matrix).set_options(order_rows="mean", heat_lim=(0, 10)).render()
        assert canvas.palette_domain == (0.0, 10.0)

    def test_series_length_mismatch_raises(self, small_matrix_df):
        with pytest.raises(ConfigurationError, match="has 3 entries"):
            hc.Heatmap(small_matrix_df).attach("left", [1, 2, 3]).render()

    def test_fixed_canvas_size(self, small_matrix_df):
        canvas = hc.Heatmap(small_matrix_df).set_size(width=300, height=250).render()
        assert canvas.width == pytest.approx(300.0)
        assert canvas.height == pytest.approx(250.0)


class TestRenderFunction:
    def test_scale_minmax(self, small_matrix_df):
        assert hc.render(small_matrix_df, scale="minmax").palette_domain == (0.0, 1.0)

    def test_dotted_options_mapping(self, small_matrix_df):
        canvas = hc.render(
            small_matrix_df,
            options={"right.series": [4, 3, 2, 1], "right.plot.type": "bar", "legend": True},
        )
        assert canvas.panel("right").data["kind"] == "bar"
        assert "legend" in canvas

    def test_series_aligned_by_name(self, small_matrix_df):
        series = pd.Series({"gene_D": 4.0, "gene_A": 1.0, "gene_C": 3.0, "gene_B": 2.0})
        canvas = hc.render(small_matrix_df, options={"left": {"series": series, "plot.type": "line"}})
        assert canvas.panel("left").data["values"] == [1.0, 2.0, 3.0, 4.0]

    def test_membership_grid(self, small_matrix_df):
        canvas = (
            hc.Heatmap(small_matrix_df)
            .group_rows(["b", "a", "b", "a"])
            .set_grid(force_grid_hline=True)
            .render()
        )
        assert canvas.row_order.permutation.tolist() == [0, 2, 1, 3]
        assert canvas.panel("grid").data["hlines"] == [2]
        assert canvas.panel("grid").data["vlines"] == [1, 2]

    def test_legend(self, small_matrix_df):
        canvas = hc.Heatmap(small_matrix_df).show_legend().render()
        legend = canvas.panel("legend")
        assert legend.data["missingColor"] == "#c8c8c8"
        assert legend.rect.y > canvas.panel("matrix").rect.bottom

    def test_canvas_serializes_to_json(self, small_matrix_df):
        canvas = (
            hc.Heatmap(small_matrix_df)
            .order_rows("mean")
            .group_cols(["x", "y", "x"])
            .attach("top", [[1, 2], [3], []], "box")
            .attach("right", [1, 2, None, 4], "scatter")
            .set_title("All panels")
            .show_legend()
            .render()
        )
        decoded = json.loads(json.dumps(canvas.to_dict()))
        assert set(decoded["panels"]) == {
            "title", "matrix", "grid", "row_labels", "col_labels", "top", "right", "legend",
        }
        stats = decoded["panels"]["top"]["data"]["stats"]
        # original column 2 holds the empty distribution
        empty_at = canvas.col_order.display_index(2)
        assert canvas.col_order.permutation.tolist() == [0, 2, 1]
        assert stats[empty_at] is None
        assert all(s is not None for i, s in enumerate(stats) if i != empty_at)

    def test_invalid_config_raises_before_drawing(self, small_matrix_df):
        with pytest.raises(ConfigurationError):
            hc.render(small_matrix_df, order_rows=[0, 1, 2], X_text=[["a"]])
