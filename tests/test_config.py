"""Tests for HeatmapConfig, option parsing and validation."""

import dataclasses

import pytest

from heatcanvas.config import (
    DEFAULT_STYLE,
    AggregateOrder,
    GridConfig,
    HeatmapConfig,
    LabelConfig,
    PlotKind,
    SidePanelConfig,
    merge_panel,
    side_axis,
)
from heatcanvas.errors import ConfigurationError


class TestPlotKind:
    def test_parse_names_and_aliases(self):
        assert PlotKind.parse("bar") is PlotKind.BAR
        assert PlotKind.parse("boxplot") is PlotKind.BOX
        assert PlotKind.parse(PlotKind.LINE) is PlotKind.LINE

    def test_unknown_kind_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown plot type"):
            PlotKind.parse("pie")

    def test_only_box_takes_distributions(self):
        assert [k for k in PlotKind if k.takes_distribution] == [PlotKind.BOX]


class TestSmallHelpers:
    def test_side_axis(self):
        assert side_axis("left") == "row"
        assert side_axis("top") == "col"
        with pytest.raises(ConfigurationError):
            side_axis("middle")

    def test_aggregate_coerce(self):
        assert AggregateOrder.coerce("median") == AggregateOrder(statistic="median")
        assert AggregateOrder.coerce([1, 0]) == [1, 0]
        assert AggregateOrder.coerce(None) is None
        assert not AggregateOrder.coerce({"direction": "descending"}).ascending

    def test_merge_panel_refuses_taken_side(self):
        config = merge_panel(DEFAULT_STYLE, SidePanelConfig("top", [1, 2]))
        assert config.panel("top") is not None
        assert DEFAULT_STYLE.panels == ()
        with pytest.raises(ConfigurationError, match="already attached"):
            merge_panel(config, SidePanelConfig("top", [3, 4]))


class TestFromOptions:
    def test_dotted_and_snake_case_keys(self):
        config = HeatmapConfig.from_options({
            "order.rows": "mean",
            "order_cols": [1, 0],
            "X_text": [["a", "b"]],
            "grid.hline.col": "#ff0000",
            "row_label_text_angle": 45,
        })
        assert config.order_rows == "mean"
        assert config.order_cols == [1, 0]
        assert config.text.text == [["a", "b"]]
        assert config.grid.hline_color == "#ff0000"
        assert config.row_labels.angle == 45

    def test_palette_options(self):
        config = HeatmapConfig.from_options({
            "heat.pal": ["blue", "white", "red"],
            "heat.lim": [0, 5],
            "heat.na.col": "black",
        })
        assert config.palette.stops == ("blue", "white", "red")
        assert config.palette.domain == (0, 5)
        assert config.palette.missing_color == "black"

    def test_label_options(self):
        config = HeatmapConfig.from_options({
            "col.label": False,
            "row.label.col": "#eeeeee",
            "row.label.text.col": "#333333",
            "row.label.side": "right",
        })
        assert not config.col_labels.visible
        assert config.row_labels.background == "#eeeeee"
        assert config.row_labels.text_color == "#333333"
        assert config.row_labels.side == "right"

    def test_side_mapping(self):
        config = HeatmapConfig.from_options({
            "right": {"series": [1, 2], "plot.type": "bar", "col": "red", "plot_size": 0.5},
        })
        panel = config.panel("right")
        assert panel.data == [1, 2]
        assert panel.plot_type is PlotKind.BAR
        assert panel.size == 0.5
        assert panel.style.color == "red"

    def test_flat_side_keys(self):
        config = HeatmapConfig.from_options({
            "top.series": [[1, 2], [3]],
            "top.plot_type": "boxplot",
            "top.lim": [0, 10],
            "top.axis.name": "counts",
        })
        panel = config.panel("top")
        assert panel.plot_type is PlotKind.BOX
        assert panel.limits == (0, 10)
        assert panel.axis_name == "counts"

    def test_updates_existing_panel(self):
        base = merge_panel(DEFAULT_STYLE, SidePanelConfig("left", [5, 6]))
        config = HeatmapConfig.from_options({"left.col": "blue"}, base=base)
        assert config.panel("left").data == [5, 6]
        assert config.panel("left").style.color == "blue"

    def test_panels_kept_in_side_order(self):
        config = HeatmapConfig.from_options({"right.series": [1], "top.series": [2]})
        assert [p.side for p in config.panels] == ["top", "right"]

    def test_base_is_kept(self):
        base = dataclasses.replace(DEFAULT_STYLE, title="Kept")
        config = HeatmapConfig.from_options({"margin": 5}, base=base)
        assert config.title == "Kept"
        assert config.margin == 5
        assert base.margin == DEFAULT_STYLE.margin

    def test_unknown_option_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown option 'colour'"):
            HeatmapConfig.from_options({"colour": "red"})

    def test_unknown_panel_option_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown panel option"):
            HeatmapConfig.from_options({"right.series": [1], "right.bogus": 1})

    def test_side_without_data_raises(self):
        with pytest.raises(ConfigurationError, match="needs a series"):
            HeatmapConfig.from_options({"top.plot.type": "bar"})

    def test_side_value_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match="mapping"):
            HeatmapConfig.from_options({"right": [1, 2, 3]})

    def test_bad_plot_type_raises(self):
        with pytest.raises(ConfigurationError):
            HeatmapConfig.from_options({"right.series": [1], "right.plot.type": "pie"})


class TestValidate:
    def test_defaults_are_valid(self):
        DEFAULT_STYLE.validate()

    @pytest.mark.parametrize("changes, message", [
        ({"margin": -1.0}, "margin"),
        ({"cell_size": 0.0}, "cell size"),
        ({"panel_padding": -2.0}, "panel padding"),
        ({"canvas_width": 0.0}, "canvas width"),
        ({"scale": "log"}, "scale"),
        ({"row_labels": LabelConfig(side="top")}, "row label side"),
        ({"col_labels": LabelConfig(side="bottom", alignment="justify")}, "alignment"),
        ({"grid": GridConfig(vline_color="not-a-color")}, "grid.vline.col"),
        ({"grid": GridConfig(hline_size=-1.0)}, "grid.hline.size"),
    ])
    def test_invalid_settings_raise(self, changes, message):
        config = dataclasses.replace(DEFAULT_STYLE, **changes)
        with pytest.raises(ConfigurationError, match=message):
            config.validate()

    def test_duplicate_sides_raise(self):
        config = dataclasses.replace(
            DEFAULT_STYLE,
            panels=(SidePanelConfig("left", [1]), SidePanelConfig("left", [2])),
        )
        with pytest.raises(ConfigurationError, match="Two panels"):
            config.validate()

    def test_panel_checks(self):
        bad_ticks = SidePanelConfig("top", [1], num_ticks=0)
        with pytest.raises(ConfigurationError, match="tick count"):
            dataclasses.replace(DEFAULT_STYLE, panels=(bad_ticks,)).validate()
        reversed_limits = SidePanelConfig("top", [1], limits=(5.0, 1.0))
        with pytest.raises(ConfigurationError, match="reversed"):
            dataclasses.replace(DEFAULT_STYLE, panels=(reversed_limits,)).validate()

    def test_reversed_domain_raises(self):
        config = HeatmapConfig.from_options({"heat.lim": (3, 1)})
        with pytest.raises(ConfigurationError, match="palette domain"):
            config.validate()
