from typing import List, Tuple

import pandas as pd
from pyecharts import options as opts
from pyecharts.charts import Bar, Pie
from pyecharts.globals import ThemeType

from birds_nest.reporting.tables import ENERGY_LABEL, GWP_LABEL


def _value(value) -> float:
    if value is None or pd.isna(value):
        return 0.0
    return round(float(value), 2)


# -------------------------------------------------------------------------------------------------
#   SHARE OF IMPACT (PIE)
# -------------------------------------------------------------------------------------------------


def impact_share_chart(
    data: List[Tuple[str, float]],
    title: str,
    theme_type: str = ThemeType.ROMA,
):
    """
    Pie chart splitting a whole-building impact between building components and operational energy.

    :param data: (flow name, value) pairs
    :param title: chart title, including the unit
    :param theme_type: pyecharts theme
    """
    c = (
        Pie(init_opts=opts.InitOpts(theme=theme_type))
        .add(
            "",
            [[name, round(value or 0.0, 2)] for name, value in data],
            radius=["35%", "65%"],
        )
        .set_global_opts(
            title_opts=opts.TitleOpts(title=title),
            legend_opts=opts.LegendOpts(orient="vertical", pos_top="15%", pos_left="2%"),
            toolbox_opts=opts.ToolboxOpts(
                feature=opts.ToolBoxFeatureOpts(
                    save_as_image=opts.ToolBoxFeatureSaveAsImageOpts(title="Download as Image"),
                    restore=opts.ToolBoxFeatureRestoreOpts(title="Restore"),
                    data_view=opts.ToolBoxFeatureDataViewOpts(
                        title="View Data", lang=["Data View", "Close", "Refresh"]
                    ),
                    data_zoom=opts.ToolBoxFeatureDataZoomOpts(is_show=False),
                    magic_type=opts.ToolBoxFeatureMagicTypeOpts(is_show=False),
                )
            ),
        )
        .set_series_opts(label_opts=opts.LabelOpts(formatter="{b}: {d}%"))
    )
    c.height = "500px"
    c.width = "900px"
    return c


# -------------------------------------------------------------------------------------------------
#   IMPACT BY YEAR (BAR)
# -------------------------------------------------------------------------------------------------


def yearly_impact_chart(
    yearly: pd.DataFrame,
    value_column: str,
    title: str,
    theme_type: str = ThemeType.ROMA,
):
    """
    Stacked bar chart of an impact per year, one series per flow group.

    :param yearly: long table with "Year", "Flows" and the value column
    :param value_column: column to plot (GWP or primary energy)
    :param title: chart title
    :param theme_type: pyecharts theme
    """
    years = sorted(yearly["Year"].dropna().unique().tolist()) if not yearly.empty else []
    c = Bar(init_opts=opts.InitOpts(theme=theme_type)).add_xaxis([str(y) for y in years])

    for flows, group in yearly.groupby("Flows", sort=False):
        by_year = dict(zip(group["Year"], group[value_column]))
        c = c.add_yaxis(
            flows,
            [_value(by_year.get(y)) for y in years],
            stack="flows",
            label_opts=opts.LabelOpts(is_show=False),
        )

    c = c.set_global_opts(
        title_opts=opts.TitleOpts(title=title),
        datazoom_opts=[
            opts.DataZoomOpts(range_start=0, range_end=100),
            opts.DataZoomOpts(type_="inside"),
        ],
        toolbox_opts=opts.ToolboxOpts(
            feature=opts.ToolBoxFeatureOpts(
                save_as_image=opts.ToolBoxFeatureSaveAsImageOpts(title="Download as Image"),
                restore=opts.ToolBoxFeatureRestoreOpts(title="Restore"),
                data_view=opts.ToolBoxFeatureDataViewOpts(
                    title="View Data", lang=["Data View", "Close", "Refresh"]
                ),
                data_zoom=opts.ToolBoxFeatureDataZoomOpts(zoom_title="Zoom In", back_title="Zoom Out"),
                magic_type=opts.ToolBoxFeatureMagicTypeOpts(is_show=False),
            )
        ),
        tooltip_opts=opts.TooltipOpts(trigger="axis"),
        xaxis_opts=opts.AxisOpts(name="Year"),
        yaxis_opts=opts.AxisOpts(
            name=value_column,
            axislabel_opts=opts.LabelOpts(formatter="{value}"),
        ),
    )
    c.height = "600px"
    c.width = "1200px"
    return c


def gwp_share_chart(data: List[Tuple[str, float]]):
    return impact_share_chart(data, GWP_LABEL)


def energy_share_chart(data: List[Tuple[str, float]]):
    return impact_share_chart(data, ENERGY_LABEL, theme_type=ThemeType.WALDEN)


def gwp_by_year_chart(yearly: pd.DataFrame):
    return yearly_impact_chart(yearly, GWP_LABEL, "Global Warming by Year")


def energy_by_year_chart(yearly: pd.DataFrame):
    return yearly_impact_chart(yearly, ENERGY_LABEL, "Primary Energy by Year", theme_type=ThemeType.WALDEN)
