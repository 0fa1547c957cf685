"""Tests for LCIA response tables, charts and report documents."""

import math

import pandas as pd
import pytest

from birds_nest.models.arguments import MeasureArguments
from birds_nest.reporting.charts import gwp_by_year_chart, gwp_share_chart
from birds_nest.reporting.report import csv_block, split_header, write_csv_report, write_html_report
from birds_nest.reporting.tables import (
    ENERGY_LABEL,
    FLOW_HEADERS,
    GWP_LABEL,
    NO_WARNINGS,
    WHOLE_BUILDING,
    summary_tables,
    warning_rows,
)


def test_warning_rows_lists_service_warnings(lcia_response):
    """Each warning becomes a System/Warning row."""
    rows = warning_rows(lcia_response)
    assert rows.values.tolist() == [["HVAC", "Duct leakage assumed."]]


def test_warning_rows_without_warnings():
    """An empty warning list still renders one placeholder row."""
    rows = warning_rows({"lciaResults": {"warnings": []}})
    assert rows.values.tolist() == [["", NO_WARNINGS]]


def test_totals_table_adds_whole_building_row(lcia_response):
    """Table 1 holds the component total, the energy total and their sum."""
    tables = summary_tables(lcia_response)
    totals = tables.totals

    assert totals["Category"].tolist() == [
        "Total Building Component Flows",
        "Total Energy Flows",
        WHOLE_BUILDING,
    ]
    assert totals[GWP_LABEL].tolist() == [1000.0, 2000.0, 3000.0]
    assert list(totals.columns[1:]) == FLOW_HEADERS


def test_share_data_for_pie_charts(lcia_response):
    """GWP and primary energy shares split components from operational energy."""
    tables = summary_tables(lcia_response)

    assert tables.gwp_share == [
        ("Total Building Component Flows", 1000.0),
        ("Total Energy Flows", 2000.0),
    ]
    assert tables.energy_share[1] == ("Total Energy Flows", 40000.0)


def test_by_year_table_and_chart_series(lcia_response):
    """Table 2 pairs component and energy rows per year; the bar series follow it."""
    tables = summary_tables(lcia_response)

    assert tables.by_year["Year"].tolist() == [2025, 2025, 2026, 2026]
    assert tables.yearly.columns.tolist() == ["Year", "Flows", GWP_LABEL, ENERGY_LABEL]
    component_2026 = tables.yearly[
        (tables.yearly["Year"] == 2026) & (tables.yearly["Flows"] == "Total Building Component Flows")
    ]
    assert component_2026[GWP_LABEL].tolist() == [200.0]


def test_category_table_skips_unknown_and_empty_subcategories(lcia_response):
    """Unrecognised names and null flows are dropped; non-numeric cells stay empty."""
    tables = summary_tables(lcia_response)
    components = tables.sections["buildingComponentFlowsTotal"]
    energy = tables.sections["energyUseFlows"]

    assert components["Subcategory"].tolist() == [
        "Total Building Component Flows",
        "Exterior Walls Flows",
        "Fenestration Flows",
    ]
    fenestration = components[components["Subcategory"] == "Fenestration Flows"].iloc[0]
    assert math.isnan(fenestration["Smog (kg O3 eq)"])
    assert fenestration["Global Warming (kg CO2 eq)"] == 100.0
    assert energy["Subcategory"].tolist() == ["Total Energy Flows", "Electricity Flows"]


def test_stage_tables_keep_stages_with_values(lcia_response):
    """Stages whose flows are all missing produce no row."""
    tables = summary_tables(lcia_response)
    by_stage = tables.sections["buildingComponentFlows"]
    by_year_stage = tables.sections["buildingComponentFlowsByYear"]

    assert by_stage["Stage"].tolist() == ["A1", "C1-4"]
    assert by_stage[GWP_LABEL].tolist() == [1000.0, 500.0]
    assert by_year_stage[["Year", "Stage"]].values.tolist() == [[2025, "A1"], [2025, "C1-4"]]


def test_all_tables_in_report_order(lcia_response):
    tables = summary_tables(lcia_response)
    titles = [title for title, _ in tables.all_tables()]

    assert titles[:2] == ["Total Flows over the Study Period", "Total Flows by Year"]
    assert titles[2] == "Total Building Component Flows"
    assert len(titles) == 8


def test_missing_totals_raise(lcia_response):
    """A response without whole-building totals cannot be summarised."""
    del lcia_response["lciaResults"]["energyUseFlows"]
    with pytest.raises(KeyError):
        summary_tables(lcia_response)


def test_split_header():
    assert split_header("Smog (kg O3 eq)") == ("Smog", "kg O3 eq")
    assert split_header("Category") == ("Category", "")


def test_csv_block_splits_units_into_second_row():
    frame = pd.DataFrame([["Walls", 1.5]], columns=["Category", "Primary Energy (MJ)"])
    block = csv_block("Totals", frame)

    assert block.values.tolist() == [
        ["Totals", ""],
        ["Category", "Primary Energy"],
        ["", "MJ"],
        ["Walls", 1.5],
    ]


def test_write_csv_report_separates_tables(lcia_response, tmp_path):
    """Tables are written back to back with one blank line between them."""
    tables = summary_tables(lcia_response)
    path = write_csv_report(tables, tmp_path / "report.csv")

    text = path.read_text(encoding="utf-8")
    assert text.startswith("Total Flows over the Study Period")
    assert text.count("\n\n") == len(tables.all_tables()) - 1
    assert "Global Warming,Acidification" in text
    assert "kg CO2 eq,kg SO2 eq" in text
    assert f"{WHOLE_BUILDING},3000.0" in text


def test_charts_build_from_tables(lcia_response):
    tables = summary_tables(lcia_response)

    pie = gwp_share_chart(tables.gwp_share)
    bar = gwp_by_year_chart(tables.yearly)

    assert pie.width == "900px"
    assert bar.width == "1200px"
    assert "Total Energy Flows" in pie.dump_options()
    assert "2026" in bar.dump_options()


def test_write_html_report(lcia_response, tmp_path):
    """The page carries the charts, the user inputs, warnings and every table."""
    tables = summary_tables(lcia_response)
    arguments = MeasureArguments(zip=20899)

    path = write_html_report(
        tables,
        arguments.user_inputs_table(),
        warning_rows(lcia_response),
        tmp_path / "report.html",
    )

    html = path.read_text(encoding="utf-8")
    assert "BIRDS NEST LCIA Report" in html
    assert "User Inputs" in html
    assert "20899" in html
    assert "Duct leakage assumed." in html
    assert WHOLE_BUILDING in html
