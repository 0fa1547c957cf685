"""Render LCIA report tables to HTML (pyecharts page) and CSV."""

import logging
import re
from pathlib import Path
from typing import Any, List, Sequence, Tuple, Union

import pandas as pd
from pyecharts import options as opts
from pyecharts.charts import Page
from pyecharts.components import Table

from birds_nest.reporting.charts import (
    energy_by_year_chart,
    energy_share_chart,
    gwp_by_year_chart,
    gwp_share_chart,
)
from birds_nest.reporting.tables import ReportTables

logger = logging.getLogger(__name__)

_UNIT_HEADER = re.compile(r"^(?P<name>.+?) \((?P<unit>[^()]+)\)$")


def split_header(header: str) -> Tuple[str, str]:
    """``"Smog (kg O3 eq)"`` -> ``("Smog", "kg O3 eq")``; headers without a unit keep an empty unit."""
    match = _UNIT_HEADER.match(header)
    if match is None:
        return header, ""
    return match.group("name"), match.group("unit")


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return value


def _table_component(title: str, headers: Sequence[str], rows: List[List[Any]]) -> Table:
    table = Table()
    table.add(list(headers), [[_cell(v) for v in row] for row in rows])
    table.set_global_opts(title_opts=opts.ComponentTitleOpts(title=title))
    return table


def _frame_component(title: str, frame: pd.DataFrame) -> Table:
    return _table_component(title, [str(c) for c in frame.columns], frame.values.tolist())


def write_html_report(
    tables: ReportTables,
    user_inputs: Sequence[Tuple[str, Any]],
    warnings: pd.DataFrame,
    path: Union[str, Path],
) -> Path:
    """
    Write the HTML report: impact charts followed by the user inputs, the
    service warnings and every summary table.

    :param tables: tables built by :func:`birds_nest.reporting.tables.summary_tables`
    :param user_inputs: ``(parameter, value)`` rows, the first row being the header
    :param warnings: System/Warning table
    :param path: output HTML file
    """
    path = Path(path)
    page = Page(layout=Page.SimplePageLayout, page_title="BIRDS NEST LCIA Report")

    page.add(
        gwp_share_chart(tables.gwp_share),
        energy_share_chart(tables.energy_share),
        gwp_by_year_chart(tables.yearly),
        energy_by_year_chart(tables.yearly),
    )

    if user_inputs:
        header, *rows = user_inputs
        page.add(_table_component("User Inputs", header, [list(r) for r in rows]))
    page.add(_frame_component("Warnings", warnings))

    for title, frame in tables.all_tables():
        page.add(_frame_component(title, frame))

    page.render(str(path))
    logger.info("HTML report written to %s", path)
    return path


def csv_block(title: str, frame: pd.DataFrame) -> pd.DataFrame:
    """One report section as raw CSV rows: title, header names, units, values."""
    names, units = zip(*(split_header(str(c)) for c in frame.columns)) if len(frame.columns) else ((), ())
    rows: List[List[Any]] = [[title] + [""] * (len(names) - 1), list(names)]
    if any(units):
        rows.append(list(units))
    rows.extend([_cell(v) for v in row] for row in frame.values.tolist())
    return pd.DataFrame(rows)


def write_csv_report(tables: ReportTables, path: Union[str, Path]) -> Path:
    """Write every summary table to one CSV file, separated by a blank row."""
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as handle:
        for i, (title, frame) in enumerate(tables.all_tables()):
            if i:
                handle.write("\n")
            csv_block(title, frame).to_csv(handle, header=False, index=False, lineterminator="\n")
    logger.info("CSV report written to %s", path)
    return path
