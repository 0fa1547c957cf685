"""Query interface for the EnergyPlus ``eplusout.sql`` results database."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from birds_nest.errors import ModelInputError

logger = logging.getLogger(__name__)

_ANNUAL_REPORT = "AnnualBuildingUtilityPerformanceSummary"

# End-use columns that are not counted as "other fuel".
_NON_FUEL_COLUMNS = {"electricity", "natural gas", "water", "district cooling", "district heating",
                     "district heating water", "district heating steam"}


@dataclass(frozen=True)
class TabularRow:
    """A single cell of an EnergyPlus tabular report."""

    report_name: str
    report_for: str
    table_name: str
    row_name: str
    column_name: str
    units: str
    value: str

    def as_float(self) -> Optional[float]:
        try:
            return float(self.value.strip())
        except (AttributeError, ValueError):
            return None


@dataclass(frozen=True)
class EndUseTotals:
    electricity_gj: float = 0.0
    natural_gas_gj: float = 0.0
    other_fuel_gj: float = 0.0
    water_m3: float = 0.0


class SimulationResults:
    """Read-only access to a simulation's SQLite output.

    Can be used as a context manager::

        with SimulationResults("eplusout.sql") as results:
            totals = results.end_use_totals()
    """

    def __init__(self, db_path: Union[str, Path]) -> None:
        self._db_path = Path(db_path)
        if not self._db_path.is_file():
            raise ModelInputError("Simulation results not found", str(self._db_path))
        self._conn = sqlite3.connect(f"file:{self._db_path}?mode=ro", uri=True)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SimulationResults":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def tabular(
        self,
        report: Optional[str] = None,
        table: Optional[str] = None,
        row: Optional[str] = None,
        column: Optional[str] = None,
    ) -> List[TabularRow]:
        query = (
            "SELECT ReportName, ReportForString, TableName, RowName, "
            "ColumnName, Units, Value "
            "FROM TabularDataWithStrings"
        )
        conditions: List[str] = []
        params: List[str] = []
        for column_name, value in (("ReportName", report), ("TableName", table), ("RowName", row), ("ColumnName", column)):
            if value is not None:
                conditions.append(f"{column_name} = ?")
                params.append(value)
        if conditions:
            query += " WHERE " + " AND ".join(conditions)

        try:
            cur = self._conn.execute(query, params)
        except sqlite3.DatabaseError as exc:
            raise ModelInputError(f"Cannot read tabular results ({exc})", str(self._db_path)) from exc
        return [TabularRow(*row_values) for row_values in cur.fetchall()]

    def first_value(self, report: str, table: str, row: str, column: str) -> Optional[float]:
        for cell in self.tabular(report, table, row, column):
            value = cell.as_float()
            if value is not None:
                return value
        return None

    def end_use_totals(self) -> EndUseTotals:
        """Annual totals from the building utility performance summary."""
        values: Dict[str, float] = {}
        other = 0.0
        for cell in self.tabular(_ANNUAL_REPORT, "End Uses", "Total End Uses"):
            value = cell.as_float()
            if value is None:
                continue
            key = cell.column_name.strip().lower()
            values[key] = value
            if key not in _NON_FUEL_COLUMNS:
                other += value
        totals = EndUseTotals(
            electricity_gj=values.get("electricity", 0.0),
            natural_gas_gj=values.get("natural gas", 0.0),
            other_fuel_gj=other,
            water_m3=values.get("water", 0.0),
        )
        logger.debug("End use totals: %s", totals)
        return totals

    def total_site_energy(self) -> Optional[float]:
        return self.first_value(_ANNUAL_REPORT, "Site and Source Energy", "Total Site Energy", "Total Energy")

    def net_site_energy(self) -> Optional[float]:
        return self.first_value(_ANNUAL_REPORT, "Site and Source Energy", "Net Site Energy", "Total Energy")

    def component_size(self, component_name: str, description: str) -> Optional[float]:
        """Autosized value of a component from the ComponentSizingSummary report.

        ``description`` is matched against the column name, preferring the
        ``Design Size`` column when both a design and a user value exist.
        """
        matches = [
            cell
            for cell in self.tabular("ComponentSizingSummary", row=component_name.upper())
            if description.lower() in cell.column_name.lower()
        ]
        matches.sort(key=lambda c: 0 if c.column_name.lower().startswith("design size") else 1)
        for cell in matches:
            value = cell.as_float()
            if value is not None:
                return value
        return None

    def fenestration_value(self, window_name: str, column: str) -> Optional[float]:
        return self.first_value("EnvelopeSummary", "Exterior Fenestration", window_name.upper(), column)
