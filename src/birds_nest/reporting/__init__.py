from birds_nest.reporting.report import write_csv_report, write_html_report
from birds_nest.reporting.tables import ReportTables, summary_tables, warning_rows

__all__ = ["ReportTables", "summary_tables", "warning_rows", "write_csv_report", "write_html_report"]
