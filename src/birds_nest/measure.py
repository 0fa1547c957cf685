"""The BIRDS NEST reporting measure: model in, LCIA reports out."""

import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

from birds_nest.client.lcia import ClientConfig, LciaClient
from birds_nest.config.settings import Settings, get_settings
from birds_nest.extraction import BuildingModel, SimulationResults, build_payload
from birds_nest.models.arguments import MeasureArguments
from birds_nest.reporting import ReportTables, summary_tables, warning_rows, write_csv_report, write_html_report
from birds_nest.scripts.serializer import write_json

logger = logging.getLogger(__name__)

INPUT_FILE = "nist_birds_input.json"
RESPONSE_FILE = "nist_birds_response.json"
HTML_REPORT = "report.html"
CSV_REPORT = "report.csv"


@dataclass
class MeasureResult:
    """What one measure run produced. ``response`` is None when the service gave no result."""

    payload: Dict[str, Any]
    input_path: Path
    response: Optional[Dict[str, Any]] = None
    response_path: Optional[Path] = None
    html_path: Optional[Path] = None
    csv_path: Optional[Path] = None
    tables: Optional[ReportTables] = None
    warnings: Optional[pd.DataFrame] = None


def client_config(arguments: MeasureArguments, settings: Settings) -> ClientConfig:
    """Client settings, with the endpoints and tokens given as measure arguments taking precedence."""
    config = ClientConfig.from_settings(settings)
    return dataclasses.replace(
        config,
        api_url=arguments.api_url or config.api_url,
        refresh_url=arguments.api_refresh_url or config.refresh_url,
        api_key=arguments.effective_api_key or config.api_key,
        refresh_token=arguments.birds_api_refresh_token or config.refresh_token,
    )


def generate_payload(
    arguments: MeasureArguments,
    model_path: Union[str, Path],
    sql_path: Union[str, Path],
    weather_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    model = BuildingModel.from_epjson(model_path, weather_path=weather_path)
    with SimulationResults(sql_path) as results:
        return build_payload(model, results, arguments)


def run_measure(
    arguments: Union[MeasureArguments, Dict[str, Any]],
    model_path: Union[str, Path],
    sql_path: Union[str, Path],
    *,
    weather_path: Optional[Union[str, Path]] = None,
    settings: Optional[Settings] = None,
    client: Optional[LciaClient] = None,
) -> MeasureResult:
    """
    Run the measure end to end.

    The payload is always written to ``nist_birds_input.json``. The response
    and both reports are written only when the LCIA service returned a result.

    Raises:
        ArgumentError: invalid measure arguments.
        ModelInputError: the model or the results file cannot be used.
        LciaClientError: the service could not be reached with valid credentials.
    """
    if not isinstance(arguments, MeasureArguments):
        arguments = MeasureArguments.parse(arguments)
    settings = settings or get_settings()
    output_dir = Path(settings.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    payload = generate_payload(arguments, model_path, sql_path, weather_path)
    input_path = write_json(payload, output_dir / INPUT_FILE)
    logger.info("Request payload written to %s", input_path)

    if client is None:
        with LciaClient(client_config(arguments, settings)) as owned:
            body = owned.calculate(json.dumps(payload))
    else:
        body = client.calculate(json.dumps(payload))
    result = MeasureResult(payload=payload, input_path=input_path)
    if body is None:
        logger.error("Cannot parse output.")
        return result

    try:
        response = json.loads(body)
    except json.JSONDecodeError:
        logger.error("Cannot parse output.")
        return result

    result.response = response
    result.response_path = write_json(response, output_dir / RESPONSE_FILE)

    result.tables = summary_tables(response)
    result.warnings = warning_rows(response)
    result.html_path = write_html_report(
        result.tables, arguments.user_inputs_table(), result.warnings, output_dir / HTML_REPORT
    )
    result.csv_path = write_csv_report(result.tables, output_dir / CSV_REPORT)
    logger.info("Birds Nest reports written to %s", output_dir)
    return result
