import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from birds_nest.client.lcia import LciaClient
from birds_nest.config.settings import Settings, get_settings
from birds_nest.errors import ArgumentError
from birds_nest.measure import generate_payload, run_measure
from birds_nest.models.arguments import MeasureArguments, describe_arguments
from birds_nest.scripts.serializer import to_jsonable

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/measure", tags=["measure"])


def get_lcia_client() -> Optional[LciaClient]:
    """Client used by /measure/run. ``None`` lets the measure build one from settings and arguments."""
    return None


SettingsDep = Annotated[Settings, Depends(get_settings)]
ClientDep = Annotated[Optional[LciaClient], Depends(get_lcia_client)]


def _parse_arguments(raw: Optional[str]) -> MeasureArguments:
    if not raw:
        return MeasureArguments()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ArgumentError([f"arguments is not valid JSON ({exc.msg})"]) from exc
    if not isinstance(data, dict):
        raise ArgumentError(["arguments must be a JSON object"])
    return MeasureArguments.parse(data)


async def _save_upload(upload: UploadFile, folder: Path, default_name: str) -> Path:
    path = folder / Path(upload.filename or default_name).name
    with path.open("wb") as handle:
        handle.write(await upload.read())
    return path


class _Inputs:
    """Uploaded files copied into a scratch directory for the duration of one request."""

    def __init__(self) -> None:
        self.folder = Path(tempfile.mkdtemp(prefix="birds_nest_"))
        self.model: Optional[Path] = None
        self.sql: Optional[Path] = None
        self.weather: Optional[Path] = None

    async def load(self, model_file: UploadFile, sql_file: UploadFile, epw_file: Optional[UploadFile]) -> "_Inputs":
        self.model = await _save_upload(model_file, self.folder, "in.epJSON")
        self.sql = await _save_upload(sql_file, self.folder, "eplusout.sql")
        if epw_file is not None:
            self.weather = await _save_upload(epw_file, self.folder, "in.epw")
        return self

    def cleanup(self) -> None:
        shutil.rmtree(self.folder, ignore_errors=True)


@router.get("/arguments")
async def measure_arguments() -> List[Dict[str, Any]]:
    """Name, display name, type, default and choices of every measure argument."""
    return describe_arguments()


@router.post("/payload")
async def measure_payload(
    model_file: UploadFile = File(..., description="EnergyPlus epJSON model."),
    sql_file: UploadFile = File(..., description="EnergyPlus SQLite output (eplusout.sql)."),
    epw_file: Optional[UploadFile] = File(None, description="Optional EPW weather file (sets the country)."),
    arguments: Optional[str] = Form(None, description="JSON object with the measure arguments."),
):
    """Build the LCIA request body without contacting the calculation service."""
    parsed = _parse_arguments(arguments)
    inputs = _Inputs()
    try:
        await inputs.load(model_file, sql_file, epw_file)
        return await run_in_threadpool(generate_payload, parsed, inputs.model, inputs.sql, inputs.weather)
    finally:
        inputs.cleanup()


@router.post("/run")
async def measure_run(
    settings: SettingsDep,
    client: ClientDep,
    model_file: UploadFile = File(..., description="EnergyPlus epJSON model."),
    sql_file: UploadFile = File(..., description="EnergyPlus SQLite output (eplusout.sql)."),
    epw_file: Optional[UploadFile] = File(None, description="Optional EPW weather file (sets the country)."),
    arguments: Optional[str] = Form(None, description="JSON object with the measure arguments."),
):
    """
    Run the whole measure: build the payload, call the LCIA service and
    summarise its response.

    Returns ``{"result": null}`` when the service produced no result.
    """
    parsed = _parse_arguments(arguments)
    inputs = _Inputs()
    try:
        await inputs.load(model_file, sql_file, epw_file)
        run_settings = settings.model_copy(update={"output_dir": inputs.folder / "output"})
        result = await run_in_threadpool(
            run_measure,
            parsed,
            inputs.model,
            inputs.sql,
            weather_path=inputs.weather,
            settings=run_settings,
            client=client,
        )
    finally:
        inputs.cleanup()

    if result.response is None:
        return {"result": None}
    return {
        "result": result.response,
        "warnings": to_jsonable(result.warnings),
        "tables": {title: to_jsonable(frame) for title, frame in result.tables.all_tables()},
    }
