"""JSON helpers for the LCIA request body, the service response and report tables."""

import dataclasses
import json
import math
from enum import Enum
from pathlib import Path
from typing import Any, Union

import numpy as np
import pandas as pd


def _sanitize_scalar(x: Any) -> Any:
    """
    Make one leaf value JSON-safe:
    - NaN/inf (Python or NumPy float) -> None
    - np.integer / np.bool_ -> int / bool
    - Enum -> its value, Path -> str
    Other types are returned unchanged.
    """
    if isinstance(x, (bool, np.bool_)):
        return bool(x)
    if isinstance(x, np.integer):
        return int(x)
    if isinstance(x, (float, np.floating)):
        value = float(x)
        return value if math.isfinite(value) else None
    if isinstance(x, Enum):
        return _sanitize_scalar(x.value)
    if isinstance(x, Path):
        return str(x)
    return x


def to_jsonable(obj: Any) -> Any:
    """
    Recursively convert ``obj`` into plain JSON types, keeping dict key order.

    DataFrames become lists of row records and frozen dataclasses become
    dicts, so payload sections and report tables can be returned as is.
    """
    if isinstance(obj, pd.DataFrame):
        return [to_jsonable(row) for row in obj.to_dict(orient="records")]
    if isinstance(obj, (pd.Series, np.ndarray)):
        return [to_jsonable(v) for v in obj.tolist()]
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(dataclasses.asdict(obj))
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return _sanitize_scalar(obj)


def write_json(data: Any, path: Union[str, Path]) -> Path:
    """Write ``data`` as indented JSON, sanitising it first."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(to_jsonable(data), handle, indent=2)
    return path
