from importlib.metadata import PackageNotFoundError, version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from birds_nest.config.logging import configure_logging
from birds_nest.config.settings import get_settings
from birds_nest.errors import ArgumentError, LciaClientError, ModelInputError
from birds_nest.routes import health, measure

# Dynamically determine the package name
package_name = __name__.split(".")[0]

# Get version dynamically
package_dist_name = package_name.replace("_", "-")

try:
    __version__ = version(package_dist_name)
except PackageNotFoundError:
    __version__ = "development"

configure_logging(get_settings().log_level)

app = FastAPI(
    title="BIRDS NEST LCIA Service",
    description="Life-cycle impact assessment of residential EnergyPlus models through the NIST BIRDS NEST API",
    version=__version__,
)


@app.exception_handler(ArgumentError)
async def argument_error_handler(request: Request, exc: ArgumentError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.messages})


@app.exception_handler(ModelInputError)
async def model_input_error_handler(request: Request, exc: ModelInputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(LciaClientError)
async def lcia_client_error_handler(request: Request, exc: LciaClientError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.include_router(health.router)
app.include_router(measure.router)
