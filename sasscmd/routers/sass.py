"""HTTP access to the ``sass`` command registered in the application host."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from sasscmd.config import settings
from sasscmd.constants import VERB_VERSION
from sasscmd.host import CommandHost
from sasscmd.schemas.command import CommandOutcome, CommandRequest, VersionInfo

router = APIRouter(prefix="/sass", tags=["sass"])


def get_host(request: Request) -> CommandHost:
    host = getattr(request.app.state, "host", None)
    if host is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="command host not initialized",
        )
    return host


@router.post("", response_model=CommandOutcome)
def run_command(
    payload: CommandRequest, host: CommandHost = Depends(get_host)
) -> JSONResponse:
    """Evaluate one ``sass`` command.

    A libsass diagnostic is still a successful command; only argument and
    lifecycle errors produce a 400.
    """
    outcome = host.eval(settings.command_name, *payload.args)
    return JSONResponse(
        outcome.model_dump(by_alias=True),
        status_code=status.HTTP_200_OK if outcome.ok else status.HTTP_400_BAD_REQUEST,
    )


@router.get("/version", response_model=VersionInfo)
def version(host: CommandHost = Depends(get_host)) -> VersionInfo:
    outcome = host.eval(settings.command_name, VERB_VERSION)
    if not outcome.ok:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=outcome.error
        )
    library, engine_version = outcome.result
    return VersionInfo(library=library, version=engine_version)
