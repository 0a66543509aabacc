"""FastAPI dependencies exposing the application's services to the routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from deedsync.app import DeedServices


def get_services(request: Request) -> DeedServices:
    return request.app.state.services


Services = Annotated[DeedServices, Depends(get_services)]
