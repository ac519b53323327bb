from typing import Annotated

from fastapi import Depends, Request

from tasktimetracker.client import TimeTrackerClient


def get_client(request: Request) -> TimeTrackerClient:
    """The client created by the application lifespan."""
    return request.app.state.client


ClientDep = Annotated[TimeTrackerClient, Depends(get_client)]
