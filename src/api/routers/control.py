"""
Control command forwarding endpoint.
"""

from fastapi import APIRouter, Body, Depends
from typing import Optional

from ..errors import http_error
from ..models.common import ERROR_RESPONSES
from ..models.pools import ControlRequest, ControlResponse
from ..dependencies.relay import get_dispatcher
from src.relay.errors import RelayError
from src.pipeline.pools.dispatcher import ControlDispatcher

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/control", response_model=ControlResponse)
async def send_control(
    request: Optional[ControlRequest] = Body(None),
    dispatcher: ControlDispatcher = Depends(get_dispatcher)
):
    """
    Forward a control command to the backend that owns the pool.

    The backend is picked by matching the first characters of systemId
    against registered data endpoints; its response body is relayed as-is.
    """
    if request is None:
        request = ControlRequest()
    try:
        result = await dispatcher.send_control(request.system_id, request.action, request.value)
    except RelayError as e:
        raise http_error(e, upstream_detail="Failed to send control command") from e
    return ControlResponse(success=True, response=result)
