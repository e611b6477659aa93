from fastapi import APIRouter, Depends, Request, Response

from forward_relay.common.metrics import measure_time, metrics
from forward_relay.receiver.handler import ForwardActionsHandler


router = APIRouter()


async def get_handler() -> ForwardActionsHandler:
    from forward_relay.receiver.app import get_handler
    return get_handler()


def create_forward_actions_router(path: str) -> APIRouter:
    """Router exposing the forward actions endpoint at ``path``."""
    forward_router = APIRouter()

    @forward_router.post(path, status_code=200, response_class=Response)
    @measure_time(metrics.processing_time, {"route": "forward_actions"})
    async def receive_forward_action(
        request: Request,
        handler: ForwardActionsHandler = Depends(get_handler),
    ):
        response = Response(status_code=200)
        await handler.do_post(request, response)
        return response

    return forward_router


@router.get("/health")
async def health_check():
    return {"status": "ok"}
