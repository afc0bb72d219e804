"""
Operational endpoints used by monitoring systems
"""

from fastapi import APIRouter, Request, Response

from order_events.core.metrics import HttpMetrics

router = APIRouter(tags=["operational"])


def get_metrics(request: Request) -> HttpMetrics:
    return request.app.state.metrics


@router.get("/metrics")
def metrics(request: Request):
    """Prometheus text exposition of this application's registry"""
    app_metrics = get_metrics(request)
    return Response(content=app_metrics.render(), media_type=app_metrics.content_type)
