# src/es_reconcile/api/router.py
"""Order details REST API: view-model reads and the three maker actions."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.es_common.response import ApiResponse, success_response
from src.es_reconcile.api.dependencies import get_fee_schedule, get_order_details_service
from src.es_reconcile.application.schemas import MaxPriceRequest, QuoteRequest
from src.es_reconcile.application.service import OrderDetailsService, quote_order
from src.es_reconcile.domain.fees import FeeSchedule

router = APIRouter(prefix="/orders", tags=["orders"])

ServiceDep = Annotated[OrderDetailsService, Depends(get_order_details_service)]


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post("/quote")
async def quote(
    body: QuoteRequest,
    fees: Annotated[FeeSchedule, Depends(get_fee_schedule)],
    request: Request,
) -> ApiResponse:
    data = quote_order(body, fees)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.get("/{order_id}")
async def get_order_details(order_id: int, svc: ServiceDep, request: Request) -> ApiResponse:
    data = await svc.refresh(order_id)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.post("/{order_id}/activate")
async def activate_order(order_id: int, svc: ServiceDep, request: Request) -> ApiResponse:
    data = await svc.confirm_funding(order_id)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.post("/{order_id}/cancel")
async def cancel_order(order_id: int, svc: ServiceDep, request: Request) -> ApiResponse:
    data = await svc.cancel(order_id)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.post("/{order_id}/max-price")
async def update_max_price(
    order_id: int, body: MaxPriceRequest, svc: ServiceDep, request: Request
) -> ApiResponse:
    data = await svc.update_max_price(order_id, body.max_bsv_price)
    return success_response(data.model_dump(mode="json"), _request_id(request))
