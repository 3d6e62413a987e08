"""Pricing quote endpoint"""
import logging
from fastapi import APIRouter, Depends

from transfer_pricing.api.deps import get_quote_service
from transfer_pricing.schemas.quote import QuoteRequest, PriceQuote
from transfer_pricing.services.quotes import QuoteService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("", response_model=PriceQuote)
async def create_quote(
    req: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
):
    return await service.quote(req.route_id, req.vehicle_type, req.conditions)
