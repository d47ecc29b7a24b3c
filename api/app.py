"""
FastAPI application exposing the rental engine to the storefront and the
office UI.

Run with: uvicorn api.app:app --reload
"""

from datetime import date

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.config import RentalEngineConfig
from connectors.rental_store import InMemoryRentalStore
from engine.exceptions import InvalidRangeError, InvalidRateError, ProductNotFoundError
from engine.pricing import sort_tiers
from engine.service import RentalAvailabilityService
from utils import get_logger

logger = get_logger("rental-api")


# --- Request models --- #


class AvailabilityRequest(BaseModel):
    product_id: str
    start_date: date
    end_date: date


class ProductBookingsRequest(BaseModel):
    product_id: str


class QuoteRequest(BaseModel):
    product_id: str
    start_date: date
    end_date: date


def create_app(service: RentalAvailabilityService | None = None) -> FastAPI:
    """Build the API around a service; defaults to an empty in-memory store."""
    if service is None:
        service = RentalAvailabilityService(InMemoryRentalStore(), RentalEngineConfig.from_env())

    app = FastAPI(title="Rental Availability & Pricing Service")
    app.state.service = service

    @app.exception_handler(InvalidRangeError)
    async def invalid_range_handler(request: Request, exc: InvalidRangeError):
        return JSONResponse(status_code=400, content={"error": "End date must be after start date"})

    @app.exception_handler(InvalidRateError)
    async def invalid_rate_handler(request: Request, exc: InvalidRateError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(ProductNotFoundError)
    async def product_not_found_handler(request: Request, exc: ProductNotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.post("/check-availability")
    def check_availability(body: AvailabilityRequest):
        result = service.check_availability(body.product_id, body.start_date, body.end_date)
        return result.to_dict()

    @app.post("/product-bookings")
    def product_bookings(body: ProductBookingsRequest):
        occupancy = service.occupancy_map(body.product_id)
        return occupancy.to_dict()

    @app.post("/quote")
    def quote(body: QuoteRequest):
        logger.info(f"Quote requested for {body.product_id}: {body.start_date} -> {body.end_date}")
        return service.quote(body.product_id, body.start_date, body.end_date).to_dict()

    @app.get("/pricing-tiers")
    def pricing_tiers(product_id: str):
        product = service.store.get_product(product_id)
        tiers = sort_tiers(service.store.list_pricing_tiers(product_id))
        overflow = service.config.pricing.overflow_multiplier
        if product is not None and product.overflow_multiplier is not None:
            overflow = product.overflow_multiplier
        return {
            "tiers": [
                {"tier_days": t.tier_days, "multiplier": t.multiplier, "label": t.display_label}
                for t in tiers
            ],
            "overflow_multiplier": overflow,
        }

    return app


app = create_app()
