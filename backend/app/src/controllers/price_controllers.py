"""Expose the price comparison service over HTTP.

The endpoints only validate input and serialize reports; all scraping
happens in ``src.services.price_search``.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from configs import settings
from src.models.price_models import (
    BatchSearchRequest,
    BatchSearchResponse,
    ErrorResponse,
)
from src.services.price_search.models import UnknownMethodError, UnknownSiteError
from src.services.price_search.service import (
    PriceComparisonService,
    get_price_comparison_service,
)

logger = logging.getLogger("price_api.controllers")

price_router = APIRouter(prefix="/api", tags=["Prices"])

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/search/:medicine",
    "GET /api/pharmacy/:pharmacy/:medicine",
    "POST /api/batch-search",
]


def _invalid_method(exc: UnknownMethodError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": "Invalid method",
            "message": f"{exc}. Use 'axios' or 'puppeteer'.",
        },
    )


@price_router.get(
    "/search/{medicine}",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def search_medicine(
    medicine: str,
    method: str = Query(default=settings.DEFAULT_METHOD),
    service: PriceComparisonService = Depends(get_price_comparison_service),
) -> Dict[str, Any]:
    """Compare prices for one medicine across every pharmacy."""
    try:
        return service.compare(medicine, method).as_dict()
    except UnknownMethodError as e:
        raise _invalid_method(e)
    except Exception as e:
        logger.exception("Search failed for '%s'", medicine)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Search failed", "message": str(e)},
        )


@price_router.get(
    "/pharmacy/{pharmacy}/{medicine}",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def search_pharmacy(
    pharmacy: str,
    medicine: str,
    method: str = Query(default=settings.DEFAULT_METHOD),
    service: PriceComparisonService = Depends(get_price_comparison_service),
) -> Dict[str, Any]:
    """Compare prices for one medicine on a single pharmacy."""
    try:
        return service.search_site(pharmacy, medicine, method).as_dict()
    except UnknownSiteError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Pharmacy not found", "message": str(e)},
        )
    except UnknownMethodError as e:
        raise _invalid_method(e)
    except Exception as e:
        logger.exception("Search on %s failed for '%s'", pharmacy, medicine)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Search failed", "message": str(e)},
        )


@price_router.post(
    "/batch-search",
    responses={
        200: {"model": BatchSearchResponse, "description": "Successful Response"},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def batch_search(
    data: BatchSearchRequest,
    service: PriceComparisonService = Depends(get_price_comparison_service),
) -> Dict[str, Any]:
    """
    Compare several medicines sequentially.

    Args:
        data (BatchSearchRequest): one to five medicine names and an
        optional fetch method.

    Returns:
        The batch results keyed by medicine name and the processed count.
    """
    method = data.method or settings.DEFAULT_METHOD
    try:
        return service.compare_many(data.medicines, method).as_dict()
    except UnknownMethodError as e:
        raise _invalid_method(e)
    except Exception as e:
        logger.exception("Batch search failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Batch search failed", "message": str(e)},
        )
