import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from txn_dashboard.engine.fetch_orchestrator import TransactionFetcher
from txn_dashboard.models.transaction import (
    RefreshResponse,
    TransactionFilters,
    TransactionsResponse,
)
from txn_dashboard.services.metrics_service import calculate_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


def _failure(error: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": error})


@router.get("/transactions", response_model=TransactionsResponse)
async def list_transactions(
    request: Request,
    status: Optional[str] = Query(None, description="Canonical status, any case, or 'all'"),
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, gt=0, le=100, description="Order search page size"),
) -> Union[TransactionsResponse, JSONResponse]:
    """
    Returns normalized transactions and headline metrics.

    - Orders are searched from `from` (default: 30 days ago) up to `to`.
    - When the commerce platform is unreachable or returns nothing, the
      synthetic dataset is served and `usingMockData` is true.
    """
    fetcher: TransactionFetcher = request.app.state.fetcher
    settings = request.app.state.settings

    filters = TransactionFilters(
        status=status,
        created_from=from_date
        or datetime.now(timezone.utc) - timedelta(days=settings.DEFAULT_LOOKBACK_DAYS),
        created_to=to_date,
        limit=limit or settings.DEFAULT_PAGE_LIMIT,
    )
    try:
        result = await fetcher.fetch_transactions(filters)
        metrics = calculate_metrics(result.data)
    except Exception:
        logger.error("Error in GET /transactions", exc_info=True)
        return _failure("Failed to fetch transactions")

    return TransactionsResponse(
        data=result.data,
        metrics=metrics,
        using_mock_data=result.using_mock_data,
    )


@router.post("/transactions", response_model=RefreshResponse)
async def refresh_transactions(request: Request) -> Union[RefreshResponse, JSONResponse]:
    """Re-fetches the last 7 days of transactions and recomputes metrics."""
    fetcher: TransactionFetcher = request.app.state.fetcher

    try:
        result = await fetcher.refresh_transactions()
        metrics = calculate_metrics(result.data)
    except Exception:
        logger.error("Error in POST /transactions", exc_info=True)
        return _failure("Failed to refresh transactions")

    message = (
        "Transactions refreshed (mock data)"
        if result.using_mock_data
        else "Transactions refreshed from the commerce platform"
    )
    return RefreshResponse(
        data=result.data,
        metrics=metrics,
        using_mock_data=result.using_mock_data,
        message=message,
    )
