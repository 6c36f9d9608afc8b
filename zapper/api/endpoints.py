"""API endpoints for zap quotes."""

import structlog
from fastapi import APIRouter, Depends

from zapper.api.schemas import (
    SwapAmountsResponse,
    ZapInQuoteRequest,
    ZapInQuoteResponse,
    ZapOutQuoteRequest,
    ZapOutQuoteResponse,
)
from zapper.api.snapshot import SnapshotQuoter

logger = structlog.get_logger()

router = APIRouter(prefix="/quote")

_default_quoter = SnapshotQuoter()


def get_quoter() -> SnapshotQuoter:
    """Dependency provider for the quoter.

    Override this in tests to inject a quoter with a different config:
        app.dependency_overrides[get_quoter] = lambda: SnapshotQuoter(config)
    """
    return _default_quoter


@router.post("/swap-amounts")
async def swap_amounts(
    request: ZapInQuoteRequest,
    quoter: SnapshotQuoter = Depends(get_quoter),
) -> SwapAmountsResponse:
    """Amount of token_in to swap, and the swap output, for a zap in."""
    orchestrator, pool = quoter.load(request.pool, request.fee_configuration)
    swap_in, swap_out = orchestrator.calculate_swap_amounts(
        request.token_in, request.token_out, pool, int(request.amount_in)
    )
    logger.info("quoted_swap_amounts", pool=pool.address, swap_in=swap_in, swap_out=swap_out)
    return SwapAmountsResponse(swap_in=swap_in, swap_out=swap_out)


@router.post("/zap-in")
async def zap_in(
    request: ZapInQuoteRequest,
    quoter: SnapshotQuoter = Depends(get_quoter),
) -> ZapInQuoteResponse:
    """Amounts deposited into the pool when zapping amount_in of token_in."""
    orchestrator, pool = quoter.load(request.pool, request.fee_configuration)
    quote = orchestrator.calculate_zap_in_amounts(
        request.token_in, request.token_out, pool, int(request.amount_in)
    )
    logger.info(
        "quoted_zap_in",
        pool=pool.address,
        amount_in=request.amount_in,
        swap_in=quote.swap_in,
        swap_out=quote.swap_out,
    )
    return ZapInQuoteResponse.from_quote(quote)


@router.post("/zap-out")
async def zap_out(
    request: ZapOutQuoteRequest,
    quoter: SnapshotQuoter = Depends(get_quoter),
) -> ZapOutQuoteResponse:
    """token_out received for burning `liquidity` and swapping the token_in leg."""
    orchestrator, pool = quoter.load(request.pool, request.fee_configuration)
    quote = orchestrator.quote_zap_out(
        request.token_in, request.token_out, pool, int(request.liquidity)
    )
    logger.info(
        "quoted_zap_out",
        pool=pool.address,
        liquidity=request.liquidity,
        total_out=quote.total_out,
    )
    return ZapOutQuoteResponse.from_quote(quote)
