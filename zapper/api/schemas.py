"""Pydantic request/response models for the quote API.

Amounts are uint256 decimal strings, field names are camelCase on the
wire and snake_case in Python.
"""

from pydantic import BaseModel, Field

from zapper.constants import BPS
from zapper.models.trade import FeeConfiguration, ZapInQuote, ZapOutQuote
from zapper.models.types import Address, Uint256


class PoolSnapshot(BaseModel):
    """State of a DMM pool at the block the quote is for."""

    address: Address
    factory: Address
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    v_reserve0: Uint256 | None = Field(
        default=None,
        alias="vReserve0",
        description="Virtual reserve of token0; defaults to reserve0 (no amplification).",
    )
    v_reserve1: Uint256 | None = Field(default=None, alias="vReserve1")
    fee_in_precision: Uint256 = Field(
        alias="feeInPrecision",
        description="Swap fee as a fraction of 1e18.",
    )
    amp_bps: int = Field(default=BPS, alias="ampBps", ge=BPS)
    k_last: Uint256 = Field(default="0", alias="kLast")
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}


class FeeConfigurationModel(BaseModel):
    """Protocol fee configuration of the pool's factory."""

    fee_to: Address | None = Field(default=None, alias="feeTo")
    government_fee_bps: int = Field(default=0, alias="governmentFeeBps", ge=0, le=BPS)

    model_config = {"populate_by_name": True}

    def to_fee_configuration(self) -> FeeConfiguration:
        return FeeConfiguration(fee_to=self.fee_to, government_fee_bps=self.government_fee_bps)


class ZapInQuoteRequest(BaseModel):
    """Quote a zap in of amount_in of token_in."""

    pool: PoolSnapshot
    fee_configuration: FeeConfigurationModel = Field(
        default_factory=FeeConfigurationModel, alias="feeConfiguration"
    )
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class ZapOutQuoteRequest(BaseModel):
    """Quote a zap out of `liquidity` LP tokens into token_out."""

    pool: PoolSnapshot
    fee_configuration: FeeConfigurationModel = Field(
        default_factory=FeeConfigurationModel, alias="feeConfiguration"
    )
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    liquidity: Uint256

    model_config = {"populate_by_name": True}


class SwapAmountsResponse(BaseModel):
    swap_in: Uint256 = Field(alias="swapIn")
    swap_out: Uint256 = Field(alias="swapOut")

    model_config = {"populate_by_name": True}


class ZapInQuoteResponse(BaseModel):
    swap_in: Uint256 = Field(alias="swapIn")
    swap_out: Uint256 = Field(alias="swapOut")
    token_in_amount: Uint256 = Field(alias="tokenInAmount")
    token_out_amount: Uint256 = Field(alias="tokenOutAmount")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: ZapInQuote) -> "ZapInQuoteResponse":
        return cls(
            swap_in=quote.swap_in,
            swap_out=quote.swap_out,
            token_in_amount=quote.token_in_amount,
            token_out_amount=quote.token_out_amount,
        )


class ZapOutQuoteResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    swap_out: Uint256 = Field(alias="swapOut")
    total_out: Uint256 = Field(alias="totalOut")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: ZapOutQuote) -> "ZapOutQuoteResponse":
        return cls(
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            swap_out=quote.swap_out,
            total_out=quote.total_out,
        )
