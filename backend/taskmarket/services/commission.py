"""Commission calculator: splits a payment amount into platform fee and worker payout."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from taskmarket.config import settings
from taskmarket.core.errors import InvalidArgument
from taskmarket.models.payment import Payment

Number = Union[Decimal, int, str]

HUNDRED = Decimal("100")
# Scale of the platform_commission column
PERCENT_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class CommissionBreakdown:
    """Derived payment amounts. platform_fee + worker_payout always equals amount."""
    amount: Decimal
    platform_fee: Decimal
    worker_payout: Decimal


def _to_decimal(value: Number, field: str) -> Decimal:
    if isinstance(value, float):
        # Floats carry binary rounding error into money
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidArgument(f"{field} must be a number", entity="payment", field=field)


def calculate_commission(
    amount: Number,
    commission_percent: Number,
    precision: Optional[Decimal] = None,
) -> CommissionBreakdown:
    """
    Compute platform fee and worker payout for an amount.

    The amount and the fee are rounded half-up to the currency precision and
    the payout is the remainder, so the two always sum to the rounded amount.

    Args:
        amount: Gross payment amount (>= 0)
        commission_percent: Platform commission in percent (0-100)
        precision: Currency quantum, defaults to settings.CURRENCY_PRECISION

    Returns:
        CommissionBreakdown

    Raises:
        InvalidArgument: If amount is negative or the percentage is out of range
    """
    amount = _to_decimal(amount, "amount")
    pct = _to_decimal(commission_percent, "platform_commission")
    quantum = precision if precision is not None else settings.CURRENCY_PRECISION

    if amount < 0:
        raise InvalidArgument("Amount must be non-negative", entity="payment", field="amount")
    if not Decimal("0") <= pct <= HUNDRED:
        raise InvalidArgument(
            "Platform commission must be between 0 and 100",
            entity="payment",
            field="platform_commission",
        )

    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    platform_fee = (amount * pct / HUNDRED).quantize(quantum, rounding=ROUND_HALF_UP)
    return CommissionBreakdown(
        amount=amount,
        platform_fee=platform_fee,
        worker_payout=amount - platform_fee,
    )


def apply_commission(payment: Payment) -> Payment:
    """Recompute the derived amounts on a payment; call right before persisting it."""
    pct = _to_decimal(payment.platform_commission, "platform_commission")
    payment.platform_commission = pct.quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)
    breakdown = calculate_commission(payment.amount, payment.platform_commission)
    payment.amount = breakdown.amount
    payment.platform_fee = breakdown.platform_fee
    payment.worker_payout = breakdown.worker_payout
    return payment
