"""Profit figures and the percent-return convention."""

from dataclasses import dataclass, field
from decimal import Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def profit_percent(raw: Decimal, cost: Decimal) -> Decimal:
    """
    Percentage return of a raw profit against its cost base.

    Magnitude is |raw| / cost * 100, re-signed to match raw. A raw value of
    exactly zero is 0% regardless of cost, and a non-positive cost base yields
    0% instead of dividing by zero.
    """
    if raw == ZERO or cost <= ZERO:
        return ZERO
    magnitude = abs(raw) / cost * HUNDRED
    return -magnitude if raw < ZERO else magnitude


@dataclass(frozen=True)
class ProfitFigures:
    """
    Realised and unrealised cost/gain for one entry, day, week or month.

    Rollups add raw dollar figures; percentages are always derived from the
    summed raw and cost values, never averaged.
    """

    realised_cost: Decimal = field(default=ZERO)
    realised_gain: Decimal = field(default=ZERO)
    unrealised_cost: Decimal = field(default=ZERO)
    unrealised_gain: Decimal = field(default=ZERO)
    realised_profit_raw: Decimal = field(default=ZERO)
    unrealised_profit_raw: Decimal = field(default=ZERO)

    @property
    def combined_profit_raw(self) -> Decimal:
        return self.realised_profit_raw + self.unrealised_profit_raw

    @property
    def combined_cost(self) -> Decimal:
        return self.realised_cost + self.unrealised_cost

    @property
    def realised_profit_percent(self) -> Decimal:
        return profit_percent(self.realised_profit_raw, self.realised_cost)

    @property
    def unrealised_profit_percent(self) -> Decimal:
        return profit_percent(self.unrealised_profit_raw, self.unrealised_cost)

    @property
    def combined_profit_percent(self) -> Decimal:
        return profit_percent(self.combined_profit_raw, self.combined_cost)

    def __add__(self, other: "ProfitFigures") -> "ProfitFigures":
        if not isinstance(other, ProfitFigures):
            return NotImplemented
        return ProfitFigures(
            realised_cost=self.realised_cost + other.realised_cost,
            realised_gain=self.realised_gain + other.realised_gain,
            unrealised_cost=self.unrealised_cost + other.unrealised_cost,
            unrealised_gain=self.unrealised_gain + other.unrealised_gain,
            realised_profit_raw=self.realised_profit_raw + other.realised_profit_raw,
            unrealised_profit_raw=self.unrealised_profit_raw + other.unrealised_profit_raw,
        )
