from __future__ import annotations

import math
import random
from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from babel.dates import format_date

STARTING_BALANCE = 250_000
HISTORY_MONTHS = 3
ACTUAL_MONTHS = 3
MONTHLY_GROWTH = 0.05
DEFAULT_LOCALE = "nb_NO"
WEEK_LABEL = "Uke {week}"

INFLOW_VARIATION = (0.9, 1.1)
OUTFLOW_VARIATION = (0.95, 1.05)
ACTUAL_VARIATION = (0.8, 1.2)


class AnalysisError(ValueError):
    """Base class for errors raised while computing an analysis."""


class EmptyInputError(AnalysisError):
    """Raised when an analysis averages over the transaction count and there are none."""


class Category(str, Enum):
    SALES = "Sales"
    PAYROLL = "Payroll"
    RENT = "Rent"
    MARKETING = "Marketing"
    OTHER = "Other"


# (category, share of expenses for actual, share of expenses for budget)
EXPENSE_SPLITS = (
    (Category.PAYROLL, 0.40, 0.38),
    (Category.RENT, 0.15, 0.15),
    (Category.MARKETING, 0.10, 0.12),
    (Category.OTHER, 0.35, 0.35),
)
SALES_BUDGET_RATIO = 0.94


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


@dataclass
class LiquidityWeek:
    label: str
    inflow: int
    outflow: int
    net: int
    cumulative: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CashFlowMonth:
    label: str
    actual: Optional[int]
    forecast: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProfitabilityLine:
    category: Category
    actual: int
    budget: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data


def _amount(transaction: Any) -> float:
    if isinstance(transaction, Mapping):
        value = transaction.get("amount", 0)
    else:
        value = getattr(transaction, "amount", 0)
    return float(value or 0)


def _add_months(day: date, offset: int) -> date:
    index = day.month - 1 + offset
    return date(day.year + index // 12, index % 12 + 1, 1)


class FinancialAnalyzer:
    """
    Turns a list of ledger transactions into the three dashboard analyses.

    The analyzer holds no state between calls. Randomised projections draw
    from ``rng`` (anything with a ``uniform(a, b)`` method); pass a seeded
    ``random.Random`` to get reproducible output.
    """

    def __init__(
        self,
        starting_balance: float = STARTING_BALANCE,
        history_months: int = HISTORY_MONTHS,
        locale: str = DEFAULT_LOCALE,
        rng: Optional[random.Random] = None,
        week_label: str = WEEK_LABEL,
    ) -> None:
        if history_months <= 0:
            raise ValueError("history_months must be positive")
        self._starting_balance = starting_balance
        self._history_months = history_months
        self._locale = locale
        self._rng = rng
        self._week_label = week_label

    def _random(self, rng: Optional[random.Random]) -> random.Random:
        return rng or self._rng or random.Random()

    @staticmethod
    def totals(transactions: Iterable[Any]) -> Dict[str, float]:
        """Split transactions into gross inflow, gross outflow (as a magnitude) and count."""
        inflow = 0.0
        outflow = 0.0
        count = 0
        for tx in transactions:
            amount = _amount(tx)
            if amount > 0:
                inflow += amount
            elif amount < 0:
                outflow += amount
            count += 1
        return {"inflow": inflow, "outflow": abs(outflow), "count": count}

    def liquidity_budget(
        self,
        transactions: Iterable[Any],
        weeks: int = 4,
        rng: Optional[random.Random] = None,
    ) -> List[LiquidityWeek]:
        """
        Project weekly inflow, outflow and running balance.

        Both averages divide by the number of transactions, not by the number
        of inflows or outflows.
        """
        totals = self.totals(transactions)
        if totals["count"] == 0:
            raise EmptyInputError("Cannot build a liquidity budget from an empty transaction list")

        source = self._random(rng)
        average_inflow = totals["inflow"] / totals["count"]
        average_outflow = totals["outflow"] / totals["count"]

        # Running balance adds the rounded net so every row reconciles exactly.
        cumulative = round_half_up(self._starting_balance)
        budget: List[LiquidityWeek] = []
        for week in range(1, weeks + 1):
            inflow = average_inflow * source.uniform(*INFLOW_VARIATION)
            outflow = average_outflow * source.uniform(*OUTFLOW_VARIATION)
            net = round_half_up(inflow - outflow)
            cumulative += net
            budget.append(
                LiquidityWeek(
                    label=self._week_label.format(week=week),
                    inflow=round_half_up(inflow),
                    outflow=round_half_up(outflow),
                    net=net,
                    cumulative=cumulative,
                )
            )
        return budget

    def cash_flow_forecast(
        self,
        transactions: Iterable[Any],
        months: int = 6,
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
    ) -> List[CashFlowMonth]:
        """
        Forecast monthly net cash flow starting from the current month.

        The monthly average is the signed total over a fixed
        ``history_months`` window; the caller is expected to pass roughly
        that much history.
        """
        source = self._random(rng)
        today = today or date.today()
        monthly_average = sum(_amount(tx) for tx in transactions) / self._history_months

        forecast: List[CashFlowMonth] = []
        for i in range(months):
            month_start = _add_months(today, i)
            actual = None
            if i < ACTUAL_MONTHS:
                actual = round_half_up(monthly_average * source.uniform(*ACTUAL_VARIATION))
            forecast.append(
                CashFlowMonth(
                    label=format_date(month_start, "LLL", locale=self._locale),
                    actual=actual,
                    forecast=round_half_up(monthly_average * (1 + MONTHLY_GROWTH * i)),
                )
            )
        return forecast

    def profitability_analysis(self, transactions: Iterable[Any]) -> List[ProfitabilityLine]:
        totals = self.totals(transactions)
        revenue = totals["inflow"]
        expenses = totals["outflow"]

        lines = [
            ProfitabilityLine(
                category=Category.SALES,
                actual=round_half_up(revenue),
                budget=round_half_up(revenue * SALES_BUDGET_RATIO),
            )
        ]
        for category, actual_share, budget_share in EXPENSE_SPLITS:
            lines.append(
                ProfitabilityLine(
                    category=category,
                    actual=round_half_up(-expenses * actual_share),
                    budget=round_half_up(-expenses * budget_share),
                )
            )
        return lines


def compute_liquidity_budget(
    transactions: Iterable[Any],
    weeks: int = 4,
    rng: Optional[random.Random] = None,
) -> List[LiquidityWeek]:
    return FinancialAnalyzer(rng=rng).liquidity_budget(transactions, weeks)


def compute_cash_flow_forecast(
    transactions: Iterable[Any],
    months: int = 6,
    rng: Optional[random.Random] = None,
    locale: str = DEFAULT_LOCALE,
    today: Optional[date] = None,
) -> List[CashFlowMonth]:
    return FinancialAnalyzer(locale=locale, rng=rng).cash_flow_forecast(transactions, months, today=today)


def compute_profitability_analysis(transactions: Iterable[Any]) -> List[ProfitabilityLine]:
    return FinancialAnalyzer().profitability_analysis(transactions)
