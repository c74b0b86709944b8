import logging
from typing import Any, Callable, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from driftai.core.config import settings
from driftai.core.security import get_current_user_id
from driftai.db import dynamo
from driftai.models.analysis import AnalysisKind, AnalysisResponse, StoredAnalysis
from driftai.services.insights import InsightGenerator
from driftai.services.tripletex import TripletexClient, fetch_window
from driftai.utils.analyzer import EmptyInputError, FinancialAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)


def get_analyzer() -> FinancialAnalyzer:
    return FinancialAnalyzer(
        starting_balance=settings.STARTING_BALANCE,
        history_months=settings.HISTORY_MONTHS,
        locale=settings.MONTH_LABEL_LOCALE,
    )


def get_insight_generator() -> InsightGenerator:
    return InsightGenerator()


def _run_analysis(
    user_id: str,
    kind: AnalysisKind,
    compute: Callable[[List[Dict[str, Any]]], list],
    insights: InsightGenerator,
) -> Dict[str, Any]:
    """
    Fetch the last TRIPLETEX_FETCH_DAYS of transactions, run one analysis,
    explain it and store the result.
    """
    session_token = dynamo.get_tripletex_token(user_id)
    if not session_token:
        raise HTTPException(status_code=400, detail="Tripletex not configured")

    try:
        date_from, date_to = fetch_window()
        transactions = TripletexClient(session_token).list_transactions(date_from, date_to)
        logger.info(f"Running {kind.value} analysis for user {user_id} on {len(transactions)} transactions")
        data = [row.to_dict() for row in compute(transactions)]
        insight = insights.generate(kind.value, data)
    except EmptyInputError as e:
        logger.info(f"{kind.value} analysis for user {user_id} has no input: {str(e)}")
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"{kind.value} analysis failed for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Analysis failed")

    if dynamo.put_analysis(user_id, kind.value, data, insight) is None:
        logger.warning(f"Could not store {kind.value} analysis for user {user_id}")

    return {"data": data, "aiInsight": insight}


@router.get("/liquidity", response_model=AnalysisResponse)
def liquidity_budget(
    weeks: int = Query(4, ge=1, le=52),
    user_id: str = Depends(get_current_user_id),
    analyzer: FinancialAnalyzer = Depends(get_analyzer),
    insights: InsightGenerator = Depends(get_insight_generator),
):
    return _run_analysis(
        user_id,
        AnalysisKind.LIQUIDITY,
        lambda transactions: analyzer.liquidity_budget(transactions, weeks),
        insights,
    )


@router.get("/cashflow", response_model=AnalysisResponse)
def cash_flow_forecast(
    months: int = Query(6, ge=1, le=24),
    user_id: str = Depends(get_current_user_id),
    analyzer: FinancialAnalyzer = Depends(get_analyzer),
    insights: InsightGenerator = Depends(get_insight_generator),
):
    return _run_analysis(
        user_id,
        AnalysisKind.CASHFLOW,
        lambda transactions: analyzer.cash_flow_forecast(transactions, months),
        insights,
    )


@router.get("/profitability", response_model=AnalysisResponse)
def profitability_analysis(
    user_id: str = Depends(get_current_user_id),
    analyzer: FinancialAnalyzer = Depends(get_analyzer),
    insights: InsightGenerator = Depends(get_insight_generator),
):
    return _run_analysis(user_id, AnalysisKind.PROFITABILITY, analyzer.profitability_analysis, insights)


@router.get("/{kind}/history", response_model=List[StoredAnalysis])
def analysis_history(
    kind: AnalysisKind,
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
):
    """Previously computed analyses of one kind, newest first."""
    return dynamo.list_analyses(user_id, kind.value, limit)
