from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisKind(str, Enum):
    LIQUIDITY = "liquidity"
    CASHFLOW = "cashflow"
    PROFITABILITY = "profitability"


class TripletexSetup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_token: str = Field(min_length=1, alias="sessionToken")


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: List[Any]
    ai_insight: str = Field(alias="aiInsight")


class StoredAnalysis(BaseModel):
    analysis_id: str
    kind: AnalysisKind
    data: List[Any]
    insight: Optional[str] = None
    created_at: str
