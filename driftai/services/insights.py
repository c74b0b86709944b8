"""
Insight Service
Asks an OpenAI chat model to explain an analysis in plain Norwegian,
falling back to a canned text whenever the model cannot be reached
"""
import json
import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI

from driftai.core.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Du er en ekspert regnskapsfører som forklarer økonomi på enkelt norsk til små bedrifter."
)

PROMPTS = {
    "liquidity": "Analyser følgende likviditetsdata og gi norsk forklaring og anbefalinger: {data}",
    "cashflow": "Analyser kontantstrømdata og gi norsk analyse: {data}",
    "profitability": "Analyser lønnsomhetsdata og gi norsk innsikt: {data}",
}

FALLBACK_INSIGHTS = {
    "liquidity": "Likviditeten ser stabil ut. Hold øye med kontantstrømmen og sørg for at kundene betaler i tide.",
    "cashflow": "Kontantstrømmen viser positiv utvikling. Fortsett det gode arbeidet med salg og kostnadskontroll.",
    "profitability": "Lønnsomheten er innenfor normale rammer. Vurder å optimalisere de største kostnadene.",
}


def fallback_insight(kind: str) -> str:
    if kind not in FALLBACK_INSIGHTS:
        raise ValueError(f"Unknown analysis kind: {kind}")
    return FALLBACK_INSIGHTS[kind]


class InsightGenerator:
    def __init__(
        self,
        client: Optional[OpenAI] = None,
        model: str = settings.OPENAI_MODEL,
        max_tokens: int = settings.OPENAI_MAX_TOKENS,
        temperature: float = settings.OPENAI_TEMPERATURE,
    ) -> None:
        if client is None and settings.OPENAI_API_KEY:
            client = OpenAI(api_key=settings.OPENAI_API_KEY)
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def build_messages(self, kind: str, data: List[Dict[str, Any]]) -> List[Dict[str, str]]:
        if kind not in PROMPTS:
            raise ValueError(f"Unknown analysis kind: {kind}")
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": PROMPTS[kind].format(data=json.dumps(data, ensure_ascii=False))},
        ]

    def generate(self, kind: str, data: List[Dict[str, Any]]) -> str:
        """Return a natural-language insight for the analysis, never raising for API failures."""
        messages = self.build_messages(kind, data)
        if self._client is None:
            logger.info(f"No OpenAI client configured, using fallback insight for {kind}")
            return fallback_insight(kind)

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.warning(f"OpenAI insight for {kind} failed: {str(e)}")
            return fallback_insight(kind)

        if not content or not content.strip():
            logger.warning(f"OpenAI returned an empty insight for {kind}")
            return fallback_insight(kind)
        return content.strip()
