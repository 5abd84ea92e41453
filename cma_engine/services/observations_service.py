# cma_engine/services/observations_service.py
"""
AI Observations
Sends a condensed view of a generated CMA report to Gemini and returns a
credit analyst's commentary on it.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai.types import GenerateContentConfig

from cma_engine.config.settings import Settings, settings as default_settings
from cma_engine.models.cma_schemas import CMAReport, LoanAssumptions

logger = logging.getLogger(__name__)

DSCR_COMFORT_LEVEL = 1.5

OBSERVATIONS_PROMPT = """
You are an expert credit analyst at a major Indian bank, specializing in assessing loan proposals from SME and MSME businesses.

You have been provided with a summary of a company's projected financials from a CMA report. Provide a concise, professional analysis of this data covering:
1. Sales Growth: Comment on the projected sales trend. Is it realistic? Aggressive? Stable?
2. Profitability: Analyze the profitability margins (e.g. PBT as a percentage of sales). Are they improving, declining, or stable?
3. Liquidity: Based on the Current Ratio, comment on the company's ability to meet its short-term obligations.
4. Leverage & Solvency: Comment on the Debt-Equity ratio. How leveraged is the company?
5. Debt Service Capability: Analyze the DSCR. A DSCR greater than {dscr_comfort} is generally considered healthy. Is the company generating enough cash to comfortably repay the proposed loan?
6. Overall Recommendation: Conclude with a brief, high-level opinion on the financial viability of the proposal.

Structure your response as a series of paragraphs. Use professional, banking-industry terminology.

Amounts are in lakhs of rupees unless marked as a ratio or percentage.

Here is the financial data summary:
{report_summary}
"""


class ObservationsUnavailable(RuntimeError):
    """No Gemini API key is configured"""


# ========== A. REPORT SUMMARY ==========
def build_report_summary(report: CMAReport, loan: LoanAssumptions) -> Dict[str, Any]:
    """
    Operating statement and ratio rows keyed by label, the year headers, and
    the facility applied for. Deterministic: the same report gives the same summary.
    """
    return {
        "operatingStatement": [
            {"particular": row[0], "values": row[1:]} for row in report.operating_statement.body
        ],
        "ratios": [
            {"ratio": row[0], "values": row[1:]} for row in report.ratio_analysis.body
        ],
        "headers": report.operating_statement.headers,
        "loanAmount": loan.principal_amount,
        "loanType": loan.kind.value,
    }


def build_observations_prompt(summary: Dict[str, Any]) -> str:
    return OBSERVATIONS_PROMPT.format(
        dscr_comfort=DSCR_COMFORT_LEVEL,
        report_summary=json.dumps(summary, indent=2),
    )


# ========== B. GEMINI CLIENT ==========
_client: Optional[genai.Client] = None


def get_client(settings: Settings = default_settings) -> genai.Client:
    """Created on first use so the engine runs without an API key"""
    global _client
    if _client is None:
        if not settings.GEMINI_API_KEY:
            raise ObservationsUnavailable("CMA_GEMINI_API_KEY is not configured")
        _client = genai.Client(api_key=settings.GEMINI_API_KEY)
    return _client


def _is_retryable(error: Exception) -> bool:
    message = str(error)
    return ("503" in message or "overloaded" in message.lower()
            or "UNAVAILABLE" in message or "Empty response" in message)


async def generate_with_fallback(client: genai.Client, contents, config: GenerateContentConfig,
                                 models: List[str]) -> Any:
    """
    Try each model in turn. Moves on when a model is overloaded or returns no
    text; any other error is raised straight away.
    """
    last_error: Optional[Exception] = None
    for model_name in models:
        try:
            logger.info(f"Requesting CMA observations from {model_name}")
            response = await client.aio.models.generate_content(
                model=model_name,
                contents=contents,
                config=config,
            )
            if not response.text:
                raise ValueError("Empty response from model")
            return response
        except Exception as e:
            logger.warning(f"Model {model_name} failed: {str(e)[:100]}")
            last_error = e
            if _is_retryable(e):
                continue
            raise

    raise last_error or ValueError("No models configured")


# ========== C. OBSERVATIONS ==========
async def get_cma_observations(report: CMAReport, loan: LoanAssumptions,
                               settings: Settings = default_settings,
                               client: Optional[genai.Client] = None) -> str:
    prompt = build_observations_prompt(build_report_summary(report, loan))
    response = await generate_with_fallback(
        client or get_client(settings),
        contents=prompt,
        config=GenerateContentConfig(
            temperature=0.3,
            max_output_tokens=4096,
        ),
        models=settings.OBSERVATION_MODELS,
    )
    return response.text.strip()
