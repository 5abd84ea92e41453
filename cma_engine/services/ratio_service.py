# cma_engine/services/ratio_service.py
"""
Ratio analysis and MPBF assessment over a completed ledger.
"""

from typing import Dict, List, Optional, Any

from cma_engine.config.settings import Settings, settings as default_settings
from cma_engine.services.formatting import format_lakhs, format_ratio, safe_divide
from cma_engine.services.ledger import Ledger
from cma_engine.services.loan_service import LoanAmortizer

# Row label -> key in RatioService.ratios()
RATIO_ROWS = (
    ("Current Ratio", "current_ratio"),
    ("Quick Ratio", "quick_ratio"),
    ("Debt-Equity Ratio", "debt_equity"),
    ("TOL/TNW", "tol_tnw"),
    ("Net Sales / Total Assets", "asset_turnover"),
    ("PBT / Net Sales (%)", "pbt_margin"),
    ("PAT / Net Sales (%)", "pat_margin"),
    ("ROCE (%)", "roce"),
    ("DSCR", "dscr"),
)

MPBF_ROWS = (
    ("Total Current Assets (TCA)", "total_current_assets"),
    ("Other Current Liabilities (OCL)", "other_current_liabilities"),
    ("Working Capital Gap (WCG = TCA - OCL)", "working_capital_gap"),
    ("Method I: {pct}% of WCG", "method_i"),
    ("Method II: {pct}% of TCA - OCL", "method_ii"),
    ("Assessed Bank Finance (Lower of I & II)", "assessed_bank_finance"),
)


class RatioService:
    """
    Lender ratios per year. A ratio whose denominator is exactly zero is None
    and renders as "N/A".
    """

    def __init__(self, ledger: Ledger, loan: LoanAmortizer, settings: Settings = default_settings):
        self.ledger = ledger
        self.loan = loan
        self.settings = settings

    # ========== A. RATIO ANALYSIS ==========
    def ratios(self, i: int) -> Dict[str, Optional[float]]:
        y = self.ledger[i]
        capital_employed = y.net_worth + y.total_debt
        return {
            "current_ratio": safe_divide(y.current_assets, y.current_liabilities),
            "quick_ratio": safe_divide(y.current_assets - y.inventory, y.current_liabilities),
            "debt_equity": safe_divide(y.total_debt, y.net_worth),
            "tol_tnw": safe_divide(y.total_outside_liabilities, y.net_worth),
            "asset_turnover": safe_divide(y.net_sales, y.total_assets),
            "pbt_margin": self._percent(y.pbt, y.net_sales),
            "pat_margin": self._percent(y.pat, y.net_sales),
            "roce": self._percent(y.pbit, capital_employed),
            "dscr": self.dscr(i),
        }

    def dscr(self, i: int) -> Optional[float]:
        """
        DSCR = (PAT + Interest + Depreciation) / (Interest + Principal due)
        """
        y = self.ledger[i]
        debt_service = y.interest + self.loan.principal_due(i)
        return safe_divide(y.pat + y.interest + y.depreciation, debt_service)

    def ratio_rows(self) -> List[List[Any]]:
        per_year = [self.ratios(i) for i in range(len(self.ledger))]
        return [[label] + [format_ratio(r[key]) for r in per_year] for label, key in RATIO_ROWS]

    # ========== B. MPBF (Tandon Committee) ==========
    def mpbf(self, i: int) -> Dict[str, float]:
        """
        WCG       = TCA - OCL
        Method I  = 75% of WCG
        Method II = 75% of TCA - OCL
        Assessed  = lower of Method I and Method II
        """
        y = self.ledger[i]
        share = 1 - self.settings.MPBF_MARGIN
        tca = y.current_assets
        ocl = y.current_liabilities
        wcg = tca - ocl
        method_i = share * wcg
        method_ii = share * tca - ocl
        return {
            "total_current_assets": tca,
            "other_current_liabilities": ocl,
            "working_capital_gap": wcg,
            "method_i": method_i,
            "method_ii": method_ii,
            "assessed_bank_finance": min(method_i, method_ii),
        }

    def mpbf_rows(self) -> List[List[Any]]:
        per_year = [self.mpbf(i) for i in range(len(self.ledger))]
        lakh = self.settings.LAKH
        pct = f"{(1 - self.settings.MPBF_MARGIN) * 100:g}"
        return [[label.format(pct=pct)] + [format_lakhs(m[key], lakh) for m in per_year]
                for label, key in MPBF_ROWS]

    @staticmethod
    def _percent(numerator: float, denominator: float) -> Optional[float]:
        value = safe_divide(numerator, denominator)
        return None if value is None else value * 100
