# cma_engine/services/projection_service.py
"""
Projection Engine
Rolls the audited ledger forward one year at a time.

For every projected year the stages run in a fixed order, each reading the
previous (frozen) year and whatever the current draft already holds:
    1. Operating lines     - growth / expense assumptions
    2. Profit waterfall    - depreciation schedule, loan interest, tax
    3. Balance sheet       - roll-forward, working capital heuristics, cash plug
"""

import logging
from typing import List

from cma_engine.config.settings import Settings, settings as default_settings
from cma_engine.models.cma_schemas import CMARequest, YearFigures
from cma_engine.services.depreciation import DepreciationScheduler
from cma_engine.services.formatting import format_lakhs
from cma_engine.services.ledger import Ledger, YearBuilder
from cma_engine.services.loan_service import LoanAmortizer

logger = logging.getLogger(__name__)

REVENUE_LINES = ("net_sales", "other_op_income")
EXPENSE_LINES = (
    "raw_materials", "direct_wages", "power_fuel",
    "admin_salary", "rent", "selling_expenses", "other_expenses",
)


class ProjectionService:

    def __init__(self, request: CMARequest, settings: Settings = default_settings):
        self.request = request
        self.settings = settings
        self.depreciation = DepreciationScheduler(request.fixed_assets)
        self.loan = LoanAmortizer(request.loan_assumptions, settings)
        self.flags: List[str] = []

    def project(self) -> Ledger:
        """Historical ledger + assumptions -> complete ledger of 2 + N years"""
        self.flags = []
        ledger = Ledger.from_historical(self.request.historical_ledger,
                                        self.request.projected_year_count)

        for i in ledger.projected_indices:
            prev = ledger[i - 1]
            draft = YearBuilder(i)

            self._project_operating_lines(draft, prev, i)
            self._project_profit(draft, prev, i)
            self._project_balance_sheet(draft, prev, i)

            figures = draft.build()
            self._check_funding_gap(figures, ledger.labels[i])
            ledger.append(figures)

        return ledger

    # ========== 1. OPERATING LINES ==========
    def _project_operating_lines(self, draft: YearBuilder, prev: YearFigures, i: int):
        """
        Revenue line (i) = Revenue line (i-1) x (1 + Revenue Growth %)
        Cost line (i)    = Cost line (i-1) x (1 + Expense Change %)
        """
        growth = self._revenue_growth(i)
        change = self._expense_change(i)

        for name in REVENUE_LINES:
            draft[name] = getattr(prev, name) * (1 + growth)
        for name in EXPENSE_LINES:
            draft[name] = getattr(prev, name) * (1 + change)

    # ========== 2. PROFIT WATERFALL ==========
    def _project_profit(self, draft: YearBuilder, prev: YearFigures, i: int):
        """
        PBDIT = Gross Operating Income - Cost of Sales - Overheads
        PBIT  = PBDIT - Depreciation
        PBT   = PBIT - Interest
        Tax   = 30% of PBT, nil on a loss (no carry-forward)
        """
        draft["depreciation"] = self.depreciation.charge_for_year(i)
        draft["interest"] = self.loan.annual_interest(i, prev.term_loan)

        pbt = draft.preview().pbt
        draft["tax"] = max(0.0, pbt) * self.settings.TAX_RATE

    # ========== 3. BALANCE SHEET ==========
    def _project_balance_sheet(self, draft: YearBuilder, prev: YearFigures, i: int):
        """
        Net worth rolls forward with PAT, debt per the loan terms, working capital
        on holding periods, and Cash & Bank balances the sheet.
        """
        s = self.settings
        change = self._expense_change(i)
        pat = draft.preview().pat

        # Liabilities
        draft["share_capital"] = prev.share_capital
        draft["reserves_surplus"] = prev.reserves_surplus + pat
        draft["unsecured_loan"] = prev.unsecured_loan
        draft["term_loan"] = self.loan.closing_term_loan(i, prev.term_loan)
        draft["sundry_creditors"] = (draft["raw_materials"] / 12) * s.CREDITOR_MONTHS
        draft["other_liabilities"] = prev.other_liabilities * (1 + change)

        # Assets
        draft["gross_fixed_assets"] = prev.gross_fixed_assets + self.depreciation.additions_for_year(i)
        draft["acc_depreciation"] = prev.acc_depreciation + draft["depreciation"]
        draft["investments"] = prev.investments
        draft["inventory"] = (draft["raw_materials"] / 12) * s.INVENTORY_MONTHS
        draft["sundry_debtors"] = (draft["net_sales"] / 12) * s.DEBTOR_MONTHS
        draft["other_current_assets"] = prev.other_current_assets * (1 + change)

        # Cash plug
        draft["cash_bank"] = 0.0
        figures = draft.preview()
        non_cash_assets = (figures.net_fixed_assets + figures.investments + figures.inventory
                           + figures.sundry_debtors + figures.other_current_assets)
        draft["cash_bank"] = figures.total_liabilities - non_cash_assets

    def _check_funding_gap(self, figures: YearFigures, label: str):
        """Negative cash is reported, never corrected"""
        if figures.cash_bank < 0:
            message = (f"Funding gap: negative cash ({format_lakhs(figures.cash_bank, self.settings.LAKH)} lakhs) "
                       f"in {label}")
            logger.warning(message)
            self.flags.append(message)

    # ========== ASSUMPTION LOOKUP ==========
    def _revenue_growth(self, i: int) -> float:
        return self.request.growth_assumptions.revenue_growth_percent[i - Ledger.HISTORICAL_YEARS] / 100

    def _expense_change(self, i: int) -> float:
        return self.request.growth_assumptions.expense_change_percent[i - Ledger.HISTORICAL_YEARS] / 100
