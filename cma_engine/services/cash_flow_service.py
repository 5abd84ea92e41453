# cma_engine/services/cash_flow_service.py
"""
Cash flow (indirect method) and fund flow statements, both derived from
year-on-year movements in the completed ledger.
"""

from typing import Dict, List, Any

from cma_engine.config.settings import Settings, settings as default_settings
from cma_engine.services.formatting import format_lakhs
from cma_engine.services.ledger import Ledger

CASH_FLOW_ROWS = (
    ("A. Cash Flow from Operations", "operations"),
    ("B. Cash Flow from Investing", "investing"),
    ("C. Cash Flow from Financing", "financing"),
    ("Net Change in Cash", "net_change"),
    ("Opening Cash & Bank", "opening_cash"),
    ("Closing Cash & Bank", "closing_cash"),
)

# None marks a section heading
FUND_FLOW_ROWS = (
    ("SOURCES", None),
    ("Profit After Tax", "profit_after_tax"),
    ("Depreciation", "depreciation"),
    ("Increase in Term Loan", "term_loan_increase"),
    ("TOTAL SOURCES", "total_sources"),
    ("USES", None),
    ("Purchase of Fixed Assets", "fixed_asset_purchase"),
    ("Increase in Working Capital", "working_capital_increase"),
    ("Repayment of Term Loan", "term_loan_repayment"),
    ("TOTAL USES", "total_uses"),
)


class CashFlowService:

    def __init__(self, ledger: Ledger, settings: Settings = default_settings):
        self.ledger = ledger
        self.settings = settings

    # ========== A. CASH FLOW ==========
    def cash_flows(self) -> List[Dict[str, float]]:
        """
        CFO = Change in PAT + Depreciation - Change in Debtors - Change in Inventory
              + Change in Creditors
        CFI = -(Change in Gross Fixed Assets)
        CFF = Change in Term Loan
        The first year has no prior year and shows zeros; the chain of opening
        balances starts from nil in the first year that has one.
        """
        flows = []
        closing = 0.0
        for i, y in enumerate(self.ledger):
            if i == 0:
                flows.append({key: 0.0 for _, key in CASH_FLOW_ROWS})
                continue

            prev = self.ledger[i - 1]
            operations = ((y.pat - prev.pat) + y.depreciation
                          - (y.sundry_debtors - prev.sundry_debtors)
                          - (y.inventory - prev.inventory)
                          + (y.sundry_creditors - prev.sundry_creditors))
            investing = -(y.gross_fixed_assets - prev.gross_fixed_assets)
            financing = y.term_loan - prev.term_loan
            net_change = operations + investing + financing

            opening = closing
            closing = opening + net_change
            flows.append({
                "operations": operations,
                "investing": investing,
                "financing": financing,
                "net_change": net_change,
                "opening_cash": opening,
                "closing_cash": closing,
            })
        return flows

    def cash_flow_rows(self) -> List[List[Any]]:
        flows = self.cash_flows()
        lakh = self.settings.LAKH
        return [[label] + [format_lakhs(f[key], lakh) for f in flows] for label, key in CASH_FLOW_ROWS]

    # ========== B. FUND FLOW ==========
    def fund_flows(self) -> List[Dict[str, float]]:
        """
        One entry per year transition (FY-2 -> FY-1, FY-1 -> Projected FY-1, ...).
        Sources: PAT (movement in reserves), depreciation, fresh term loan.
        Uses: fixed asset purchase, increase in working capital gap, loan repayment.
        """
        flows = []
        for i in range(1, len(self.ledger)):
            y, prev = self.ledger[i], self.ledger[i - 1]
            loan_change = y.term_loan - prev.term_loan

            sources = {
                "profit_after_tax": y.reserves_surplus - prev.reserves_surplus,
                "depreciation": y.depreciation,
                "term_loan_increase": max(0.0, loan_change),
            }
            uses = {
                "fixed_asset_purchase": y.gross_fixed_assets - prev.gross_fixed_assets,
                "working_capital_increase": y.working_capital_gap - prev.working_capital_gap,
                "term_loan_repayment": max(0.0, -loan_change),
            }
            flows.append({
                **sources,
                "total_sources": sum(sources.values()),
                **uses,
                "total_uses": sum(uses.values()),
            })
        return flows

    def fund_flow_rows(self) -> List[List[Any]]:
        flows = self.fund_flows()
        lakh = self.settings.LAKH
        rows = []
        for label, key in FUND_FLOW_ROWS:
            if key is None:
                rows.append([label] + [""] * len(flows))
            else:
                rows.append([label] + [format_lakhs(f[key], lakh) for f in flows])
        return rows
