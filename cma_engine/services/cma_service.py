# cma_engine/services/cma_service.py
"""
CMA Report Generator
Turns audited figures and assumptions into the projected statements and
credit-assessment tables a bank asks for with a working capital / term loan
proposal.

Pure computation: no I/O, and a fresh ledger is built on every call.
"""

import logging
from typing import List, Any, Tuple

from cma_engine.config.settings import Settings, settings as default_settings
from cma_engine.models.cma_schemas import CMARequest, CMAReport, ReportTable
from cma_engine.services.cash_flow_service import CashFlowService
from cma_engine.services.formatting import format_lakhs
from cma_engine.services.ledger import Ledger
from cma_engine.services.projection_service import ProjectionService
from cma_engine.services.ratio_service import RatioService

logger = logging.getLogger(__name__)

OPERATING_STATEMENT_ROWS = (
    ("Net Sales", "net_sales"),
    ("Other Operating Income", "other_op_income"),
    ("Total Operating Income", "gross_operating_income"),
    ("Raw Materials Consumed", "raw_materials"),
    ("Direct Wages", "direct_wages"),
    ("Power & Fuel", "power_fuel"),
    ("Total Cost of Sales", "cost_of_sales"),
    ("Gross Profit", "gross_profit"),
    ("Administrative Salary", "admin_salary"),
    ("Rent", "rent"),
    ("Selling Expenses", "selling_expenses"),
    ("Other Expenses", "other_expenses"),
    ("PBDIT", "pbdit"),
    ("Depreciation", "depreciation"),
    ("PBIT", "pbit"),
    ("Interest", "interest"),
    ("PBT", "pbt"),
    ("Tax", "tax"),
    ("PAT", "pat"),
)

# None marks a section heading
BALANCE_SHEET_ROWS = (
    ("LIABILITIES", None),
    ("Share Capital", "share_capital"),
    ("Reserves & Surplus", "reserves_surplus"),
    ("Net Worth", "net_worth"),
    ("Term Loan", "term_loan"),
    ("Unsecured Loan", "unsecured_loan"),
    ("Total Debt", "total_debt"),
    ("Sundry Creditors", "sundry_creditors"),
    ("Other Liabilities", "other_liabilities"),
    ("Total Outside Liabilities", "total_outside_liabilities"),
    ("Total Liabilities & Equity", "total_liabilities"),
    ("ASSETS", None),
    ("Gross Fixed Assets", "gross_fixed_assets"),
    ("Accumulated Depreciation", "acc_depreciation"),
    ("Net Fixed Assets", "net_fixed_assets"),
    ("Investments", "investments"),
    ("Inventory", "inventory"),
    ("Sundry Debtors", "sundry_debtors"),
    ("Cash & Bank", "cash_bank"),
    ("Other Current Assets", "other_current_assets"),
    ("Total Current Assets", "current_assets"),
    ("Total Assets", "total_assets"),
)

REPAYMENT_HEADERS = ["Month", "EMI", "Principal", "Interest", "Outstanding Balance"]


class CMAService:

    def __init__(self, settings: Settings = default_settings):
        self.settings = settings

    # ========== MAIN ENTRY POINT ==========
    def generate(self, request: CMARequest) -> CMAReport:
        return self.generate_with_ledger(request)[0]

    def generate_with_ledger(self, request: CMARequest) -> Tuple[CMAReport, Ledger]:
        """
        Run the pipeline in dependency order:
        projection (depreciation, P&L, loan, balance sheet) -> ratios & MPBF -> cash / fund flow
        The ledger is returned with the report; the service itself holds no per-call state.
        """
        projector = ProjectionService(request, self.settings)
        ledger = projector.project()

        ratios = RatioService(ledger, projector.loan, self.settings)
        flows = CashFlowService(ledger, self.settings)

        headers = ["Particulars"] + ledger.labels

        report = CMAReport(
            operating_statement=ReportTable(headers=headers, body=self._line_rows(ledger, OPERATING_STATEMENT_ROWS)),
            balance_sheet=ReportTable(headers=headers, body=self._line_rows(ledger, BALANCE_SHEET_ROWS)),
            cash_flow=ReportTable(headers=headers, body=flows.cash_flow_rows()),
            ratio_analysis=ReportTable(headers=headers, body=ratios.ratio_rows()),
            # A transition needs a prior year, so the first audited year has no column
            fund_flow=ReportTable(headers=["Particulars"] + ledger.labels[1:], body=flows.fund_flow_rows()),
            mpbf=ReportTable(headers=headers, body=ratios.mpbf_rows()),
            repayment_schedule=ReportTable(headers=REPAYMENT_HEADERS, body=self._repayment_rows(projector)),
            depreciation_schedule=ReportTable(headers=headers, body=self._depreciation_rows(projector, ledger)),
            flags=list(projector.flags),
        )

        logger.info(
            f"CMA report generated: {request.projected_year_count} projected years, "
            f"{len(request.fixed_assets)} fixed assets, loan {request.loan_assumptions.kind.value}, "
            f"{len(report.flags)} flags"
        )
        return report, ledger

    # ========== TABLE BUILDERS ==========
    def _line_rows(self, ledger: Ledger, layout) -> List[List[Any]]:
        lakh = self.settings.LAKH
        rows = []
        for label, name in layout:
            if name is None:
                rows.append([label] + [""] * len(ledger))
            else:
                rows.append([label] + [format_lakhs(v, lakh) for v in ledger.series(name)])
        return rows

    def _repayment_rows(self, projector: ProjectionService) -> List[List[Any]]:
        lakh = self.settings.LAKH
        return [
            [month] + [format_lakhs(v, lakh) for v in (emi, principal, interest, balance)]
            for month, emi, principal, interest, balance in projector.loan.repayment_schedule()
        ]

    def _depreciation_rows(self, projector: ProjectionService, ledger: Ledger) -> List[List[Any]]:
        """
        WDV charge per asset for the projected years, plus the total.
        Audited years carry no per-asset split; their total is the audited charge.
        """
        lakh = self.settings.LAKH
        scheduler = projector.depreciation
        audited = [""] * Ledger.HISTORICAL_YEARS
        rows = []
        for asset in scheduler.fixed_assets:
            label = f"{asset.name or f'Asset {asset.id}'} @ {asset.depreciation_rate_percent:g}%"
            rows.append([label] + audited + [format_lakhs(scheduler.asset_charge(asset, i), lakh)
                                             for i in ledger.projected_indices])
        rows.append(["Total Depreciation"] + [format_lakhs(v, lakh) for v in ledger.series("depreciation")])
        return rows


def generate_cma(request: CMARequest, settings: Settings = default_settings) -> CMAReport:
    """Convenience wrapper around CMAService"""
    if request.projected_year_count < 1:
        raise ValueError("At least one projected year is required")
    return CMAService(settings).generate(request)
