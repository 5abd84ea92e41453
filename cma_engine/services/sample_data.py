# cma_engine/services/sample_data.py
"""
Demo company used by the report screen and the generate_cma script.
"""

from typing import Dict, List

from cma_engine.models.cma_schemas import (
    CMARequest, GrowthAssumptions, LoanAssumptions, LoanKind, FixedAsset
)


def get_initial_financials() -> Dict[str, List[float]]:
    """
    Two audited years, INR. A fresh copy on every call.
    Cash & Bank is stated so that both audited balance sheets tally (liabilities
    of 300 and 315 lakhs); the fund flow of the first transitions depends on it.
    """
    return {
        # P&L Items
        "net_sales": [5_00_00_000, 6_00_00_000],
        "other_op_income": [5_00_000, 6_00_000],
        "raw_materials": [2_50_00_000, 3_00_00_000],
        "direct_wages": [50_00_000, 60_00_000],
        "power_fuel": [10_00_000, 12_00_000],
        "depreciation": [15_00_000, 18_00_000],
        "admin_salary": [30_00_000, 36_00_000],
        "rent": [12_00_000, 12_00_000],
        "selling_expenses": [20_00_000, 24_00_000],
        "other_expenses": [8_00_000, 9_60_000],
        "interest": [10_00_000, 9_00_000],
        "tax": [15_00_000, 18_00_000],
        # Balance Sheet Items
        "share_capital": [1_00_00_000, 1_00_00_000],
        "reserves_surplus": [50_00_000, 70_00_000],
        "term_loan": [80_00_000, 65_00_000],
        "unsecured_loan": [20_00_000, 20_00_000],
        "sundry_creditors": [40_00_000, 48_00_000],
        "other_liabilities": [10_00_000, 12_00_000],
        "gross_fixed_assets": [2_00_00_000, 2_20_00_000],
        "acc_depreciation": [30_00_000, 48_00_000],
        "investments": [5_00_000, 5_00_000],
        "inventory": [30_00_000, 36_00_000],
        "sundry_debtors": [80_00_000, 96_00_000],
        "cash_bank": [10_00_000, 0],
        "other_current_assets": [5_00_000, 6_00_000],
    }


def get_default_request() -> CMARequest:
    """Sample financials with the report screen's starting assumptions"""
    return CMARequest(
        historical_ledger=get_initial_financials(),
        projected_year_count=5,
        growth_assumptions=GrowthAssumptions(
            revenue_growth_percent=[15, 18, 20, 22, 25],
            expense_change_percent=[10, 12, 14, 15, 18],
        ),
        loan_assumptions=LoanAssumptions(
            kind=LoanKind.TERM_LOAN,
            principal_amount=50_00_000,
            annual_interest_rate_percent=11,
            repayment_years=5,
        ),
        fixed_assets=[
            FixedAsset(id=1, name="Plant & Machinery", cost=10_00_000, depreciation_rate_percent=15, addition_year_index=0),
            FixedAsset(id=2, name="Office Equipment", cost=2_50_000, depreciation_rate_percent=20, addition_year_index=0),
        ],
    )
