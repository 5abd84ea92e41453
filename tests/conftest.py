"""Shared requests for the CMA engine tests."""

import pytest

from cma_engine.models.cma_schemas import (
    CMARequest, FixedAsset, GrowthAssumptions, LoanAssumptions, LoanKind
)
from cma_engine.services.sample_data import get_default_request, get_initial_financials


def make_request(historical, years=1, revenue_growth=None, expense_change=None,
                 loan=None, fixed_assets=None) -> CMARequest:
    return CMARequest(
        historical_ledger=historical,
        projected_year_count=years,
        growth_assumptions=GrowthAssumptions(
            revenue_growth_percent=revenue_growth or [10] * years,
            expense_change_percent=expense_change or [10] * years,
        ),
        loan_assumptions=loan or LoanAssumptions(kind=LoanKind.OVERDRAFT),
        fixed_assets=fixed_assets or [],
    )


@pytest.fixture
def scenario_request() -> CMARequest:
    """Two audited years, 10% growth, an 80 lakh term loan at 10% over 5 years"""
    return make_request(
        {"netSales": [50_000_000, 60_000_000], "rawMaterials": [25_000_000, 30_000_000]},
        years=1,
        revenue_growth=[10],
        expense_change=[10],
        loan=LoanAssumptions(
            kind=LoanKind.TERM_LOAN,
            principal_amount=8_000_000,
            annual_interest_rate_percent=10,
            repayment_years=5,
        ),
    )


@pytest.fixture
def sample_request() -> CMARequest:
    return get_default_request()


@pytest.fixture
def balanced_request() -> CMARequest:
    """Sample company over 4 years, with a shorter loan and an asset added in year 3"""
    return make_request(
        get_initial_financials(),
        years=4,
        revenue_growth=[15, 18, 20, 22],
        expense_change=[10, 12, 14, 15],
        loan=LoanAssumptions(
            kind=LoanKind.TERM_LOAN,
            principal_amount=5_000_000,
            annual_interest_rate_percent=11,
            repayment_years=3,
        ),
        fixed_assets=[
            FixedAsset(id=1, name="Plant & Machinery", cost=1_000_000, depreciation_rate_percent=15),
            FixedAsset(id=2, name="Packing Line", cost=2_500_000, depreciation_rate_percent=20,
                       addition_year_index=3),
        ],
    )


@pytest.fixture
def build_request():
    """Factory for ad-hoc requests: build_request(historical, years=..., loan=...)"""
    return make_request
