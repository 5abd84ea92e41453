# cma_engine/services/depreciation.py
"""
Written-down-value depreciation for the fixed asset register.
"""

from typing import List

from cma_engine.models.cma_schemas import FixedAsset


class DepreciationScheduler:
    """
    Per-asset WDV depreciation.

    An asset put to use in year k depreciates from year k onwards:
        Opening WDV (year i) = Cost x (1 - rate)^(i - k)
        Charge (year i)      = Opening WDV x rate
    Nothing is charged before year k. A 0% rate is valid and charges nothing.
    """

    def __init__(self, fixed_assets: List[FixedAsset]):
        self.fixed_assets = list(fixed_assets)

    def opening_wdv(self, asset: FixedAsset, year_index: int) -> float:
        if year_index < asset.addition_year_index:
            return 0.0
        rate = asset.depreciation_rate_percent / 100
        years_owned = year_index - asset.addition_year_index
        return asset.cost * (1 - rate) ** years_owned

    def asset_charge(self, asset: FixedAsset, year_index: int) -> float:
        rate = asset.depreciation_rate_percent / 100
        return self.opening_wdv(asset, year_index) * rate

    def charge_for_year(self, year_index: int) -> float:
        """Total depreciation across the register"""
        return sum(self.asset_charge(asset, year_index) for asset in self.fixed_assets)

    def additions_for_year(self, year_index: int) -> float:
        """Cost of assets first put to use in this year (grows the gross block)"""
        return sum(asset.cost for asset in self.fixed_assets
                   if asset.addition_year_index == year_index)
