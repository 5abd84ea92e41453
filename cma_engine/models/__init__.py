from .cma_schemas import (
    LoanKind, LoanAssumptions, GrowthAssumptions, FixedAsset,
    YearFigures, LINE_ITEMS, canonical_line_item,
    CMARequest, ReportTable, CMAReport, ObservationsResponse
)

__all__ = [
    'LoanKind',
    'LoanAssumptions',
    'GrowthAssumptions',
    'FixedAsset',
    'YearFigures',
    'LINE_ITEMS',
    'canonical_line_item',
    'CMARequest',
    'ReportTable',
    'CMAReport',
    'ObservationsResponse'
]
