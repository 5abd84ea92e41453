# cma_engine/services/ledger.py
"""
Year-indexed CMA ledger.

Index 0 and 1 are the audited years supplied by the caller, index 2 onwards are
projected. A projected year is drafted in a YearBuilder by each stage in turn and
appended to the ledger only once it is complete, as a frozen YearFigures record.
"""

from typing import Dict, List, Iterator, Mapping, Sequence

import pandas as pd

from cma_engine.models.cma_schemas import YearFigures, LINE_ITEMS, canonical_line_item


class YearBuilder:
    """Mutable draft of a single projected year"""

    def __init__(self, index: int):
        self.index = index
        self._values: Dict[str, float] = {}

    def __getitem__(self, name: str) -> float:
        # Reading a line that no stage has produced yet is an ordering bug
        if name not in self._values:
            raise KeyError(f"'{name}' not yet computed for year {self.index}")
        return self._values[name]

    def __setitem__(self, name: str, value: float) -> None:
        if name not in LINE_ITEMS:
            raise KeyError(f"Unknown line item '{name}'")
        self._values[name] = float(value)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def preview(self) -> YearFigures:
        """Figures so far, unset lines as zero. Used for mid-year subtotals."""
        return YearFigures(**self._values)

    def build(self) -> YearFigures:
        missing = [name for name in LINE_ITEMS if name not in self._values]
        if missing:
            raise ValueError(f"Year {self.index} is incomplete, missing: {', '.join(missing)}")
        return YearFigures(**self._values)


class Ledger:
    """Append-only sequence of YearFigures with named accessors"""

    HISTORICAL_YEARS = 2

    def __init__(self, historical: Sequence[YearFigures], projected_year_count: int):
        if len(historical) != self.HISTORICAL_YEARS:
            raise ValueError(f"Expected {self.HISTORICAL_YEARS} historical years, got {len(historical)}")
        self.projected_year_count = projected_year_count
        self._years: List[YearFigures] = list(historical)

    @classmethod
    def from_historical(cls, mapping: Mapping[str, Sequence[float]], projected_year_count: int) -> "Ledger":
        """
        Build from a {line item: [FY-2, FY-1]} mapping.
        Missing line items are zero; the mapping itself is not modified.
        """
        columns: List[Dict[str, float]] = [{}, {}]
        for name, values in mapping.items():
            canonical = canonical_line_item(name)
            if canonical is None:
                raise ValueError(f"Unknown line item '{name}'")
            for year, value in enumerate(values[:cls.HISTORICAL_YEARS]):
                columns[year][canonical] = float(value)
        return cls([YearFigures(**col) for col in columns], projected_year_count)

    # ----- sequence protocol -----
    def __len__(self) -> int:
        return len(self._years)

    def __getitem__(self, index: int) -> YearFigures:
        return self._years[index]

    def __iter__(self) -> Iterator[YearFigures]:
        return iter(self._years)

    def append(self, figures: YearFigures) -> None:
        if self.is_complete:
            raise ValueError("Ledger already holds every projected year")
        self._years.append(figures)

    # ----- shape -----
    @property
    def total_years(self) -> int:
        return self.HISTORICAL_YEARS + self.projected_year_count

    @property
    def is_complete(self) -> bool:
        return len(self._years) == self.total_years

    @property
    def projected_indices(self) -> range:
        return range(self.HISTORICAL_YEARS, self.total_years)

    @property
    def labels(self) -> List[str]:
        return year_labels(self.projected_year_count)

    # ----- accessors -----
    def series(self, name: str) -> List[float]:
        """Values of a line item or derived subtotal (e.g. 'pat') for every year held"""
        return [getattr(year, name) for year in self._years]

    def value(self, name: str, year: int) -> float:
        return getattr(self._years[year], name)

    def to_frame(self) -> pd.DataFrame:
        """Line items as rows, years as columns (INR)"""
        data = {label: year.model_dump() for label, year in zip(self.labels, self._years)}
        return pd.DataFrame(data, index=list(LINE_ITEMS))


def year_labels(projected_year_count: int) -> List[str]:
    return ["Audited FY-2", "Audited FY-1"] + [
        f"Projected FY-{i + 1}" for i in range(projected_year_count)
    ]
