"""
Response Mapper

Shapes catalog result rows into the JSON payloads the API promises. Drivers
may hand back aggregates as Decimal or as text for large integers, so every
metric is parsed to a native number before it is serialized.
"""

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional

from bi_dashboard.analytics.catalog import AggregationSpec
from bi_dashboard.exceptions import ResponseMappingError

TOTALS_FIELDS = ("users", "movies", "views")


def _field(row: Mapping[str, Any], name: str) -> Any:
    try:
        return row[name]
    except KeyError:
        raise ResponseMappingError(f"Result row has no '{name}' column") from None


def to_int(value: Any, field: str) -> int:
    """
    Parse an integral aggregate.

    Accepts int, integral Decimal/float and numeric text. Rejects bools,
    nulls and fractional values.
    """
    if value is None or isinstance(value, bool):
        raise ResponseMappingError(f"'{field}' is {value!r}, expected an integer")
    if isinstance(value, int):
        return value

    try:
        number = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ResponseMappingError(f"'{field}' is {value!r}, expected an integer") from None

    if not number.is_finite() or number != number.to_integral_value():
        raise ResponseMappingError(f"'{field}' is {value!r}, expected an integer")
    return int(number)


def to_float(value: Any, field: str) -> float:
    """Parse a fractional aggregate such as revenue."""
    if value is None or isinstance(value, bool):
        raise ResponseMappingError(f"'{field}' is {value!r}, expected a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ResponseMappingError(f"'{field}' is {value!r}, expected a number") from None

    if not math.isfinite(number):
        raise ResponseMappingError(f"'{field}' is {value!r}, expected a finite number")
    return number


def to_label(value: Any) -> Optional[str]:
    """Render a group label; dates become ISO YYYY-MM-DD strings."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def map_totals(row: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Map the totals row to ``{"users", "movies", "views"}``."""
    if row is None:
        raise ResponseMappingError("Totals query returned no row")
    return {name: to_int(_field(row, name), name) for name in TOTALS_FIELDS}


def map_chart_rows(
    spec: AggregationSpec,
    rows: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Map chart rows to a list of two-key objects in query order.

    Args:
        spec: Catalog entry the rows came from
        rows: Result rows keyed by column label

    Returns:
        One dict per row, keyed by the spec's label and metric fields
    """
    coerce = to_float if spec.metric_type is float else to_int

    return [
        {
            spec.label_field: to_label(_field(row, spec.label_field)),
            spec.metric_field: coerce(_field(row, spec.metric_field), spec.metric_field),
        }
        for row in rows
    ]
