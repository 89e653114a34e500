"""
Query Catalog

Fixed set of named aggregations over the viewing warehouse. Every chart is a
single group-by with one aggregate, an order and an optional row cap, so the
charts are declared as AggregationSpec entries and compiled by one function
instead of being written out as individual queries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from sqlalchemy import Float, Select, func, literal, select
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import FromClause

from bi_dashboard.database.models import DimDate, DimMovie, DimUser, FactViews

# Revenue earned per view, a business rule rather than a setting
REVENUE_PER_VIEW = 0.05


class ChartOrder(str, Enum):
    """How a chart's rows are ordered"""
    METRIC_DESC = "metric_desc"
    LABEL_ASC = "label_asc"


@dataclass(frozen=True, eq=False)
class AggregationSpec:
    """
    Declarative description of one chart aggregation.

    Attributes:
        name: Route segment and catalog key
        title: Human-readable summary used in the API docs
        source: Table or join the aggregation reads from
        label_field: Response key holding the group label
        label: Column the rows are grouped by
        metric_field: Response key holding the aggregate
        metric: Aggregate expression
        metric_type: Python type the aggregate is coerced to (int or float)
        order: Row ordering
        limit: Maximum number of rows, None for unbounded
        extra_group_by: Additional grouping columns kept out of the response
    """
    name: str
    title: str
    source: FromClause
    label_field: str
    label: ColumnElement
    metric_field: str
    metric: ColumnElement
    metric_type: type = int
    order: ChartOrder = ChartOrder.METRIC_DESC
    limit: Optional[int] = None
    extra_group_by: Tuple[ColumnElement, ...] = field(default_factory=tuple)

    @property
    def group_by(self) -> Tuple[ColumnElement, ...]:
        return (self.label, *self.extra_group_by)

    @property
    def fields(self) -> Tuple[str, str]:
        return (self.label_field, self.metric_field)


# =============================================================================
# SOURCES
# =============================================================================

_views_by_movie = FactViews.__table__.join(
    DimMovie.__table__, FactViews.movie_id == DimMovie.movie_id
)
_views_by_date = FactViews.__table__.join(
    DimDate.__table__, FactViews.date_id == DimDate.date_id
)
_users = DimUser.__table__


# =============================================================================
# CATALOG
# =============================================================================

CHART_SPECS: List[AggregationSpec] = [
    AggregationSpec(
        name="genre-distribution",
        title="Views by genre",
        source=_views_by_movie,
        label_field="genre",
        label=DimMovie.genre,
        metric_field="views",
        metric=func.sum(FactViews.total_views),
        limit=10,
    ),
    AggregationSpec(
        name="views-over-time",
        title="Daily views",
        source=_views_by_date,
        label_field="date",
        label=DimDate.date,
        metric_field="views",
        metric=func.sum(FactViews.total_views),
        order=ChartOrder.LABEL_ASC,
        limit=30,
    ),
    AggregationSpec(
        name="user-distribution",
        title="Users by age group",
        source=_users,
        label_field="age_group",
        label=DimUser.age_group,
        metric_field="count",
        metric=func.count(DimUser.user_id),
    ),
    AggregationSpec(
        name="top-movies",
        title="Most viewed movies",
        source=_views_by_movie,
        label_field="title",
        label=DimMovie.title,
        metric_field="views",
        metric=func.sum(FactViews.total_views),
        limit=10,
        # Same-titled movies stay separate rows
        extra_group_by=(DimMovie.movie_id,),
    ),
    AggregationSpec(
        name="users-by-country",
        title="Users by country",
        source=_users,
        label_field="country",
        label=DimUser.country,
        metric_field="user_count",
        metric=func.count(DimUser.user_id),
        limit=15,
    ),
    AggregationSpec(
        name="revenue-timeline",
        title="Daily revenue",
        source=_views_by_date,
        label_field="date",
        label=DimDate.date,
        metric_field="total_revenue",
        metric=func.sum(
            FactViews.total_views * literal(REVENUE_PER_VIEW, Float),
            type_=Float,
        ),
        metric_type=float,
        order=ChartOrder.LABEL_ASC,
        limit=30,
    ),
]

CHART_CATALOG: Dict[str, AggregationSpec] = {spec.name: spec for spec in CHART_SPECS}


def get_spec(name: str) -> AggregationSpec:
    """
    Look up a chart by name.

    Raises:
        KeyError: If no chart with that name exists
    """
    try:
        return CHART_CATALOG[name]
    except KeyError:
        raise KeyError(f"Unknown chart: {name}") from None


def build_statement(spec: AggregationSpec) -> Select:
    """
    Compile a chart spec into a SELECT.

    Descending-metric charts break ties on the grouping columns ascending so
    that equal totals always come back in the same order.
    """
    label = spec.label.label(spec.label_field)
    metric = spec.metric.label(spec.metric_field)

    stmt = select(label, metric).select_from(spec.source).group_by(*spec.group_by)

    if spec.order is ChartOrder.METRIC_DESC:
        stmt = stmt.order_by(metric.desc(), *(col.asc() for col in spec.group_by))
    else:
        stmt = stmt.order_by(spec.label.asc())

    if spec.limit is not None:
        stmt = stmt.limit(spec.limit)

    return stmt


def build_totals_statement() -> Select:
    """Row counts of the two main dimensions and the fact table, in one round trip."""
    def count_of(table: FromClause):
        return select(func.count()).select_from(table).scalar_subquery()

    return select(
        count_of(DimUser.__table__).label("users"),
        count_of(DimMovie.__table__).label("movies"),
        count_of(FactViews.__table__).label("views"),
    )
