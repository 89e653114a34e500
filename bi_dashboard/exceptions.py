"""
Error Taxonomy

Every failure on the read path is raised as a DashboardError subclass. The
HTTP layer collapses all of them into one generic 500 response; the detail
only ever reaches the server-side log.
"""

from typing import Optional


class DashboardError(Exception):
    """Base exception for BI Dashboard errors."""

    def __init__(self, message: str, query: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.query = query


class WarehouseConnectionError(DashboardError):
    """The warehouse is unreachable or rejected the credentials."""


class QueryExecutionError(DashboardError):
    """An aggregation statement failed while executing."""


class ResponseMappingError(DashboardError):
    """A result row is missing a field or holds an unusable value."""
