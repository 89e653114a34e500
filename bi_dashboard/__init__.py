"""
BI Dashboard API

Read-only business-intelligence metrics over the viewing warehouse.
"""

__version__ = "1.0.0"
