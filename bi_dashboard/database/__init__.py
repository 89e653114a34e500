"""
Database Module
"""
from .connection import WarehousePool
from .models import Base, DimDate, DimMovie, DimUser, FactViews

__all__ = [
    "WarehousePool",
    "Base",
    "DimDate",
    "DimMovie",
    "DimUser",
    "FactViews",
]
