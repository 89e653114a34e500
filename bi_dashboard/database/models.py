"""
Database Models - Star Schema Design

Declarative mappings of the viewing warehouse read by the dashboard. The
schema is owned and populated by the warehouse ETL; these models describe it
for query construction and for building test fixtures.

Fact Tables:
- FactViews: Daily view counts per movie

Dimension Tables:
- DimUser: User demographics
- DimMovie: Movie catalog and genres
- DimDate: Calendar dimension
"""

import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all warehouse models"""
    pass


# =============================================================================
# DIMENSION TABLES
# =============================================================================

class DimUser(Base):
    """
    User Dimension Table

    One row per user with the demographic attributes the dashboard groups by.
    """
    __tablename__ = "dim_user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    age_group: Mapped[Optional[str]] = mapped_column(String(20))
    country: Mapped[Optional[str]] = mapped_column(String(100))

    __table_args__ = (
        Index("idx_user_age_group", "age_group"),
        Index("idx_user_country", "country"),
    )

    def __repr__(self) -> str:
        return f"<DimUser(id={self.user_id}, age_group={self.age_group})>"


class DimMovie(Base):
    """
    Movie Dimension Table

    One row per movie. Titles are not unique; movie_id is.
    """
    __tablename__ = "dim_movie"

    movie_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    genre: Mapped[Optional[str]] = mapped_column(String(100))

    __table_args__ = (
        Index("idx_movie_genre", "genre"),
    )

    def __repr__(self) -> str:
        return f"<DimMovie(id={self.movie_id}, title={self.title})>"


class DimDate(Base):
    """
    Date Dimension Table

    Pre-populated calendar dimension, one row per calendar date.
    """
    __tablename__ = "dim_date"

    date_id: Mapped[int] = mapped_column(Integer, primary_key=True)  # YYYYMMDD format
    date: Mapped[datetime.date] = mapped_column(Date, unique=True, nullable=False)
    year: Mapped[Optional[int]] = mapped_column(Integer)
    month: Mapped[Optional[int]] = mapped_column(Integer)
    day_of_week: Mapped[Optional[int]] = mapped_column(Integer)  # 0=Monday

    def __repr__(self) -> str:
        return f"<DimDate(id={self.date_id}, date={self.date})>"


# =============================================================================
# FACT TABLES
# =============================================================================

class FactViews(Base):
    """
    Views Fact Table

    One row per (movie, date) observation with the number of views recorded.
    Grain: movie x day
    """
    __tablename__ = "fact_views"

    movie_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("dim_movie.movie_id"), primary_key=True
    )
    date_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("dim_date.date_id"), primary_key=True
    )
    total_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("total_views >= 0", name="ck_fact_views_non_negative"),
        Index("idx_views_date", "date_id"),
    )

    def __repr__(self) -> str:
        return f"<FactViews(movie={self.movie_id}, date={self.date_id}, views={self.total_views})>"
