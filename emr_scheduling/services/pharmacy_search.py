from __future__ import annotations

import enum
import html
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.models.pharmacy import Pharmacy
from emr_scheduling.services.search import ClauseBuilder, is_empty

_FALSE_FLAGS = {"0", "false", "no", "off"}


class PharmacySearchMode(str, enum.Enum):
    city = "weno_city"
    pharmacy = "weno_pharmacy"
    drop = "weno_drop"


def is_flag_set(value: str | None) -> bool:
    if is_empty(value):
        return False
    return value.strip().lower() not in _FALSE_FLAGS


@dataclass(frozen=True)
class PharmacyFilters:
    coverage: str | None = None
    state: str | None = None
    city: str | None = None
    zipcode: str | None = None
    full_day: bool = False
    weno_only: bool = False
    test_pharmacy: bool = False


def _filter_clauses(filters: PharmacyFilters, *, include_weno_only: bool) -> ClauseBuilder:
    builder = ClauseBuilder()
    builder.equals(Pharmacy.state_wide_mail_order, filters.coverage)
    builder.equals(Pharmacy.state, filters.state)
    builder.equals(Pharmacy.city, filters.city)
    if include_weno_only:
        builder.is_true(Pharmacy.on_weno, filters.weno_only)
    builder.is_true(Pharmacy.full_day, filters.full_day)
    builder.equals(Pharmacy.zipcode, filters.zipcode)
    builder.is_true(Pharmacy.test_pharmacy, filters.test_pharmacy)
    return builder


def format_match(pharmacy: Pharmacy) -> dict[str, str]:
    name = f"{pharmacy.business_name}/ {pharmacy.address_line_1 or ''} / {pharmacy.city or ''}"
    return {"name": html.escape(name), "ncpdp": html.escape(pharmacy.ncpdp)}


def search_cities(db: Session, term: str | None, limit: int) -> list[str]:
    builder = ClauseBuilder().where(Pharmacy.city.is_not(None)).contains(Pharmacy.city, term)
    stmt = builder.apply(select(Pharmacy.city).distinct()).order_by(Pharmacy.city.asc()).limit(limit)
    return [html.escape(city) for city in db.scalars(stmt)]


def search_pharmacies(db: Session, term: str | None, filters: PharmacyFilters) -> list[dict[str, str]]:
    builder = ClauseBuilder().contains(Pharmacy.business_name, term)
    for clause in _filter_clauses(filters, include_weno_only=True).clauses:
        builder.where(clause)
    stmt = builder.apply(select(Pharmacy)).order_by(Pharmacy.business_name.asc())
    return [format_match(row) for row in db.scalars(stmt)]


def search_drop(db: Session, filters: PharmacyFilters) -> list[dict[str, str]]:
    builder = _filter_clauses(filters, include_weno_only=False)
    stmt = builder.apply(select(Pharmacy)).order_by(Pharmacy.business_name.asc())
    return [format_match(row) for row in db.scalars(stmt)]


def search(
    db: Session,
    mode: PharmacySearchMode,
    term: str | None,
    filters: PharmacyFilters,
    *,
    city_limit: int = 10,
) -> list:
    if mode == PharmacySearchMode.city:
        return search_cities(db, term, city_limit)
    if mode == PharmacySearchMode.pharmacy:
        return search_pharmacies(db, term, filters)
    return search_drop(db, filters)
