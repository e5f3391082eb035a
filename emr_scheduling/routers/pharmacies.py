from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from emr_scheduling.core.settings import settings
from emr_scheduling.db.session import get_db
from emr_scheduling.schemas.pharmacy import PharmacyMatchOut
from emr_scheduling.services import pharmacy_search
from emr_scheduling.services.pharmacy_search import PharmacyFilters, PharmacySearchMode, is_flag_set

router = APIRouter(prefix="/pharmacies", tags=["pharmacies"])


@router.get("/search", response_model=list[str] | list[PharmacyMatchOut])
def search_pharmacies(
    search_for: PharmacySearchMode = Query(alias="searchFor"),
    term: str | None = Query(default=None),
    coverage: str | None = Query(default=None),
    weno_state: str | None = Query(default=None),
    weno_city: str | None = Query(default=None),
    full_day: str | None = Query(default=None),
    weno_only: str | None = Query(default=None),
    weno_zipcode: str | None = Query(default=None),
    test_pharmacy: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    filters = PharmacyFilters(
        coverage=coverage,
        state=weno_state,
        city=weno_city,
        zipcode=weno_zipcode,
        full_day=is_flag_set(full_day),
        weno_only=is_flag_set(weno_only),
        test_pharmacy=is_flag_set(test_pharmacy),
    )
    return pharmacy_search.search(
        db,
        search_for,
        term,
        filters,
        city_limit=settings.pharmacy_city_search_limit,
    )
