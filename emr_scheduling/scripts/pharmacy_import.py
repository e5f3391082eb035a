from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.db.session import SessionLocal
from emr_scheduling.models.pharmacy import Pharmacy

logger = logging.getLogger("emr_scheduling.pharmacy_import")

_TRUE_VALUES = {"yes", "true", "y", "1"}

# CSV header -> model attribute
COLUMN_MAP = {
    "NCPDP": "ncpdp",
    "Business_Name": "business_name",
    "Address_Line_1": "address_line_1",
    "City": "city",
    "State": "state",
    "ZipCode": "zipcode",
    "State_Wide_Mail_Order": "state_wide_mail_order",
}
FLAG_MAP = {
    "24HR": "full_day",
    "On_Weno": "on_weno",
    "Test_Pharmacy": "test_pharmacy",
}


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def load_pharmacies(session: Session, rows: Iterable[Mapping[str, str]]) -> dict[str, int]:
    stats = {"created": 0, "updated": 0, "skipped": 0}
    for row in rows:
        ncpdp = _clean(row.get("NCPDP"))
        name = _clean(row.get("Business_Name"))
        if not ncpdp or not name:
            stats["skipped"] += 1
            continue
        pharmacy = session.scalar(select(Pharmacy).where(Pharmacy.ncpdp == ncpdp))
        if pharmacy is None:
            pharmacy = Pharmacy(ncpdp=ncpdp, business_name=name)
            session.add(pharmacy)
            stats["created"] += 1
        else:
            stats["updated"] += 1
        for header, attribute in COLUMN_MAP.items():
            if header in row:
                setattr(pharmacy, attribute, _clean(row[header]))
        for header, attribute in FLAG_MAP.items():
            if header in row:
                setattr(pharmacy, attribute, _flag(row[header]))
        session.flush()
    return stats


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load the pharmacy directory from a CSV export.")
    parser.add_argument("csv_path", type=Path, help="Path to the directory CSV.")
    parser.add_argument("--dry-run", action="store_true", help="Parse and report without committing.")
    args = parser.parse_args(argv)

    session = SessionLocal()
    try:
        with args.csv_path.open(newline="", encoding="utf-8-sig") as handle:
            stats = load_pharmacies(session, csv.DictReader(handle))
        if args.dry_run:
            session.rollback()
        else:
            session.commit()
    finally:
        session.close()

    logger.info("Pharmacy import finished: %s", stats)
    print(
        f"created={stats['created']} updated={stats['updated']} skipped={stats['skipped']}"
        + (" (dry run)" if args.dry_run else "")
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
