from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.models.category import CalendarCategory
from emr_scheduling.models.list_option import APPOINTMENT_STATUS_LIST, ListOption

# option_id, title, check-in, check-out
DEFAULT_APPOINTMENT_STATUSES = [
    ("-", "None", False, False),
    ("*", "Reminder done", False, False),
    ("+", "Chart pulled", False, False),
    ("x", "Canceled", False, False),
    ("?", "No show", False, False),
    ("@", "Arrived", True, False),
    ("~", "Arrived late", True, False),
    ("!", "Left w/o visit", False, True),
    ("#", "Ins/fin issue", False, False),
    ("<", "In exam room", False, False),
    (">", "Checked out", False, True),
    ("$", "Coding done", False, False),
    ("%", "Canceled < 24h", False, False),
    ("^", "Pending", False, False),
]

# constant_id, name, type, duration (seconds)
DEFAULT_CATEGORIES = [
    ("no_show", "No Show", 0, 0),
    ("in_office", "In Office", 1, 0),
    ("out_of_office", "Out Of Office", 1, 0),
    ("vacation", "Vacation", 1, 0),
    ("office_visit", "Office Visit", 0, 900),
    ("holidays", "Holidays", 2, 86400),
    ("closed", "Closed", 2, 86400),
    ("lunch", "Lunch", 1, 3600),
    ("established_patient", "Established Patient", 0, 900),
    ("new_patient", "New Patient", 0, 1800),
    ("reserved", "Reserved", 1, 900),
]


def ensure_default_statuses(db: Session) -> int:
    existing = db.scalar(select(ListOption.id).where(ListOption.list_id == APPOINTMENT_STATUS_LIST))
    if existing:
        return 0
    for seq, (option_id, title, check_in, check_out) in enumerate(DEFAULT_APPOINTMENT_STATUSES, start=1):
        db.add(
            ListOption(
                list_id=APPOINTMENT_STATUS_LIST,
                option_id=option_id,
                title=title,
                seq=seq * 10,
                activity=True,
                toggle_setting_1=check_in,
                toggle_setting_2=check_out,
            )
        )
    db.commit()
    return len(DEFAULT_APPOINTMENT_STATUSES)


def ensure_default_categories(db: Session) -> int:
    existing = db.scalar(select(CalendarCategory.catid))
    if existing:
        return 0
    for seq, (constant_id, name, cattype, duration) in enumerate(DEFAULT_CATEGORIES, start=1):
        db.add(
            CalendarCategory(
                constant_id=constant_id,
                catname=name,
                cattype=cattype,
                duration=duration,
                active=True,
                seq=seq,
            )
        )
    db.commit()
    return len(DEFAULT_CATEGORIES)
