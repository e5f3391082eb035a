from emr_scheduling.models.base import Base
from emr_scheduling.models.audit_log import AuditLog
from emr_scheduling.models.patient import Patient
from emr_scheduling.models.provider import Provider
from emr_scheduling.models.facility import Facility
from emr_scheduling.models.category import CalendarCategory
from emr_scheduling.models.list_option import APPOINTMENT_STATUS_LIST, ListOption
from emr_scheduling.models.appointment import CalendarEvent, CalendarEventExclusion, RecurrenceUnit
from emr_scheduling.models.pharmacy import Pharmacy

__all__ = [
    "Base",
    "AuditLog",
    "Patient",
    "Provider",
    "Facility",
    "CalendarCategory",
    "APPOINTMENT_STATUS_LIST",
    "ListOption",
    "CalendarEvent",
    "CalendarEventExclusion",
    "RecurrenceUnit",
    "Pharmacy",
]
