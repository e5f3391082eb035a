"""initial scheduling schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "patient_data",
        sa.Column("pid", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("fname", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("lname", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("drivers_license", sa.String(length=255), nullable=True),
        sa.UniqueConstraint("uuid"),
    )
    op.create_index("ix_patient_data_uuid", "patient_data", ["uuid"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("fname", sa.String(length=255), nullable=True),
        sa.Column("lname", sa.String(length=255), nullable=True),
        sa.Column("npi", sa.String(length=15), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_users_uuid", "users", ["uuid"])

    op.create_table(
        "facility",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.UniqueConstraint("uuid"),
    )
    op.create_index("ix_facility_uuid", "facility", ["uuid"])

    op.create_table(
        "calendar_categories",
        sa.Column("catid", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("constant_id", sa.String(length=255), nullable=False),
        sa.Column("catname", sa.String(length=100), nullable=False),
        sa.Column("cattype", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="900"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("seq", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("aco_spec", sa.String(length=63), nullable=False, server_default="encounters|notes"),
        sa.UniqueConstraint("constant_id"),
    )

    op.create_table(
        "list_options",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("list_id", sa.String(length=100), nullable=False),
        sa.Column("option_id", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("activity", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("toggle_setting_1", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("toggle_setting_2", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.UniqueConstraint("list_id", "option_id", name="uq_list_options_list_option"),
    )
    op.create_index("ix_list_options_list_id", "list_options", ["list_id"])

    op.create_table(
        "calendar_events",
        sa.Column("eid", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("catid", sa.Integer(), sa.ForeignKey("calendar_categories.catid"), nullable=True),
        sa.Column("pid", sa.Integer(), sa.ForeignKey("patient_data.pid"), nullable=True),
        sa.Column("aid", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facility.id"), nullable=True),
        sa.Column("billing_location_id", sa.Integer(), sa.ForeignKey("facility.id"), nullable=True),
        sa.Column("title", sa.String(length=150), nullable=False, server_default=""),
        sa.Column("hometext", sa.Text(), nullable=True),
        sa.Column("room", sa.String(length=20), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("apptstatus", sa.String(length=15), nullable=False, server_default="-"),
        sa.Column(
            "recurrence_unit",
            sa.Enum("day", "week", "month", "year", name="recurrence_unit"),
            nullable=True,
        ),
        sa.Column("recurrence_freq", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("multiple", sa.Integer(), nullable=True),
        sa.Column("informant", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("eventstatus", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("sharing", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("time", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("last_modified", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("uuid"),
    )
    op.create_index("ix_calendar_events_uuid", "calendar_events", ["uuid"])
    op.create_index("ix_calendar_events_pid", "calendar_events", ["pid"])
    op.create_index("ix_calendar_events_event_date", "calendar_events", ["event_date"])
    op.create_index("ix_calendar_events_multiple", "calendar_events", ["multiple"])

    op.create_table(
        "calendar_event_exclusions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("calendar_events.eid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("excluded_on", sa.Date(), nullable=False),
        sa.UniqueConstraint("event_id", "excluded_on", name="uq_event_exclusion_date"),
    )
    op.create_index("ix_calendar_event_exclusions_event_id", "calendar_event_exclusions", ["event_id"])

    op.create_table(
        "pharmacies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ncpdp", sa.String(length=16), nullable=False),
        sa.Column("business_name", sa.String(length=255), nullable=False),
        sa.Column("address_line_1", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("zipcode", sa.String(length=10), nullable=True),
        sa.Column("state_wide_mail_order", sa.String(length=20), nullable=True),
        sa.Column("full_day", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("on_weno", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("test_pharmacy", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_pharmacies_ncpdp", "pharmacies", ["ncpdp"], unique=True)
    op.create_index("ix_pharmacies_business_name", "pharmacies", ["business_name"])
    op.create_index("ix_pharmacies_city", "pharmacies", ["city"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("action", sa.String(length=120), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("request_id", sa.String(length=128), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
    )
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"])
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_entity_id", table_name="audit_logs")
    op.drop_index("ix_audit_logs_entity_type", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_pharmacies_city", table_name="pharmacies")
    op.drop_index("ix_pharmacies_business_name", table_name="pharmacies")
    op.drop_index("ix_pharmacies_ncpdp", table_name="pharmacies")
    op.drop_table("pharmacies")
    op.drop_index("ix_calendar_event_exclusions_event_id", table_name="calendar_event_exclusions")
    op.drop_table("calendar_event_exclusions")
    op.drop_index("ix_calendar_events_multiple", table_name="calendar_events")
    op.drop_index("ix_calendar_events_event_date", table_name="calendar_events")
    op.drop_index("ix_calendar_events_pid", table_name="calendar_events")
    op.drop_index("ix_calendar_events_uuid", table_name="calendar_events")
    op.drop_table("calendar_events")
    sa.Enum(name="recurrence_unit").drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_list_options_list_id", table_name="list_options")
    op.drop_table("list_options")
    op.drop_table("calendar_categories")
    op.drop_index("ix_facility_uuid", table_name="facility")
    op.drop_table("facility")
    op.drop_index("ix_users_uuid", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_patient_data_uuid", table_name="patient_data")
    op.drop_table("patient_data")
