"""initial scoping schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-09-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "partner_companies",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "sites",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("organization_id", GUID(), sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_sites_organization_id", "sites", ["organization_id"], unique=False)
    op.create_table(
        "profiles",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="worker"),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="active"),
        sa.Column("organization_id", GUID(), sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("is_restricted", sa.Boolean(), nullable=True),
        sa.Column("restricted_org_id", GUID(), sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=True),
        sa.Column("partner_company_id", GUID(), sa.ForeignKey("partner_companies.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)
    op.create_index("ix_profiles_organization_id", "profiles", ["organization_id"], unique=False)
    op.create_index("ix_profiles_partner_company_id", "profiles", ["partner_company_id"], unique=False)
    op.create_table(
        "partner_site_mappings",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("partner_company_id", GUID(), sa.ForeignKey("partner_companies.id"), nullable=False),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("partner_company_id", "site_id", name="uq_partner_site_mapping"),
    )
    op.create_index(
        "ix_partner_site_mappings_partner_company_id",
        "partner_site_mappings",
        ["partner_company_id"],
        unique=False,
    )
    op.create_index("ix_partner_site_mappings_site_id", "partner_site_mappings", ["site_id"], unique=False)
    op.create_table(
        "site_partners",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("partner_company_id", GUID(), nullable=False),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=False),
        sa.Column("contract_status", sa.String(length=50), nullable=True),
        sa.Column("assigned_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_site_partners_partner_company_id", "site_partners", ["partner_company_id"], unique=False)
    op.create_table(
        "material_requests",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=False),
        sa.Column("requested_by", GUID(), nullable=True),
        sa.Column("material_name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="pending"),
        sa.Column("approved_by", GUID(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_material_requests_site_id", "material_requests", ["site_id"], unique=False)
    op.create_table(
        "material_shipments",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="preparing"),
        sa.Column("tracking_number", sa.String(length=100), nullable=True),
        sa.Column("shipment_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_material_shipments_site_id", "material_shipments", ["site_id"], unique=False)
    op.create_table(
        "daily_reports",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=False),
        sa.Column("created_by", GUID(), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="draft"),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_daily_reports_site_id", "daily_reports", ["site_id"], unique=False)
    op.create_index("ix_daily_reports_created_by", "daily_reports", ["created_by"], unique=False)
    op.create_index("ix_daily_reports_site_work_date", "daily_reports", ["site_id", "work_date"], unique=False)
    op.create_table(
        "analytics_metrics",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("organization_id", GUID(), nullable=True),
        sa.Column("site_id", GUID(), sa.ForeignKey("sites.id"), nullable=True),
        sa.Column("metric_type", sa.String(length=100), nullable=False),
        sa.Column("metric_date", sa.Date(), nullable=False),
        sa.Column("value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_analytics_metrics_organization_id", "analytics_metrics", ["organization_id"], unique=False)
    op.create_index("ix_analytics_metrics_site_id", "analytics_metrics", ["site_id"], unique=False)
    op.create_index("ix_analytics_metrics_site_date", "analytics_metrics", ["site_id", "metric_date"], unique=False)
    op.create_table(
        "audit_events",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("organization_id", GUID(), nullable=True),
        sa.Column("user_id", GUID(), nullable=True),
        sa.Column("trace_id", sa.String(length=100), nullable=True),
        sa.Column("actor_role", sa.String(length=50), nullable=True),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("resource_type", sa.String(length=100), nullable=True),
        sa.Column("resource_id", sa.String(length=100), nullable=True),
        sa.Column("result", sa.String(length=50), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_events_organization_id", "audit_events", ["organization_id"], unique=False)
    op.create_index("ix_audit_events_user_id", "audit_events", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("analytics_metrics")
    op.drop_table("daily_reports")
    op.drop_table("material_shipments")
    op.drop_table("material_requests")
    op.drop_table("site_partners")
    op.drop_table("partner_site_mappings")
    op.drop_table("profiles")
    op.drop_table("sites")
    op.drop_table("partner_companies")
    op.drop_table("organizations")
