"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:12:40.118203
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


profile_role = postgresql.ENUM("admin", "staff", name="profile_role", create_type=False)


def _identity() -> sa.Column:
    return sa.Column("id", sa.Integer(), sa.Identity(always=True), primary_key=True)


def upgrade() -> None:
    profile_role.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        _identity(),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text("timezone('utc', now())")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_table(
        "profiles",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role", profile_role, nullable=False, server_default="staff"),
        sa.Column("display_name", sa.Text(), nullable=True),
    )
    op.create_table(
        "auth_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text("timezone('utc', now())")),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("ip", postgresql.INET(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])
    op.create_index("ix_auth_sessions_expires_at", "auth_sessions", ["expires_at"])

    op.create_table(
        "venues",
        _identity(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.CheckConstraint("capacity IS NULL OR capacity > 0", name="chk_venue_capacity_gt0"),
    )
    op.create_table(
        "concerts",
        _identity(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("concert_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
    )
    op.create_index("ix_concerts_concert_date", "concerts", ["concert_date"])
    op.create_index("ix_concerts_venue_id", "concerts", ["venue_id"])

    op.create_table(
        "ticket_types",
        _identity(),
        sa.Column("concert_id", sa.Integer(), sa.ForeignKey("concerts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_quantity", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.CheckConstraint("price >= 0", name="chk_ticket_type_price_nonneg"),
        sa.CheckConstraint("total_quantity >= 0", name="chk_ticket_type_quantity_nonneg"),
    )
    op.create_index("ix_ticket_types_concert_active", "ticket_types", ["concert_id", "is_active"])

    op.create_table(
        "sales",
        _identity(),
        sa.Column("concert_id", sa.Integer(), sa.ForeignKey("concerts.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("customer_name", sa.Text(), nullable=False),
        sa.Column("customer_email", sa.Text(), nullable=True),
        sa.Column("customer_phone", sa.Text(), nullable=True),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("sale_date", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("sold_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.CheckConstraint("total_amount >= 0", name="chk_sale_total_nonneg"),
    )
    op.create_index("ix_sales_concert_id", "sales", ["concert_id"])
    op.create_index("ix_sales_customer_name", "sales", ["customer_name"])

    op.create_table(
        "ticket_purchases",
        _identity(),
        sa.Column("sale_id", sa.Integer(), sa.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ticket_type_id", sa.Integer(), sa.ForeignKey("ticket_types.id", ondelete="RESTRICT"),
                  nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_per_ticket", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="chk_purchase_quantity_ge1"),
        sa.CheckConstraint("price_per_ticket >= 0", name="chk_purchase_price_nonneg"),
        sa.CheckConstraint("total_price >= 0", name="chk_purchase_total_nonneg"),
    )
    op.create_index("ix_ticket_purchases_sale_id", "ticket_purchases", ["sale_id"])
    op.create_index("ix_ticket_purchases_ticket_type_id", "ticket_purchases", ["ticket_type_id"])

    op.create_table(
        "unique_tickets",
        sa.Column("id", sa.CHAR(12), primary_key=True),
        sa.Column("purchase_id", sa.Integer(), sa.ForeignKey("ticket_purchases.id", ondelete="CASCADE"),
                  nullable=False),
        sa.Column("ticket_number", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("purchase_id", "ticket_number", name="uq_unique_ticket_purchase_number"),
        sa.CheckConstraint("ticket_number >= 1", name="chk_unique_ticket_number_ge1"),
        sa.CheckConstraint("id ~ '^[A-Z0-9]{12}$'", name="chk_unique_ticket_id_format"),
    )
    op.create_table(
        "check_ins",
        _identity(),
        sa.Column("ticket_id", sa.CHAR(12), sa.ForeignKey("unique_tickets.id", ondelete="RESTRICT"),
                  nullable=False, unique=True),
        sa.Column("checked_in_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("checked_in_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("notes", sa.Text(), nullable=True),
    )

    # For direct SQL callers only; the API issues tickets in issuance_service with the same contract:
    # numbers 1..quantity, [A-Z0-9]{12}, redraw on collision
    op.execute(
        """
        CREATE OR REPLACE FUNCTION create_unique_tickets_for_purchase(p_purchase_id integer)
        RETURNS SETOF unique_tickets
        LANGUAGE plpgsql
        AS $$
        DECLARE
            v_quantity integer;
            v_number integer;
            v_code char(12);
            v_attempt integer;
            alphabet constant text := 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789';
        BEGIN
            SELECT quantity INTO v_quantity FROM ticket_purchases WHERE id = p_purchase_id;
            IF v_quantity IS NULL THEN
                RAISE EXCEPTION 'ticket purchase % not found', p_purchase_id;
            END IF;

            FOR v_number IN 1..v_quantity LOOP
                v_attempt := 0;
                LOOP
                    v_attempt := v_attempt + 1;
                    SELECT string_agg(substr(alphabet, 1 + floor(random() * 36)::int, 1), '')
                      INTO v_code
                      FROM generate_series(1, 12);
                    INSERT INTO unique_tickets (id, purchase_id, ticket_number)
                    VALUES (v_code, p_purchase_id, v_number)
                    ON CONFLICT (id) DO NOTHING;
                    EXIT WHEN FOUND;
                    IF v_attempt >= 5 THEN
                        RAISE EXCEPTION 'could not generate unique ticket id for purchase %', p_purchase_id;
                    END IF;
                END LOOP;
            END LOOP;

            RETURN QUERY SELECT * FROM unique_tickets WHERE purchase_id = p_purchase_id ORDER BY ticket_number;
        END;
        $$
        """
    )

    op.execute("CREATE SCHEMA IF NOT EXISTS audit")
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS audit.audit_logs(
            id BIGINT GENERATED ALWAYS AS IDENTITY,
            ts_utc timestamptz NOT NULL DEFAULT now(),
            request_id text,
            scope text NOT NULL,
            action text NOT NULL,
            actor_user_id bigint,
            actor_roles text[] NOT NULL DEFAULT '{}',
            actor_ip inet,
            route text,
            object_type text,
            object_id text,
            concert_id bigint,
            sale_id bigint,
            ticket_id char(12),
            status text NOT NULL,
            reason text,
            meta jsonb NOT NULL DEFAULT '{}'::jsonb,
            CONSTRAINT chk_audit_status CHECK (status IN ('SUCCESS','FAIL')),
            PRIMARY KEY (ts_utc, id)
        ) PARTITION BY RANGE (ts_utc)
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_ts ON audit.audit_logs (ts_utc DESC)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_actor_ts ON audit.audit_logs (actor_user_id, ts_utc DESC)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_action_ts ON audit.audit_logs (action, ts_utc DESC)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_obj ON audit.audit_logs (object_type, object_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_concert ON audit.audit_logs (concert_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_sale ON audit.audit_logs (sale_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_ticket ON audit.audit_logs (ticket_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_audit_logs_meta_gin ON audit.audit_logs USING gin (meta jsonb_path_ops)")
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS audit.audit_logs_default
          PARTITION OF audit.audit_logs DEFAULT
        """
    )


def downgrade() -> None:
    op.execute("DROP SCHEMA IF EXISTS audit CASCADE")
    op.execute("DROP FUNCTION IF EXISTS create_unique_tickets_for_purchase(integer)")
    op.drop_table("check_ins")
    op.drop_table("unique_tickets")
    op.drop_table("ticket_purchases")
    op.drop_table("sales")
    op.drop_table("ticket_types")
    op.drop_table("concerts")
    op.drop_table("venues")
    op.drop_table("auth_sessions")
    op.drop_table("profiles")
    op.drop_table("users")
    profile_role.drop(op.get_bind(), checkfirst=True)
