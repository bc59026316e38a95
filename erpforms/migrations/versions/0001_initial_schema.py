"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Tables added:
- users, roles, model_has_roles: users and their role assignments
- branches, warehouses, customers, allocations, items: master data
- chart_of_account_types, chart_of_accounts, setting_journals: ledger setup
- forms, form_histories: document status and transition audit trail
- inventories, journals: postings made by approved forms
- stock_corrections, sales_invoices, delivery_notes and their item tables
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _amount(name: str, **kwargs) -> sa.Column:
    kwargs.setdefault("nullable", False)
    return sa.Column(name, sa.Numeric(20, 4), **kwargs)


def upgrade() -> None:
    """Create users, master data, ledger and form tables."""

    # --- users / roles ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("guard_name", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_roles"),
        sa.UniqueConstraint("name", "guard_name", name="uq_roles_name_guard_name"),
    )

    op.create_table(
        "model_has_roles",
        sa.Column("role_id", sa.Uuid(), nullable=False),
        sa.Column("model_id", sa.Uuid(), nullable=False),
        sa.Column("model_type", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("role_id", "model_id", name="pk_model_has_roles"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], name="fk_model_has_roles_role_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["model_id"], ["users.id"], name="fk_model_has_roles_model_id", ondelete="CASCADE"),
    )

    # --- master data ---
    op.create_table(
        "branches",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_branches"),
    )

    op.create_table(
        "warehouses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_warehouses"),
        sa.ForeignKeyConstraint(["branch_id"], ["branches.id"], name="fk_warehouses_branch_id"),
    )
    op.create_index("ix_warehouses_branch_id", "warehouses", ["branch_id"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_customers"),
    )

    op.create_table(
        "allocations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_allocations"),
    )

    # --- ledger setup ---
    op.create_table(
        "chart_of_account_types",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("alias", sa.String(255), nullable=False),
        sa.Column("is_debit", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_chart_of_account_types"),
    )

    op.create_table(
        "chart_of_accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("type_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.String(10), nullable=False),
        sa.Column("number", sa.String(50), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("alias", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_chart_of_accounts"),
        sa.ForeignKeyConstraint(["type_id"], ["chart_of_account_types.id"], name="fk_chart_of_accounts_type_id"),
    )

    op.create_table(
        "setting_journals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("feature", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("chart_of_account_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_setting_journals"),
        sa.UniqueConstraint("feature", "name", name="uq_setting_journals_feature_name"),
        sa.ForeignKeyConstraint(
            ["chart_of_account_id"], ["chart_of_accounts.id"], name="fk_setting_journals_chart_of_account_id"
        ),
    )
    op.create_index("ix_setting_journals_feature", "setting_journals", ["feature"])

    op.create_table(
        "items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chart_of_account_id", sa.Uuid(), nullable=True),
        sa.Column("code", sa.String(100), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(50), nullable=False),
        _amount("stock"),
        _amount("cogs"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_items"),
        sa.UniqueConstraint("code", name="uq_items_code"),
        sa.ForeignKeyConstraint(["chart_of_account_id"], ["chart_of_accounts.id"], name="fk_items_chart_of_account_id"),
    )

    # --- forms ---
    op.create_table(
        "forms",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("branch_id", sa.Uuid(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("number", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("formable_type", sa.String(100), nullable=False),
        sa.Column("formable_id", sa.Uuid(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        sa.Column("request_approval_to", sa.Uuid(), nullable=True),
        sa.Column("approval_by", sa.Uuid(), nullable=True),
        sa.Column("approval_at", sa.DateTime(), nullable=True),
        sa.Column("approval_reason", sa.Text(), nullable=True),
        sa.Column("approval_status", sa.Integer(), nullable=True),
        sa.Column("request_cancellation_to", sa.Uuid(), nullable=True),
        sa.Column("request_cancellation_by", sa.Uuid(), nullable=True),
        sa.Column("request_cancellation_at", sa.DateTime(), nullable=True),
        sa.Column("request_cancellation_reason", sa.Text(), nullable=True),
        sa.Column("cancellation_approval_by", sa.Uuid(), nullable=True),
        sa.Column("cancellation_approval_at", sa.DateTime(), nullable=True),
        sa.Column("cancellation_approval_reason", sa.Text(), nullable=True),
        sa.Column("cancellation_status", sa.Integer(), nullable=True),
        sa.Column("done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_forms"),
        sa.ForeignKeyConstraint(["branch_id"], ["branches.id"], name="fk_forms_branch_id", ondelete="SET NULL"),
        *[
            sa.ForeignKeyConstraint([column], ["users.id"], name=f"fk_forms_{column}", ondelete="SET NULL")
            for column in (
                "created_by",
                "updated_by",
                "request_approval_to",
                "approval_by",
                "request_cancellation_to",
                "request_cancellation_by",
                "cancellation_approval_by",
            )
        ],
    )
    op.create_index("ix_forms_number", "forms", ["number"], unique=True)
    op.create_index("ix_forms_formable_type", "forms", ["formable_type"])
    op.create_index("ix_forms_formable_id", "forms", ["formable_id"])
    op.create_index("ix_forms_created_at", "forms", ["created_at"])

    op.create_table(
        "form_histories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("form_id", sa.Uuid(), nullable=False),
        sa.Column("transition", sa.String(50), nullable=False),
        sa.Column("from_status", sa.Integer(), nullable=True),
        sa.Column("to_status", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("extra_data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_form_histories"),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], name="fk_form_histories_form_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_form_histories_user_id", ondelete="SET NULL"),
    )
    op.create_index("ix_form_histories_form_id", "form_histories", ["form_id"])
    op.create_index("ix_form_histories_created_at", "form_histories", ["created_at"])

    # --- postings ---
    op.create_table(
        "inventories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("form_id", sa.Uuid(), nullable=False),
        sa.Column("warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        _amount("quantity"),
        sa.Column("unit", sa.String(50), nullable=True),
        _amount("converter"),
        _amount("price"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_inventories"),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], name="fk_inventories_form_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"], name="fk_inventories_warehouse_id"),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], name="fk_inventories_item_id"),
    )
    op.create_index("ix_inventories_form_id", "inventories", ["form_id"])
    op.create_index("ix_inventories_warehouse_id", "inventories", ["warehouse_id"])
    op.create_index("ix_inventories_item_id", "inventories", ["item_id"])

    op.create_table(
        "journals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("form_id", sa.Uuid(), nullable=False),
        sa.Column("journalable_type", sa.String(100), nullable=True),
        sa.Column("journalable_id", sa.Uuid(), nullable=True),
        sa.Column("chart_of_account_id", sa.Uuid(), nullable=False),
        _amount("debit"),
        _amount("credit"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_journals"),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], name="fk_journals_form_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["chart_of_account_id"], ["chart_of_accounts.id"], name="fk_journals_chart_of_account_id"),
    )
    op.create_index("ix_journals_form_id", "journals", ["form_id"])
    op.create_index("ix_journals_chart_of_account_id", "journals", ["chart_of_account_id"])

    # --- transactions ---
    op.create_table(
        "stock_corrections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_stock_corrections"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"], name="fk_stock_corrections_warehouse_id"),
    )
    op.create_index("ix_stock_corrections_warehouse_id", "stock_corrections", ["warehouse_id"])

    op.create_table(
        "stock_correction_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("stock_correction_id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("allocation_id", sa.Uuid(), nullable=True),
        _amount("quantity"),
        sa.Column("unit", sa.String(50), nullable=True),
        _amount("converter"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_stock_correction_items"),
        sa.ForeignKeyConstraint(
            ["stock_correction_id"], ["stock_corrections.id"],
            name="fk_stock_correction_items_stock_correction_id", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], name="fk_stock_correction_items_item_id"),
        sa.ForeignKeyConstraint(
            ["allocation_id"], ["allocations.id"],
            name="fk_stock_correction_items_allocation_id", ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix_stock_correction_items_stock_correction_id", "stock_correction_items", ["stock_correction_id"]
    )

    op.create_table(
        "delivery_notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        sa.Column("warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_delivery_notes"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], name="fk_delivery_notes_customer_id"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"], name="fk_delivery_notes_warehouse_id"),
    )
    op.create_index("ix_delivery_notes_customer_id", "delivery_notes", ["customer_id"])

    op.create_table(
        "delivery_note_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("delivery_note_id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        _amount("quantity"),
        sa.Column("unit", sa.String(50), nullable=True),
        _amount("price"),
        sa.PrimaryKeyConstraint("id", name="pk_delivery_note_items"),
        sa.ForeignKeyConstraint(
            ["delivery_note_id"], ["delivery_notes.id"],
            name="fk_delivery_note_items_delivery_note_id", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], name="fk_delivery_note_items_item_id"),
    )
    op.create_index("ix_delivery_note_items_delivery_note_id", "delivery_note_items", ["delivery_note_id"])

    op.create_table(
        "sales_invoices",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("warehouse_id", sa.Uuid(), nullable=True),
        sa.Column("referenceable_type", sa.String(100), nullable=True),
        sa.Column("referenceable_id", sa.Uuid(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        _amount("discount_percent"),
        _amount("discount_value"),
        sa.Column("type_of_tax", sa.String(20), nullable=False),
        _amount("tax_base"),
        _amount("tax"),
        _amount("amount"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_sales_invoices"),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], name="fk_sales_invoices_customer_id"),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"], name="fk_sales_invoices_warehouse_id"),
    )
    op.create_index("ix_sales_invoices_customer_id", "sales_invoices", ["customer_id"])
    op.create_index("ix_sales_invoices_referenceable_id", "sales_invoices", ["referenceable_id"])

    op.create_table(
        "sales_invoice_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sales_invoice_id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("allocation_id", sa.Uuid(), nullable=True),
        sa.Column("item_name", sa.String(255), nullable=True),
        _amount("quantity"),
        sa.Column("unit", sa.String(50), nullable=True),
        _amount("converter"),
        _amount("price"),
        _amount("discount_percent"),
        _amount("discount_value"),
        sa.Column("taxable", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_sales_invoice_items"),
        sa.ForeignKeyConstraint(
            ["sales_invoice_id"], ["sales_invoices.id"],
            name="fk_sales_invoice_items_sales_invoice_id", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], name="fk_sales_invoice_items_item_id"),
        sa.ForeignKeyConstraint(
            ["allocation_id"], ["allocations.id"],
            name="fk_sales_invoice_items_allocation_id", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_sales_invoice_items_sales_invoice_id", "sales_invoice_items", ["sales_invoice_id"])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        "sales_invoice_items",
        "sales_invoices",
        "delivery_note_items",
        "delivery_notes",
        "stock_correction_items",
        "stock_corrections",
        "journals",
        "inventories",
        "form_histories",
        "forms",
        "items",
        "setting_journals",
        "chart_of_accounts",
        "chart_of_account_types",
        "allocations",
        "customers",
        "warehouses",
        "branches",
        "model_has_roles",
        "roles",
        "users",
    ):
        op.drop_table(table)
