"""SQLAlchemy table definitions for Tether.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# Constraint names the repositories translate into domain errors
ACCOUNT_EMAIL_CONSTRAINT = "uq_accounts_email"
IDENTITY_PROVIDER_UID_CONSTRAINT = "uq_identities_provider_uid"

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("email", String(255), nullable=False),  # Normalized (lower-case)
    Column("display_name", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column("confirmed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("credential_hash", String(255), nullable=False),  # "!" prefix = unusable
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("email", name=ACCOUNT_EMAIL_CONSTRAINT),
)

# ============================================================================
# IDENTITIES TABLE (one row per linked provider account)
# ============================================================================
identities_table = Table(
    "identities",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("provider", String(50), nullable=False),  # 'google', 'facebook'
    Column("uid", String(255), nullable=False),  # Provider-scoped user ID
    Column("email", String(255), nullable=True),  # Email claimed by the provider
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint("provider", "uid", name=IDENTITY_PROVIDER_UID_CONSTRAINT),
)

Index("idx_identities_account_id", identities_table.c.account_id)
