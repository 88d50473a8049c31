"""fishing events schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
from __future__ import annotations

import sys
from pathlib import Path

from sqlmodel import SQLModel

from alembic import op

SRC_DIR = Path(__file__).resolve().parents[2] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from fishing_api.db import models as _models  # noqa: E402,F401

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

# users, events, teams and their registrations, catches, results and the
# two rating ledgers. The ledgers keep event_id without a foreign key.


def upgrade() -> None:
    SQLModel.metadata.create_all(bind=op.get_bind(), checkfirst=True)


def downgrade() -> None:
    SQLModel.metadata.drop_all(bind=op.get_bind(), checkfirst=True)
