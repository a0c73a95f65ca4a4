"""create_settings_table

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a7b9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SETTING_NAMES = [
    'SMTP_HOST',
    'SMTP_PORT',
    'SMTP_USER',
    'SMTP_PASSWORD',
    'SMTP_SENDER',
    'EMAIL_VERIFICATION_SUBJECT',
    'EMAIL_VERIFICATION_BODY',
    'EMAIL_VERIFICATION_REDIRECT_URL',
    'PASSWORD_RESET_SUBJECT',
    'PASSWORD_RESET_BODY',
    'PASSWORD_RESET_REDIRECT_URL',
    'MFA_VERIFICATION_SUBJECT',
    'MFA_VERIFICATION_BODY',
    'MFA_VERIFICATION_REDIRECT_URL',
]


def upgrade() -> None:
    settings_table = op.create_table('settings',
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('value', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('name')
    )
    op.bulk_insert(settings_table, [{'name': name, 'value': None} for name in SETTING_NAMES])


def downgrade() -> None:
    op.drop_table('settings')
