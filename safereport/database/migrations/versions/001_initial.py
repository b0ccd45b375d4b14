"""
Initial migration - Create all tables

Revision ID: 001_initial
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

URGENCY_VALUES = ('EMERGENCY', 'NON_EMERGENCY')
CATEGORY_VALUES = (
    'THEFT', 'FIRE_OUTBREAK', 'MEDICAL_EMERGENCY',
    'NATURAL_DISASTER', 'VIOLENCE', 'OTHER',
)
STATUS_VALUES = ('PENDING', 'IN_PROGRESS', 'RESOLVED', 'DISMISSED')
ROLE_VALUES = ('OPERATOR', 'ADMIN')


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100)),
        sa.Column('role', sa.Enum(*ROLE_VALUES, name='operator_role'),
                  nullable=False, server_default='OPERATOR'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )

    # Create report_images table
    op.create_table(
        'report_images',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('mime_type', sa.String(50), nullable=False),
        sa.Column('data', sa.LargeBinary(), nullable=False),
        sa.Column('size_bytes', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )

    # Create reports table
    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('report_id', sa.String(64), nullable=False),
        sa.Column('urgency', sa.Enum(*URGENCY_VALUES, name='report_urgency'), nullable=False),
        sa.Column('category', sa.Enum(*CATEGORY_VALUES, name='report_category'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.Text()),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('image_id', sa.String(32), sa.ForeignKey('report_images.id')),
        sa.Column('status', sa.Enum(*STATUS_VALUES, name='report_status'),
                  nullable=False, server_default='PENDING'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_index('idx_report_report_id', 'reports', ['report_id'], unique=True)
    op.create_index('idx_report_status', 'reports', ['status'])
    op.create_index('idx_report_category', 'reports', ['category'])
    op.create_index('idx_report_created_at', 'reports', ['created_at'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('idx_report_created_at', 'reports')
    op.drop_index('idx_report_category', 'reports')
    op.drop_index('idx_report_status', 'reports')
    op.drop_index('idx_report_report_id', 'reports')
    op.drop_table('reports')
    op.drop_table('report_images')
    op.drop_table('users')

    # Drop enum types (PostgreSQL)
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("DROP TYPE IF EXISTS report_status")
    op.execute("DROP TYPE IF EXISTS report_category")
    op.execute("DROP TYPE IF EXISTS report_urgency")
    op.execute("DROP TYPE IF EXISTS operator_role")
