"""create script breakdown tables

Revision ID: 3f1a9c2b7d40
Revises:
Create Date: 2026-10-19 09:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('departments',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('production_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_departments_production_id'), 'departments', ['production_id'], unique=False)

    op.create_table('scripts',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('production_id', sa.Uuid(), nullable=True),
    sa.Column('parent_script_id', sa.Uuid(), nullable=True),
    sa.Column('title', sa.String(), nullable=True),
    sa.Column('file_name', sa.String(), nullable=True),
    sa.Column('storage_key', sa.String(), nullable=False),
    sa.Column('source_storage_key', sa.String(), nullable=True, comment='Original upload when the viewer copy differs (FDX)'),
    sa.Column('format', sa.String(length=10), nullable=False),
    sa.Column('version', sa.Integer(), nullable=False),
    sa.Column('page_count', sa.Integer(), nullable=True),
    sa.Column('scene_data', sa.JSON(), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    sa.ForeignKeyConstraint(['parent_script_id'], ['scripts.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_scripts_production_id'), 'scripts', ['production_id'], unique=False)

    op.create_table('elements',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('script_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('type', sa.String(length=20), nullable=False),
    sa.Column('highlight_page', sa.Integer(), nullable=True),
    sa.Column('highlight_text', sa.Text(), nullable=True),
    sa.Column('department_id', sa.Uuid(), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('source', sa.String(length=20), nullable=False),
    sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
    sa.ForeignKeyConstraint(['script_id'], ['scripts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_elements_script_id_status', 'elements', ['script_id', 'status'], unique=False)

    op.create_table('revision_matches',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('new_script_id', sa.Uuid(), nullable=False),
    sa.Column('detected_name', sa.String(), nullable=False),
    sa.Column('detected_type', sa.String(length=20), nullable=False),
    sa.Column('detected_page', sa.Integer(), nullable=True),
    sa.Column('detected_highlight_text', sa.Text(), nullable=True),
    sa.Column('match_status', sa.String(length=20), nullable=False),
    sa.Column('old_element_id', sa.Uuid(), nullable=True),
    sa.Column('similarity', sa.Float(), nullable=True),
    sa.Column('user_decision', sa.String(length=20), nullable=True),
    sa.Column('resolved', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['new_script_id'], ['scripts.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['old_element_id'], ['elements.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_revision_matches_new_script_id'), 'revision_matches', ['new_script_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_revision_matches_new_script_id'), table_name='revision_matches')
    op.drop_table('revision_matches')
    op.drop_index('ix_elements_script_id_status', table_name='elements')
    op.drop_table('elements')
    op.drop_index(op.f('ix_scripts_production_id'), table_name='scripts')
    op.drop_table('scripts')
    op.drop_index(op.f('ix_departments_production_id'), table_name='departments')
    op.drop_table('departments')
