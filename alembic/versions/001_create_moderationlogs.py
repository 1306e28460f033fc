from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

# revision identifiers, used by Alembic.
revision = '001_create_moderationlogs'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'ModerationLogs',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column('admin_id', sa.String(64), nullable=False),
        sa.Column('action', sa.String(64), nullable=False),
        sa.Column('entity_id', sa.String(64)),
        sa.Column('previous_status', sa.String(32)),
        sa.Column('new_status', sa.String(32)),
        sa.Column('details', JSONB),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('idx_moderationlogs_entity_id', 'ModerationLogs', ['entity_id'])
    op.create_index('idx_moderationlogs_action', 'ModerationLogs', ['action'])


def downgrade():
    op.drop_table('ModerationLogs')
