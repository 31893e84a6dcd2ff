from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8b2d4e6f1a37'
down_revision = '3f1c2b7e9d10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user_lists',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('list_name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False)
    )

    op.create_table(
        'user_list_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('list_id', sa.Integer(), sa.ForeignKey('user_lists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.current_timestamp(), nullable=False),
        sa.UniqueConstraint('list_id', 'user_id', name='unique_list_user')
    )


def downgrade():
    op.drop_table('user_list_items')
    op.drop_table('user_lists')
