"""Create derivative_drafts, marketplace_listings and minted_nfts

Revision ID: c3d4e5f6a7b8
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'c3d4e5f6a7b8'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'derivative_drafts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('wallet', sa.String(42), nullable=False),
        sa.Column('base_nft', sa.String(42), nullable=False),
        sa.Column('base_token_id', sa.String(100), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column(
            'metadata',
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index(
        'ix_derivative_drafts_wallet_created', 'derivative_drafts', ['wallet', 'created_at']
    )

    op.create_table(
        'marketplace_listings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('listing_id', sa.String(100), nullable=False, unique=True),
        sa.Column('nft_contract', sa.String(42), nullable=False),
        sa.Column('token_id', sa.String(100), nullable=False),
        sa.Column('seller', sa.String(42), nullable=False),
        sa.Column('price', sa.String(78), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('base_nft_address', sa.String(42), nullable=True),
        sa.Column('base_token_id', sa.String(100), nullable=True),
        sa.Column('transaction_hash', sa.String(66), nullable=True),
        sa.Column('listed_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('buyer', sa.String(42), nullable=True),
        sa.Column('sold_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_marketplace_listings_nft_contract', 'marketplace_listings', ['nft_contract'])
    op.create_index('ix_marketplace_listings_seller', 'marketplace_listings', ['seller'])
    op.create_index(
        'ix_marketplace_listings_active_listed', 'marketplace_listings', ['active', 'listed_at']
    )

    op.create_table(
        'minted_nfts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('token_id', sa.String(100), nullable=False),
        sa.Column('contract_address', sa.String(42), nullable=False),
        sa.Column('wallet', sa.String(42), nullable=False),
        sa.Column('base_nft', sa.String(42), nullable=False),
        sa.Column('base_token_id', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('metadata_url', sa.Text(), nullable=False),
        sa.Column('transaction_hash', sa.String(66), nullable=False),
        sa.Column('block_number', sa.BigInteger(), nullable=True),
        sa.Column('minted_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.UniqueConstraint(
            'token_id', 'contract_address', name='uq_minted_nfts_token_contract'
        ),
    )
    op.create_index('ix_minted_nfts_wallet', 'minted_nfts', ['wallet'])
    op.create_index('ix_minted_nfts_contract', 'minted_nfts', ['contract_address'])


def downgrade() -> None:
    op.drop_index('ix_minted_nfts_contract', table_name='minted_nfts')
    op.drop_index('ix_minted_nfts_wallet', table_name='minted_nfts')
    op.drop_table('minted_nfts')
    op.drop_index('ix_marketplace_listings_active_listed', table_name='marketplace_listings')
    op.drop_index('ix_marketplace_listings_seller', table_name='marketplace_listings')
    op.drop_index('ix_marketplace_listings_nft_contract', table_name='marketplace_listings')
    op.drop_table('marketplace_listings')
    op.drop_index('ix_derivative_drafts_wallet_created', table_name='derivative_drafts')
    op.drop_table('derivative_drafts')
