"""Venues, regions, event templates and events

Revision ID: 001_event_templates
Revises:
Create Date: 2025-04-01

Creates the tables used by recurring event generation:
- venues, regions: Display records referenced by templates and events
- event_templates: Recurrence rules with default event fields
- event_template_tickets: Ticket types offered by a template
- events: Concrete events (manual or generated)
- event_tickets: Ticket inventory per event
- Unique (template_id, event_date, venue_id) on events for idempotent generation
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_event_templates'
down_revision = None
branch_labels = None
depends_on = None


def _uuid_column():
    return sa.Column(
        'uuid',
        postgresql.UUID(as_uuid=True).with_variant(sa.LargeBinary(16), 'sqlite'),
        nullable=False
    )


def _int_list_type():
    return postgresql.JSONB().with_variant(sa.JSON(), 'sqlite')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """
    Create event generation tables.

    Tables:
    - venues, regions
    - event_templates, event_template_tickets
    - events, event_tickets
    """

    op.create_table(
        'venues',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_venues_uuid', 'venues', ['uuid'], unique=True)

    op.create_table(
        'regions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_regions_uuid', 'regions', ['uuid'], unique=True)

    op.create_table(
        'event_templates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('venue_id', sa.Integer(), nullable=False),
        sa.Column('region_id', sa.Integer(), nullable=False),
        sa.Column('template_name', sa.String(length=255), nullable=False),
        sa.Column('default_title_format', sa.String(length=255), nullable=False),
        sa.Column('default_description', sa.Text(), nullable=True),
        sa.Column('recurrence_type', sa.String(length=20), nullable=False, server_default='none'),
        sa.Column('recurring_days_of_week', _int_list_type(), nullable=False),
        sa.Column('days_of_month', _int_list_type(), nullable=False),
        sa.Column('default_start_time', sa.String(length=8), nullable=False),
        sa.Column('default_end_time', sa.String(length=8), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_event_templates_uuid', 'event_templates', ['uuid'], unique=True)
    op.create_index('ix_event_templates_venue_id', 'event_templates', ['venue_id'])
    op.create_index('ix_event_templates_region_id', 'event_templates', ['region_id'])
    op.create_index('ix_event_templates_is_active', 'event_templates', ['is_active'])

    op.create_table(
        'event_template_tickets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('seat_type', sa.String(length=100), nullable=False),
        sa.Column('default_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('default_capacity', sa.Integer(), nullable=False),
        sa.Column('default_description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['template_id'], ['event_templates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_event_template_tickets_uuid', 'event_template_tickets', ['uuid'], unique=True)
    op.create_index('ix_event_template_tickets_template_id', 'event_template_tickets', ['template_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('venue_id', sa.Integer(), nullable=False),
        sa.Column('region_id', sa.Integer(), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='SCHEDULED'),
        sa.Column('uses_default_poster', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['template_id'], ['event_templates.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'template_id', 'event_date', 'venue_id',
            name='uq_events_template_date_venue'
        ),
    )
    op.create_index('ix_events_uuid', 'events', ['uuid'], unique=True)
    op.create_index('ix_events_event_date', 'events', ['event_date'])
    op.create_index('ix_events_venue_id', 'events', ['venue_id'])
    op.create_index('ix_events_region_id', 'events', ['region_id'])
    op.create_index('ix_events_template_id', 'events', ['template_id'])
    op.create_index('idx_events_venue_date', 'events', ['venue_id', 'event_date'])

    op.create_table(
        'event_tickets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('seat_type', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sold_count', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_event_tickets_uuid', 'event_tickets', ['uuid'], unique=True)
    op.create_index('ix_event_tickets_event_id', 'event_tickets', ['event_id'])


def downgrade() -> None:
    """Drop event generation tables in reverse dependency order."""
    op.drop_table('event_tickets')
    op.drop_table('events')
    op.drop_table('event_template_tickets')
    op.drop_table('event_templates')
    op.drop_table('regions')
    op.drop_table('venues')
