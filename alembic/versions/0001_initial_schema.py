"""Initial schema for the academic events service

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

Creates users and roles, profiles and notification preferences, categories,
events with their sessions, registrations (event and session level),
certificates, notifications and the user activity log.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

registration_status = sa.Enum(
    'registered', 'cancelled', 'attended', 'no-show', name='registration_status_enum'
)
certificate_status = sa.Enum('pending', 'issued', 'downloaded', name='certificate_status_enum')


def upgrade() -> None:
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('email', sa.String(254), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role_id', 'users', ['role_id'])

    op.create_table(
        'user_profiles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('first_name', sa.String(50), nullable=True),
        sa.Column('last_name', sa.String(50), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('institution', sa.String(100), nullable=True),
        sa.Column('occupation', sa.String(100), nullable=True),
        sa.Column('biography', sa.String(500), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.DateTime(), nullable=True),
        sa.Column('country', sa.String(50), nullable=True),
        sa.Column('city', sa.String(50), nullable=True),
        sa.Column('social_links', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'notification_preferences',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('email_new_events', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('email_event_reminders', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('email_certificates_available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('email_newsletter', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('platform_new_events', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('platform_event_reminders', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('platform_certificates_available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('platform_updates', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('color', sa.String(7), nullable=True),
    )

    op.create_table(
        'events',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('organizer_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(300), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(200), nullable=False),
        sa.Column('address', sa.String(300), nullable=True),
        sa.Column('max_capacity', sa.Integer(), nullable=False),
        sa.Column('current_registrations', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('requires_certificate', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('requirements', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            'current_registrations >= 0 AND current_registrations <= max_capacity',
            name='ck_events_registrations_within_capacity',
        ),
    )
    op.create_index('ix_events_organizer_id', 'events', ['organizer_id'])
    op.create_index('ix_events_category_id', 'events', ['category_id'])
    op.create_index('ix_events_start_date', 'events', ['start_date'])

    op.create_table(
        'event_sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('speaker', sa.String(200), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('max_capacity', sa.Integer(), nullable=True),
        sa.Column('current_registrations', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('requires_registration', sa.Boolean(), nullable=False, server_default=sa.text('false')),
    )
    op.create_index('ix_event_sessions_event_id', 'event_sessions', ['event_id'])

    op.create_table(
        'event_registrations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('status', registration_status, nullable=False, server_default='registered'),
        sa.Column('registration_date', sa.DateTime(), nullable=False),
        sa.Column('qr_code', sa.String(), nullable=False),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('cancellation_reason', sa.String(500), nullable=True),
        sa.Column('checked_in_at', sa.DateTime(), nullable=True),
        sa.Column('checked_out_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'event_id', name='uq_event_registration_user_event'),
    )
    op.create_index('ix_event_registrations_user_id', 'event_registrations', ['user_id'])
    op.create_index('ix_event_registrations_event_id', 'event_registrations', ['event_id'])
    op.create_index('ix_event_registrations_qr_code', 'event_registrations', ['qr_code'], unique=True)

    op.create_table(
        'session_registrations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column(
            'event_registration_id',
            sa.String(),
            sa.ForeignKey('event_registrations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('session_id', sa.String(), sa.ForeignKey('event_sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('event_registration_id', 'session_id', name='uq_session_registration'),
    )
    op.create_index(
        'ix_session_registrations_event_registration_id',
        'session_registrations',
        ['event_registration_id'],
    )
    op.create_index('ix_session_registrations_session_id', 'session_registrations', ['session_id'])

    op.create_table(
        'certificates',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column(
            'event_registration_id',
            sa.String(),
            sa.ForeignKey('event_registrations.id'),
            nullable=False,
            unique=True,
        ),
        sa.Column('certificate_number', sa.String(), nullable=False, unique=True),
        sa.Column('verification_code', sa.String(13), nullable=False),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('participation_type', sa.String(50), nullable=False),
        sa.Column('status', certificate_status, nullable=False, server_default='pending'),
        sa.Column('issued_date', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_certificates_user_id', 'certificates', ['user_id'])
    op.create_index('ix_certificates_event_id', 'certificates', ['event_id'])
    op.create_index('ix_certificates_verification_code', 'certificates', ['verification_code'], unique=True)

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('related_entity_type', sa.String(50), nullable=True),
        sa.Column('related_entity_id', sa.String(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table(
        'user_activities',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('activity_type', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('related_entity_type', sa.String(50), nullable=True),
        sa.Column('related_entity_id', sa.String(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_activities_user_id', 'user_activities', ['user_id'])
    op.create_index('ix_user_activities_activity_type', 'user_activities', ['activity_type'])
    op.create_index('ix_user_activities_created_at', 'user_activities', ['created_at'])


def downgrade() -> None:
    op.drop_table('user_activities')
    op.drop_table('notifications')
    op.drop_table('certificates')
    op.drop_table('session_registrations')
    op.drop_table('event_registrations')
    op.drop_table('event_sessions')
    op.drop_table('events')
    op.drop_table('categories')
    op.drop_table('notification_preferences')
    op.drop_table('user_profiles')
    op.drop_table('users')
    op.drop_table('roles')
    certificate_status.drop(op.get_bind(), checkfirst=True)
    registration_status.drop(op.get_bind(), checkfirst=True)
