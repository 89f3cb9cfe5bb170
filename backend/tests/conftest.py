"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions
- FastAPI test client bound to the test session
- Sample data factories (venues, regions, templates)
"""

import os
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ['MUAYTHAI_DB_URL'] = 'sqlite:///:memory:'
os.environ['MUAYTHAI_ENV'] = 'test'
os.environ['CRON_SECRET'] = 'test-cron-secret'

from backend.src.models import (  # noqa: E402
    Base, EventTemplate, EventTemplateTicket, Region, Venue
)


TEST_CRON_SECRET = 'test-cron-secret'


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    def _fk_pragma_on_connect(dbapi_con, con_record):
        dbapi_con.execute('pragma foreign_keys=ON')

    event.listen(engine, 'connect', _fk_pragma_on_connect)

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope='function')
def test_settings():
    """Application settings with a known cron secret."""
    from backend.src.config.settings import AppSettings
    return AppSettings(CRON_SECRET=TEST_CRON_SECRET)


@pytest.fixture(scope='function')
def test_client(test_db_session, test_settings):
    """FastAPI TestClient using the test database session and settings."""
    from fastapi.testclient import TestClient
    from backend.src.config.settings import get_settings
    from backend.src.db.database import get_db
    from backend.src.main import app

    def _get_db():
        yield test_db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def cron_headers():
    """Authorization header accepted by the cron route."""
    return {'Authorization': f'Bearer {TEST_CRON_SECRET}'}


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def sample_venue(test_db_session):
    """Factory for creating sample Venue models in the database."""
    def _create(name='Lumpinee Stadium', address=None):
        venue = Venue(name=name, address=address)
        test_db_session.add(venue)
        test_db_session.commit()
        test_db_session.refresh(venue)
        return venue
    return _create


@pytest.fixture
def sample_region(test_db_session):
    """Factory for creating sample Region models in the database."""
    def _create(name='Bangkok'):
        region = Region(name=name)
        test_db_session.add(region)
        test_db_session.commit()
        test_db_session.refresh(region)
        return region
    return _create


@pytest.fixture
def sample_template(test_db_session, sample_venue, sample_region):
    """
    Factory for creating sample EventTemplate models in the database.

    tickets is a list of (seat_type, price, capacity) tuples; defaults to a
    single Ringside ticket type.
    """
    def _create(
        template_name='Tuesday Fights',
        venue=None,
        region=None,
        recurrence_type='weekly',
        recurring_days_of_week=None,
        days_of_month=None,
        default_start_time='19:00',
        default_end_time='23:00',
        default_title_format='Fight Night at {venue} - {date}',
        default_description='Live Muay Thai',
        start_date=None,
        end_date=None,
        is_active=True,
        tickets=None,
    ):
        venue = venue or sample_venue()
        region = region or sample_region()
        if tickets is None:
            tickets = [('Ringside', Decimal('2500.00'), 50)]

        template = EventTemplate(
            template_name=template_name,
            venue_id=venue.id,
            region_id=region.id,
            recurrence_type=recurrence_type,
            recurring_days_of_week=recurring_days_of_week or [],
            days_of_month=days_of_month or [],
            default_start_time=default_start_time,
            default_end_time=default_end_time,
            default_title_format=default_title_format,
            default_description=default_description,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
        )
        template.template_tickets = [
            EventTemplateTicket(
                position=index,
                seat_type=seat_type,
                default_price=price,
                default_capacity=capacity,
            )
            for index, (seat_type, price, capacity) in enumerate(tickets)
        ]
        test_db_session.add(template)
        test_db_session.commit()
        test_db_session.refresh(template)
        return template
    return _create


@pytest.fixture
def april_2025():
    """Two-week window used across generation tests (2025-04-01 is a Tuesday)."""
    return date(2025, 4, 1), date(2025, 4, 14)
