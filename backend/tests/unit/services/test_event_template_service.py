"""
Unit tests for EventTemplateService.

Tests template creation and replacement from validated input, deletion,
lookup by GUID, filtered listing, activation toggling and response building.
"""

from datetime import date

import pytest

from backend.src.models import Event, EventTemplate, EventTemplateTicket
from backend.src.schemas.event_template import EventTemplateCreate, EventTemplateUpdate
from backend.src.services.event_generation_service import EventGenerationService
from backend.src.services.event_template_service import EventTemplateService
from backend.src.services.exceptions import NotFoundError, ValidationError


@pytest.fixture
def template_input(sample_venue, sample_region):
    """Factory for validated EventTemplateCreate input."""
    venue = sample_venue()
    region = sample_region()

    def _create(**overrides):
        data = {
            "template_name": "Saturday Fights",
            "venue_guid": venue.guid,
            "region_guid": region.guid,
            "default_title_format": "Fight Night at {venue} - {date}",
            "recurrence_type": "weekly",
            "recurring_days_of_week": "6",
            "default_start_time": "18:30",
            "default_end_time": "23:00",
            "tickets": [
                {"seat_type": "Ringside", "default_price": "2500.00", "default_capacity": 50},
                {"seat_type": "Stadium", "default_price": "1500.00", "default_capacity": 300},
            ],
        }
        data.update(overrides)
        return EventTemplateCreate(**data)
    return _create


class TestCreate:
    """Tests for create()."""

    def test_creates_template_with_tickets(self, test_db_session, template_input):
        """Test a template is stored with normalized days and ordered tickets."""
        service = EventTemplateService(test_db_session)

        template = service.create(template_input())

        assert template.guid.startswith("tpl_")
        assert template.recurrence_type == "weekly"
        assert template.recurring_days_of_week == [6]
        assert template.days_of_month == []
        assert template.is_active is True
        assert [t.seat_type for t in template.template_tickets] == ["Ringside", "Stadium"]
        assert test_db_session.query(EventTemplate).count() == 1

    def test_monthly_template(self, test_db_session, template_input):
        """Test monthly templates keep only their days of month."""
        service = EventTemplateService(test_db_session)

        template = service.create(template_input(
            recurrence_type="monthly", days_of_month="[15, 1]"
        ))

        assert template.days_of_month == [1, 15]
        assert template.recurring_days_of_week == []

    def test_single_occurrence_template(self, test_db_session, template_input):
        """Test recurrence none templates keep their start date."""
        service = EventTemplateService(test_db_session)

        template = service.create(template_input(
            recurrence_type="none", start_date="2025-04-12"
        ))

        assert template.recurrence_type == "none"
        assert template.start_date == date(2025, 4, 12)

    def test_unknown_venue(self, test_db_session, template_input):
        """Test an unknown venue GUID raises ValidationError."""
        service = EventTemplateService(test_db_session)

        with pytest.raises(ValidationError) as exc_info:
            service.create(template_input(venue_guid="ven_01hgw2bbg00000000000000009"))
        assert exc_info.value.field == "venue_guid"

    def test_malformed_region(self, test_db_session, template_input):
        """Test a malformed region GUID raises ValidationError."""
        service = EventTemplateService(test_db_session)

        with pytest.raises(ValidationError) as exc_info:
            service.create(template_input(region_guid="not-a-guid"))
        assert exc_info.value.field == "region_guid"


class TestLookup:
    """Tests for get_by_guid() and list()."""

    def test_get_by_guid(self, test_db_session, sample_template):
        """Test retrieving a template by GUID."""
        template = sample_template()
        service = EventTemplateService(test_db_session)

        found = service.get_by_guid(template.guid)

        assert found.id == template.id

    @pytest.mark.parametrize("guid", [
        "tpl_01hgw2bbg00000000000000009",
        "evt_01hgw2bbg00000000000000009",
        "garbage",
    ])
    def test_get_by_guid_not_found(self, test_db_session, guid):
        """Test unknown, wrong-type and malformed GUIDs raise NotFoundError."""
        with pytest.raises(NotFoundError):
            EventTemplateService(test_db_session).get_by_guid(guid)

    def test_list_with_active_filter(self, test_db_session, sample_template):
        """Test listing all, active and inactive templates."""
        sample_template(template_name="B Active")
        sample_template(template_name="A Paused", is_active=False)
        service = EventTemplateService(test_db_session)

        def names(**filters):
            templates, _ = service.list(**filters)
            return [t.template_name for t in templates]

        assert names() == ["A Paused", "B Active"]
        assert names(is_active=True) == ["B Active"]
        assert names(is_active=False) == ["A Paused"]

    def test_list_by_venue_region_and_name(self, test_db_session, sample_template,
                                           sample_venue, sample_region):
        """Test venue, region and name filters."""
        lumpinee = sample_venue(name="Lumpinee Stadium")
        rajadamnern = sample_venue(name="Rajadamnern Stadium")
        phuket = sample_region(name="Phuket")
        sample_template(template_name="Tuesday Fights", venue=lumpinee)
        sample_template(template_name="Sunday Fights", venue=rajadamnern)
        sample_template(template_name="Tuesday Kids", venue=rajadamnern, region=phuket)
        service = EventTemplateService(test_db_session)

        by_venue, venue_total = service.list(venue_guid=rajadamnern.guid)
        by_region, _ = service.list(region_guid=phuket.guid)
        by_name, _ = service.list(search="tuesday")

        assert [t.template_name for t in by_venue] == ["Sunday Fights", "Tuesday Kids"]
        assert venue_total == 2
        assert [t.template_name for t in by_region] == ["Tuesday Kids"]
        assert [t.template_name for t in by_name] == ["Tuesday Fights", "Tuesday Kids"]

    def test_list_pagination(self, test_db_session, sample_template):
        """Test limit/offset page through results while total counts all matches."""
        for name in ("A", "B", "C"):
            sample_template(template_name=name)

        templates, total = EventTemplateService(test_db_session).list(limit=1, offset=1)

        assert [t.template_name for t in templates] == ["B"]
        assert total == 3

    @pytest.mark.parametrize("venue_guid", [
        "ven_bad",
        "ven_01hgw2bbg00000000000000009",
    ])
    def test_list_unknown_venue(self, test_db_session, venue_guid):
        """Test malformed or unknown venue filters raise ValidationError."""
        with pytest.raises(ValidationError):
            EventTemplateService(test_db_session).list(venue_guid=venue_guid)


class TestUpdate:
    """Tests for update()."""

    def test_replaces_configuration_and_tickets(self, test_db_session, template_input):
        """Test recurrence, times and ticket types are replaced."""
        service = EventTemplateService(test_db_session)
        template = service.create(template_input())
        guid = template.guid

        updated = service.update(guid, EventTemplateUpdate(**template_input(
            template_name="Monthly Fights",
            recurrence_type="monthly",
            days_of_month="15,1",
            default_start_time="20:00",
            tickets=[{"seat_type": "VIP", "default_price": "4000.00", "default_capacity": 10}],
        ).model_dump()))

        assert updated.guid == guid
        assert updated.template_name == "Monthly Fights"
        assert updated.recurrence_type == "monthly"
        assert updated.days_of_month == [1, 15]
        assert updated.recurring_days_of_week == []
        assert updated.default_start_time == "20:00"
        assert [t.seat_type for t in updated.template_tickets] == ["VIP"]
        assert test_db_session.query(EventTemplateTicket).count() == 1

    def test_generation_after_update(self, test_db_session, sample_template, template_input):
        """Test existing events are kept and only new dates use the new settings."""
        template = sample_template(recurring_days_of_week=[1, 3])
        EventGenerationService(test_db_session).generate(date(2025, 4, 1), date(2025, 4, 7))

        EventTemplateService(test_db_session).update(template.guid, EventTemplateUpdate(**template_input(
            venue_guid=template.venue.guid,
            region_guid=template.region.guid,
            recurring_days_of_week=[1, 3],
            default_start_time="20:00",
        ).model_dump()))
        result = EventGenerationService(test_db_session).generate(date(2025, 4, 1), date(2025, 4, 14))

        assert result.skipped_count == 2
        assert [(i.event.event_date, i.event.start_time.hour) for i in result.items] == [
            (date(2025, 4, 9), 20),
            (date(2025, 4, 14), 20),
        ]
        assert test_db_session.query(Event).count() == 4

    def test_unknown_template(self, test_db_session, template_input):
        """Test updating an unknown template raises NotFoundError."""
        with pytest.raises(NotFoundError):
            EventTemplateService(test_db_session).update(
                "tpl_01hgw2bbg00000000000000009",
                EventTemplateUpdate(**template_input().model_dump()),
            )

    def test_unknown_venue_leaves_template_unchanged(self, test_db_session, template_input):
        """Test a failed venue lookup does not modify the template."""
        service = EventTemplateService(test_db_session)
        template = service.create(template_input())

        with pytest.raises(ValidationError):
            service.update(template.guid, EventTemplateUpdate(**template_input(
                template_name="Renamed",
                venue_guid="ven_01hgw2bbg00000000000000009",
            ).model_dump()))

        test_db_session.expire_all()
        assert service.get_by_guid(template.guid).template_name == "Saturday Fights"


class TestDelete:
    """Tests for delete()."""

    def test_delete_keeps_generated_events(self, test_db_session, sample_template, april_2025):
        """Test deleting a template removes its tickets and detaches its events."""
        template = sample_template(recurring_days_of_week=[1, 3])
        EventGenerationService(test_db_session).generate(*april_2025)

        EventTemplateService(test_db_session).delete(template.guid)
        test_db_session.expire_all()

        assert test_db_session.query(EventTemplate).count() == 0
        assert test_db_session.query(EventTemplateTicket).count() == 0
        events = test_db_session.query(Event).all()
        assert len(events) == 4
        assert all(e.template_id is None for e in events)

    def test_unknown_template(self, test_db_session):
        """Test deleting an unknown template raises NotFoundError."""
        with pytest.raises(NotFoundError):
            EventTemplateService(test_db_session).delete("tpl_01hgw2bbg00000000000000009")


class TestSetActive:
    """Tests for set_active()."""

    def test_deactivate_and_reactivate(self, test_db_session, sample_template):
        """Test toggling the active flag."""
        template = sample_template()
        service = EventTemplateService(test_db_session)

        assert service.set_active(template.guid, False).is_active is False
        assert service.set_active(template.guid, True).is_active is True

    def test_unknown_template(self, test_db_session):
        """Test toggling an unknown template raises NotFoundError."""
        with pytest.raises(NotFoundError):
            EventTemplateService(test_db_session).set_active(
                "tpl_01hgw2bbg00000000000000009", False
            )


class TestBuildTemplateResponse:
    """Tests for build_template_response()."""

    def test_response_fields(self, test_db_session, sample_template):
        """Test the response exposes GUIDs and display names, not internal IDs."""
        template = sample_template(recurring_days_of_week=[1, 3])
        response = EventTemplateService(test_db_session).build_template_response(template)

        assert response["guid"] == template.guid
        assert response["venue_name"] == "Lumpinee Stadium"
        assert response["venue_guid"].startswith("ven_")
        assert response["region_name"] == "Bangkok"
        assert response["recurring_days_of_week"] == [1, 3]
        assert response["tickets"][0]["seat_type"] == "Ringside"
        assert response["tickets"][0]["guid"].startswith("ttk_")
        assert "id" not in response
