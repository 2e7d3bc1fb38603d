"""
API tests over the in-memory store

Walks the door flow end to end: organiser creates and publishes an event,
a user books, renders a credential, staff scan it.
"""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
import pytest
import uuid_utils

from test.service.box_office.test_helpers import (
    ANOTHER_STAFF_ID,
    ANOTHER_USER_ID,
    ORGANISER_ID,
    STAFF_ID,
    USER_ID,
)


EVENT_BASE = '/api/event'
BOOKING_BASE = '/api/booking'
CHECK_IN_BASE = '/api/check_in'
REPORT_BASE = '/api/report'


def create_published_event(client: TestClient, *, total_tickets: int = 10, price: int = 0) -> dict:
    starts_at = datetime.now(timezone.utc) + timedelta(days=7)
    response = client.post(
        EVENT_BASE,
        json={
            'organiser_id': ORGANISER_ID,
            'name': 'Friday Jazz Night',
            'description': 'Live quartet',
            'starts_at': starts_at.isoformat(),
            'ends_at': (starts_at + timedelta(hours=4)).isoformat(),
            'total_tickets': total_tickets,
            'price': price,
        },
    )
    assert response.status_code == 201, response.text
    event = response.json()
    assert event['status'] == 'draft'

    response = client.post(f'{EVENT_BASE}/{event["id"]}/publish')
    assert response.status_code == 200, response.text
    return response.json()


def book(
    client: TestClient,
    *,
    event_id: str,
    user_id: int = USER_ID,
    quantity: int = 1,
    registration_type: str = 'purchase',
):
    return client.post(
        BOOKING_BASE,
        json={
            'event_id': event_id,
            'user_id': user_id,
            'quantity': quantity,
            'registration_type': registration_type,
        },
    )


class TestCommonEndpoints:
    def test_health(self, client: TestClient):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_metrics(self, client: TestClient):
        response = client.get('/metrics')

        assert response.status_code == 200
        assert 'box_office' in response.text


class TestEventApi:
    def test_create_get_and_list_events(self, client: TestClient):
        event = create_published_event(client, total_tickets=50, price=1500)

        fetched = client.get(f'{EVENT_BASE}/{event["id"]}')
        listed = client.get(EVENT_BASE, params={'organiser_id': ORGANISER_ID})

        assert fetched.status_code == 200
        assert fetched.json()['type'] == 'paid'
        assert [e['id'] for e in listed.json()] == [event['id']]

    def test_publish_twice_is_conflict(self, client: TestClient):
        event = create_published_event(client)

        response = client.post(f'{EVENT_BASE}/{event["id"]}/publish')

        assert response.status_code == 409
        assert response.json()['code'] == 'invalid_transition'

    def test_unknown_event_is_404(self, client: TestClient):
        response = client.get(f'{EVENT_BASE}/{uuid_utils.uuid7()}')

        assert response.status_code == 404
        assert response.json()['code'] == 'event_not_found'

    def test_malformed_event_id_is_400(self, client: TestClient):
        response = client.get(f'{EVENT_BASE}/not-a-uuid')

        assert response.status_code == 400

    def test_naive_event_times_are_400(self, client: TestClient):
        response = client.post(
            EVENT_BASE,
            json={
                'organiser_id': ORGANISER_ID,
                'name': 'Friday Jazz Night',
                'starts_at': '2026-11-06T19:00:00',
                'ends_at': '2026-11-06T23:00:00',
                'total_tickets': 10,
            },
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'invalid_request'

    def test_naive_update_times_are_400(self, client: TestClient):
        event = create_published_event(client)

        response = client.patch(
            f'{EVENT_BASE}/{event["id"]}', json={'ends_at': '2026-11-07T01:00:00'}
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'invalid_request'

    def test_offset_event_times_are_stored_in_utc(self, client: TestClient):
        response = client.post(
            EVENT_BASE,
            json={
                'organiser_id': ORGANISER_ID,
                'name': 'Friday Jazz Night',
                'starts_at': '2026-11-07T03:00:00+08:00',
                'ends_at': '2026-11-07T07:00:00+08:00',
                'total_tickets': 10,
            },
        )

        assert response.status_code == 201, response.text
        starts_at = datetime.fromisoformat(response.json()['starts_at'].replace('Z', '+00:00'))
        assert starts_at == datetime(2026, 11, 6, 19, 0, tzinfo=timezone.utc)
        assert starts_at.utcoffset() == timedelta(0)

    def test_update_and_cancel(self, client: TestClient):
        event = create_published_event(client)

        updated = client.patch(f'{EVENT_BASE}/{event["id"]}', json={'name': 'Late Show'})
        cancelled = client.post(f'{EVENT_BASE}/{event["id"]}/cancel')

        assert updated.json()['name'] == 'Late Show'
        assert cancelled.json()['status'] == 'cancelled'

    def test_set_total_tickets_after_publish_is_conflict(self, client: TestClient):
        event = create_published_event(client)

        response = client.put(
            f'{EVENT_BASE}/{event["id"]}/total_tickets', json={'total_tickets': 99}
        )

        assert response.status_code == 409

    def test_archive_past_for_organiser(self, client: TestClient):
        create_published_event(client)

        response = client.post(f'{EVENT_BASE}/organiser/{ORGANISER_ID}/archive_past')

        assert response.status_code == 200
        assert response.json() == {'archived_event_ids': []}


class TestBookingApi:
    def test_book_then_inventory_drops(self, client: TestClient):
        event = create_published_event(client, total_tickets=10, price=2500)

        response = book(client, event_id=event['id'], quantity=3)

        assert response.status_code == 201, response.text
        booking = response.json()
        assert booking['status'] == 'confirmed'
        assert booking['total_price'] == 7500
        assert booking['checked_in'] is False
        inventory = client.get(f'{EVENT_BASE}/{event["id"]}/inventory').json()
        assert inventory['available_tickets'] == 7
        assert inventory['sold_tickets'] == 3

    def test_out_of_stock_is_409(self, client: TestClient):
        event = create_published_event(client, total_tickets=1)

        response = book(client, event_id=event['id'], quantity=2)

        assert response.status_code == 409
        assert response.json()['code'] == 'out_of_stock'

    @pytest.mark.parametrize('quantity', [0, 11])
    def test_invalid_quantity_is_400(self, client: TestClient, quantity: int):
        event = create_published_event(client, total_tickets=50)

        response = book(client, event_id=event['id'], quantity=quantity)

        assert response.status_code == 400
        assert response.json()['code'] == 'invalid_quantity'

    def test_duplicate_rsvp_is_409(self, client: TestClient):
        event = create_published_event(client)
        assert book(client, event_id=event['id'], registration_type='rsvp').status_code == 201

        response = book(client, event_id=event['id'], registration_type='rsvp')

        assert response.status_code == 409
        assert response.json()['code'] == 'duplicate_rsvp'

    def test_cancel_releases_and_second_cancel_conflicts(self, client: TestClient):
        event = create_published_event(client, total_tickets=5)
        booking = book(client, event_id=event['id'], quantity=2).json()

        first = client.patch(f'{BOOKING_BASE}/{booking["id"]}/cancel', json={'user_id': USER_ID})
        second = client.patch(f'{BOOKING_BASE}/{booking["id"]}/cancel')

        assert first.status_code == 200
        assert first.json()['status'] == 'cancelled'
        assert second.status_code == 409
        assert second.json()['code'] == 'invalid_transition'
        inventory = client.get(f'{EVENT_BASE}/{event["id"]}/inventory').json()
        assert inventory['available_tickets'] == 5

    def test_listings(self, client: TestClient):
        event = create_published_event(client)
        mine = book(client, event_id=event['id']).json()
        book(client, event_id=event['id'], user_id=ANOTHER_USER_ID)

        user_bookings = client.get(BOOKING_BASE, params={'user_id': USER_ID}).json()
        attendees = client.get(f'{EVENT_BASE}/{event["id"]}/booking').json()
        my_booking = client.get(f'{EVENT_BASE}/{event["id"]}/booking/user/{USER_ID}').json()

        assert [b['id'] for b in user_bookings] == [mine['id']]
        assert len(attendees) == 2
        assert my_booking['id'] == mine['id']


class TestCheckInApi:
    def test_door_flow(self, client: TestClient):
        """
        Given: a confirmed booking and its rendered credential
        When: staff A scans it, then staff B scans it again
        Then: A is accepted, B gets already_used naming staff A
        """
        event = create_published_event(client)
        booking = book(client, event_id=event['id']).json()
        credential = client.get(f'{BOOKING_BASE}/{booking["id"]}/credential').json()

        first = client.post(
            CHECK_IN_BASE,
            json={
                'raw_payload': credential['credential'],
                'scanner_event_id': event['id'],
                'staff_id': STAFF_ID,
            },
        )
        second = client.post(
            CHECK_IN_BASE,
            json={
                'raw_payload': credential['credential'],
                'scanner_event_id': event['id'],
                'staff_id': ANOTHER_STAFF_ID,
            },
        )

        assert first.status_code == 200
        assert first.json()['accepted'] is True
        assert first.json()['checked_in_by'] == STAFF_ID
        assert second.status_code == 200
        assert second.json()['accepted'] is False
        assert second.json()['code'] == 'already_used'
        assert second.json()['checked_in_by'] == STAFF_ID
        assert client.get(f'{BOOKING_BASE}/{booking["id"]}').json()['status'] == 'used'

    def test_malformed_credential(self, client: TestClient):
        event = create_published_event(client)

        response = client.post(
            CHECK_IN_BASE,
            json={
                'raw_payload': 'hello',
                'scanner_event_id': event['id'],
                'staff_id': STAFF_ID,
            },
        )

        assert response.status_code == 200
        assert response.json()['code'] == 'malformed_credential'

    def test_preview_manual_and_revert(self, client: TestClient):
        event = create_published_event(client)
        booking = book(client, event_id=event['id']).json()
        credential = client.get(f'{BOOKING_BASE}/{booking["id"]}/credential').json()

        preview = client.post(
            f'{CHECK_IN_BASE}/preview',
            json={'raw_payload': credential['credential'], 'scanner_event_id': event['id']},
        )
        manual = client.post(
            f'{CHECK_IN_BASE}/booking',
            json={
                'booking_id': booking['id'],
                'scanner_event_id': event['id'],
                'staff_id': STAFF_ID,
            },
        )
        reverted = client.post(
            f'{CHECK_IN_BASE}/booking/{booking["id"]}/revert', json={'admin_id': 1}
        )

        assert preview.json()['accepted'] is True
        assert manual.json()['accepted'] is True
        assert manual.json()['check_in_method'] == 'manual'
        assert reverted.status_code == 200
        assert reverted.json()['status'] == 'confirmed'
        assert reverted.json()['checked_in_at'] is None


class TestReportApi:
    def test_event_and_organiser_reports(self, client: TestClient):
        event = create_published_event(client)
        booking = book(client, event_id=event['id']).json()
        book(client, event_id=event['id'], user_id=ANOTHER_USER_ID)
        client.post(
            f'{CHECK_IN_BASE}/booking',
            json={
                'booking_id': booking['id'],
                'scanner_event_id': event['id'],
                'staff_id': STAFF_ID,
            },
        )

        event_report = client.get(f'{REPORT_BASE}/event/{event["id"]}').json()
        organiser_report = client.get(f'{REPORT_BASE}/organiser/{ORGANISER_ID}').json()

        assert event_report['checked_in'] == 1
        assert event_report['confirmed_total'] == 2
        assert event_report['check_in_rate'] == pytest.approx(0.5)
        assert event_report['bookings_by_status']['used'] == 1
        assert organiser_report['events_total'] == 1
        assert organiser_report['bookings_total'] == 2
