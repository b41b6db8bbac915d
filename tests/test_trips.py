"""Tests for trip management and passenger counts."""

import pytest

from pob_tracker.models.trip import Trip
from pob_tracker.services.trip_service import TripService


def trip_payload(**overrides):
    payload = {
        "passenger_id": "42",
        "from_origin": "Ogle",
        "to_destination": "NSC",
        "trip_date": "2024-01-05",
        "confirmed": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def trip(client):
    """A trip with no recorded passenger count."""
    response = client.post("/api/trips", json=trip_payload())
    assert response.status_code == 201
    return response.json()


def set_count(db, trip_id, count):
    db.query(Trip).filter(Trip.id == trip_id).update(
        {Trip.number_of_passengers: count}, synchronize_session=False
    )
    db.commit()


def test_create_trip(client):
    """Test creating a trip."""
    response = client.post("/api/trips", json=trip_payload(number_of_passengers=3))

    assert response.status_code == 201
    data = response.json()
    assert data["passenger_id"] == "42"
    assert data["trip_date"] == "2024-01-05"
    assert data["number_of_passengers"] == 3
    assert data["confirmed"] is False


@pytest.mark.parametrize(
    "raw_date",
    ["2024-01-05", "2024-01-05T10:30:00.000Z", "01/05/2024", "Fri, 05 Jan 2024 08:00:00 GMT"],
)
def test_create_trip_normalizes_date(client, raw_date):
    """Test trip dates are stored as YYYY-MM-DD whatever form they arrive in."""
    response = client.post("/api/trips", json=trip_payload(trip_date=raw_date))

    assert response.status_code == 201
    assert response.json()["trip_date"] == "2024-01-05"


def test_create_trip_invalid_date(client):
    """Test an unparseable trip date."""
    response = client.post("/api/trips", json=trip_payload(trip_date="someday"))

    assert response.status_code == 400
    assert "Invalid trip date format" in response.json()["message"]


def test_create_trip_invalid_passenger_count(client):
    """Test a zero passenger count is rejected."""
    response = client.post("/api/trips", json=trip_payload(number_of_passengers=0))

    assert response.status_code == 400


def test_create_trip_requires_fields(client):
    """Test blank required fields."""
    response = client.post("/api/trips", json=trip_payload(from_origin="   "))

    assert response.status_code == 400


def test_list_trips(client):
    """Test listing trips, latest date first."""
    client.post("/api/trips", json=trip_payload(trip_date="2024-01-01"))
    client.post("/api/trips", json=trip_payload(trip_date="2024-02-01"))

    response = client.get("/api/trips")

    assert response.status_code == 200
    assert [t["trip_date"] for t in response.json()] == ["2024-02-01", "2024-01-01"]


def test_get_trip(client, trip):
    """Test getting a trip by id."""
    response = client.get(f"/api/trips/{trip['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == trip["id"]

    response = client.get("/api/trips/99999")
    assert response.status_code == 404
    assert response.json()["message"] == "Trip not found"


def test_trips_by_passenger(client, trip):
    """Test trips for a passenger, and the empty case."""
    response = client.get("/api/trips/passenger/42")
    assert response.status_code == 200
    assert len(response.json()) == 1

    response = client.get("/api/trips/passenger/7")
    assert response.status_code == 404
    assert response.json()["message"] == "No trips found for this passenger"


def test_trips_by_date(client, trip):
    """Test date queries normalize the requested date."""
    client.post("/api/trips", json=trip_payload(trip_date="2024-01-06"))

    response = client.get("/api/trips/date/2024-01-05T12:00:00Z")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == trip["id"]

    response = client.get("/api/trips/date/not-a-date")
    assert response.status_code == 400


def test_update_trip(client, trip):
    """Test replacing a trip."""
    response = client.put(
        f"/api/trips/{trip['id']}",
        json=trip_payload(to_destination="NTM", trip_date="2024-02-10", confirmed=True),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["to_destination"] == "NTM"
    assert data["trip_date"] == "2024-02-10"
    assert data["confirmed"] is True


def test_confirm_trip(client, trip):
    """Test setting the confirmation flag."""
    response = client.patch(f"/api/trips/{trip['id']}/confirm", json={"confirmed": True})

    assert response.status_code == 200
    assert response.json()["confirmed"] is True


def test_delete_trip(client, trip):
    """Test deleting a trip."""
    response = client.delete(f"/api/trips/{trip['id']}")

    assert response.status_code == 200
    assert response.json()["trip_id"] == trip["id"]
    assert client.get(f"/api/trips/{trip['id']}").status_code == 404


def test_increment_from_absent_count(client, trip):
    """Test incrementing a trip with no count treats the base as one."""
    response = client.patch(f"/api/trips/{trip['id']}/passengers/increment")

    assert response.status_code == 200
    assert response.json()["number_of_passengers"] == 2

    response = client.patch(f"/api/trips/{trip['id']}/passengers/increment")
    assert response.json()["number_of_passengers"] == 3


def test_increment_missing_trip(client):
    """Test incrementing a trip that does not exist."""
    response = client.patch("/api/trips/99999/passengers/increment")

    assert response.status_code == 404


def test_decrement(client, db, trip):
    """Test decrementing above the floor."""
    set_count(db, trip["id"], 3)

    response = client.patch(f"/api/trips/{trip['id']}/passengers/decrement")

    assert response.status_code == 200
    assert response.json()["number_of_passengers"] == 2


@pytest.mark.parametrize("count", [None, 1])
def test_decrement_at_floor_is_refused(client, db, trip, count):
    """Test the count never drops below one and is left unchanged."""
    set_count(db, trip["id"], count)

    response = client.patch(f"/api/trips/{trip['id']}/passengers/decrement")

    assert response.status_code == 400
    assert response.json()["message"] == "Number of passengers cannot be less than 1"
    assert client.get(f"/api/trips/{trip['id']}").json()["number_of_passengers"] == count


def test_decrement_missing_trip(client):
    """Test decrementing a trip that does not exist."""
    response = client.patch("/api/trips/99999/passengers/decrement")

    assert response.status_code == 404


def test_set_passengers(client, trip):
    """Test setting an explicit passenger count."""
    response = client.patch(
        f"/api/trips/{trip['id']}/passengers/set", json={"number_of_passengers": 5}
    )
    assert response.status_code == 200
    assert response.json()["number_of_passengers"] == 5

    response = client.patch(
        f"/api/trips/{trip['id']}/passengers/set", json={"number_of_passengers": 0}
    )
    assert response.status_code == 400

    response = client.patch(f"/api/trips/{trip['id']}/passengers/set", json={})
    assert response.status_code == 400


def test_counter_changes_are_single_statements(db):
    """Test consecutive service-level changes accumulate on the stored value."""
    trip = Trip(
        passenger_id="1", from_origin="A", to_destination="B", trip_date="2024-01-05",
        confirmed=False,
    )
    db.add(trip)
    db.commit()
    service = TripService(db)

    for _ in range(4):
        service.increment_passengers(trip.id)
    assert service.decrement_passengers(trip.id).number_of_passengers == 4
