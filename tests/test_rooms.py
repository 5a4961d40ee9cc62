import os
import pytest
from datetime import date, datetime
from fastapi import status
from sqlalchemy.exc import OperationalError
from campus_booking.db import after_commit, commit, rollback
from campus_booking.models.booking import Booking, BookingDetail
from campus_booking.models.room import Room
from campus_booking.schemas.room import RoomUpdate
from campus_booking.services import room_service
from campus_booking.services.room_service import PhotoUpload
from campus_booking.utils.errors import ValidationError
from tests.conf_tests import (
    client,
    clear_db,
    test_user_data,
    test_user,
    test_db,
    auth_user,
    auth_headers,
    test_disk,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def test_room(test_db):
    room = Room(name="Conference Room A", faculty_name="Engineering", capacity=10)
    test_db.add(room)
    test_db.commit()
    test_db.refresh(room)
    return room


@pytest.fixture
def room_with_photo(test_db):
    path = test_disk.store(PNG_BYTES, "uploads/rooms", ".png")
    room = Room(name="Studio", faculty_name="Arts", capacity=20, photo=path)
    test_db.add(room)
    test_db.commit()
    test_db.refresh(room)
    return room


# Tests
def test_create_room_unauthorized():
    response = client.post(
        "/rooms/", data={"name": "Meeting Room", "faculty_name": "Law", "capacity": "5"}
    )
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


def test_create_room_defaults_to_draft(auth_headers):
    room_data = {"name": "Meeting Room", "faculty_name": "Law", "capacity": "5"}
    response = client.post("/rooms/", data=room_data, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "draft"
    assert data["capacity"] == 5
    assert data["photo"] is None
    assert data["photo_url"] is None


def test_create_room_with_photo(auth_headers):
    response = client.post(
        "/rooms/",
        data={"name": "Lab 1", "faculty_name": "Science", "capacity": "30", "status": "approved"},
        files={"photo": ("lab.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "approved"
    assert data["photo"].startswith("uploads/rooms/")
    assert data["photo"].endswith(".png")
    assert data["photo_url"].endswith(data["photo"])
    assert test_disk.exists(data["photo"])


def test_photo_url_uses_configured_disk(auth_headers):
    response = client.post(
        "/rooms/",
        data={"name": "Lab 2", "faculty_name": "Science", "capacity": "12"},
        files={"photo": ("lab.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    created = response.json()
    expected = f"/test-storage/{created['photo']}"
    assert created["photo_url"] == expected

    assert client.get(f"/rooms/{created['id']}").json()["photo_url"] == expected
    assert [r["photo_url"] for r in client.get("/rooms/").json()] == [expected]


def test_create_room_rejects_non_image(auth_headers, test_db):
    response = client.post(
        "/rooms/",
        data={"name": "Lab 1", "faculty_name": "Science", "capacity": "30"},
        files={"photo": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "photo" in response.json()["errors"]
    assert test_db.query(Room).count() == 0


def test_create_room_invalid_fields(auth_headers):
    response = client.post(
        "/rooms/",
        data={"faculty_name": "Science", "capacity": "0", "status": "archived"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    errors = response.json()["errors"]
    assert {"name", "capacity", "status"} <= set(errors)


def test_get_rooms_with_data(test_room):
    response = client.get("/rooms/")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == test_room.id
    assert data[0]["name"] == test_room.name


def test_get_rooms_search_and_status(test_db):
    test_db.add_all([
        Room(name="Hall", faculty_name="Medicine", capacity=100, status="approved"),
        Room(name="Cubicle", faculty_name="Law", capacity=2, status="rejected"),
        Room(name="Lecture Hall", faculty_name="Law", capacity=80, status="draft"),
    ])
    test_db.commit()

    def names(response):
        return sorted(r["name"] for r in response.json())

    assert names(client.get("/rooms/", params={"search": "Hall"})) == ["Hall", "Lecture Hall"]
    assert names(client.get("/rooms/", params={"search": "Law"})) == ["Cubicle", "Lecture Hall"]
    assert names(client.get("/rooms/", params={"status": "rejected"})) == ["Cubicle"]
    assert names(client.get("/rooms/", params={"search": "Law", "status": "draft"})) == ["Lecture Hall"]


def test_get_room_success(test_room):
    response = client.get(f"/rooms/{test_room.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_room.id
    assert data["capacity"] == test_room.capacity
    assert data["faculty_name"] == test_room.faculty_name


def test_get_room_not_found():
    response = client.get("/rooms/9999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Room not found"


def test_update_room_unauthorized(test_room):
    response = client.put(f"/rooms/{test_room.id}", data={"name": "Updated Name"})
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


def test_partial_update_room(auth_headers, test_room):
    response = client.put(
        f"/rooms/{test_room.id}", data={"capacity": "20"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["capacity"] == 20
    assert data["name"] == test_room.name
    assert data["status"] == "draft"


@pytest.mark.parametrize("sequence", [["approved", "rejected", "approved"], ["rejected", "draft"]])
def test_status_moves_freely(auth_headers, test_room, sequence):
    for room_status in sequence:
        response = client.put(
            f"/rooms/{test_room.id}", data={"status": room_status}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == room_status


def test_update_room_replaces_photo(auth_headers, room_with_photo):
    old_photo = room_with_photo.photo
    response = client.put(
        f"/rooms/{room_with_photo.id}",
        files={"photo": ("new.gif", b"GIF89a" + b"\x00" * 16, "image/gif")},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    new_photo = response.json()["photo"]
    assert new_photo != old_photo
    assert new_photo.endswith(".gif")
    assert test_disk.exists(new_photo)
    assert not test_disk.exists(old_photo)


def test_update_room_without_photo_keeps_it(auth_headers, room_with_photo):
    response = client.put(
        f"/rooms/{room_with_photo.id}", data={"name": "Renamed"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["photo"] == room_with_photo.photo
    assert test_disk.exists(room_with_photo.photo)


def test_update_room_not_found(auth_headers):
    response = client.put(
        "/rooms/9999", data={"name": "Non-existent Room"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_failed_update_keeps_old_photo(test_db, room_with_photo):
    oversized = PhotoUpload(b"\x00" * (2048 * 1024 + 1), "image/jpeg")
    with pytest.raises(ValidationError):
        room_service.update_room(test_db, test_disk, room_with_photo.id, RoomUpdate(), oversized)
    assert test_disk.exists(room_with_photo.photo)


def test_failed_commit_keeps_old_photo(test_db, room_with_photo, monkeypatch):
    old_photo = room_with_photo.photo

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(test_db, "commit", failing_commit)
    with pytest.raises(OperationalError):
        room_service.update_room(
            test_db, test_disk, room_with_photo.id, RoomUpdate(), PhotoUpload(PNG_BYTES, "image/png")
        )
    monkeypatch.undo()

    assert "after_commit" not in test_db.info
    assert test_disk.exists(old_photo)
    stored = os.listdir(os.path.join(test_disk.root, "uploads/rooms"))
    assert stored == [os.path.basename(old_photo)]
    assert test_db.query(Room).filter(Room.id == room_with_photo.id).one().photo == old_photo


def test_rollback_drops_queued_callbacks(test_db):
    calls = []
    after_commit(test_db, lambda: calls.append("rolled back"))
    rollback(test_db)
    commit(test_db)
    assert calls == []

    after_commit(test_db, lambda: calls.append("committed"))
    commit(test_db)
    assert calls == ["committed"]
    assert "after_commit" not in test_db.info


def test_delete_room_unauthorized(test_room):
    response = client.delete(f"/rooms/{test_room.id}")
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


def test_delete_room_removes_photo(auth_headers, room_with_photo, test_db):
    photo = room_with_photo.photo
    response = client.delete(f"/rooms/{room_with_photo.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert test_db.query(Room).filter(Room.id == room_with_photo.id).first() is None
    assert not test_disk.exists(photo)


def test_delete_room_not_found(auth_headers):
    response = client.delete("/rooms/9999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_room_in_use_is_refused(auth_headers, room_with_photo, test_user, test_db):
    booking = Booking(tgl=date(2025, 1, 10), customer_name="Dina", user_id=test_user.id)
    booking.booking_details.append(
        BookingDetail(
            room_id=room_with_photo.id,
            start=datetime(2025, 1, 10, 9),
            end=datetime(2025, 1, 10, 10),
        )
    )
    test_db.add(booking)
    test_db.commit()

    response = client.delete(f"/rooms/{room_with_photo.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "room" in response.json()["errors"]

    test_db.expire_all()
    assert test_db.query(Room).filter(Room.id == room_with_photo.id).first() is not None
    assert test_db.query(Booking).count() == 1
    assert test_db.query(BookingDetail).filter(BookingDetail.room_id == room_with_photo.id).count() == 1
    assert test_disk.exists(room_with_photo.photo)
