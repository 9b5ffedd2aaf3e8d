from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

import services.bookings as booking_service
from models import db
from models.booking import Booking
from models.booking_counter import next_booking_id
from models.customer import Customer
from services.availability import available_rooms
from services.bookings import BookingInput, create_booking, get_booking, list_bookings, update_booking
from services.errors import ConflictError, NotFoundError, StorageError, ValidationError
from services.rooms import list_rooms

from factories import booking_input, booking_payload


class TestBookingInput:
    def test_parses_payload(self):
        data = booking_input(roomIds=["110", "20", "101", "20"], paymentStatus="deposit", depositAmount="250.50")
        assert data.check_in == date(2024, 7, 10)
        assert data.check_out == date(2024, 7, 12)
        assert data.room_ids == ["20", "101", "110"]
        assert data.payment_status == "DEPOSIT"
        assert data.deposit_amount == Decimal("250.50")
        assert data.price_per_night == Decimal("800")

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"roomIds": []}, "Select at least one room"),
            ({"customerName": "  "}, "customerName is required"),
            ({"checkIn": "2024-07-10"}, "checkIn must be a date in dd/mm/yyyy format"),
            ({"checkOut": "10/07/2024"}, "Check-out date must be after check-in date"),
            ({"checkOut": "09/07/2024"}, "Check-out date must be after check-in date"),
            ({"pricePerNight": -1}, "pricePerNight must be a non-negative number"),
            ({"pricePerNight": "abc"}, "pricePerNight must be a number"),
            ({"pricePerNight": None}, "pricePerNight is required"),
        ],
    )
    def test_rejects_invalid_payload(self, overrides, message):
        with pytest.raises(ValidationError) as err:
            BookingInput.from_payload(booking_payload(**overrides))
        assert err.value.message == message

    def test_unknown_payment_status_becomes_unpaid(self):
        assert booking_input(paymentStatus="REFUNDED").payment_status == "UNPAID"


class TestCreate:
    def test_create_then_list_shows_booking_once(self, app):
        created = create_booking(booking_input(roomIds=["105", "101", "102"]))

        assert created.room_ids == ["101", "102", "105"]
        assert created.id == "BK000001"
        assert Booking.query.count() == 3

        listed = list_bookings()
        assert len(listed) == 1
        assert listed[0] == created
        assert set(listed[0].room_ids) == {"101", "102", "105"}

    def test_each_room_gets_its_own_id(self, app):
        create_booking(booking_input(roomIds=["101", "102"]))
        ids = sorted(b.booking_id for b in Booking.query.all())
        assert ids == ["BK000001", "BK000002"]
        assert len({b.group_id for b in Booking.query.all()}) == 1

    def test_customer_found_by_name_and_phone_and_overwritten(self, app):
        create_booking(booking_input(roomIds=["101"], email="old@example.com"))
        create_booking(booking_input(
            roomIds=["102"], checkIn="20/07/2024", checkOut="21/07/2024",
            email="new@example.com", address=None,
        ))

        assert Customer.query.count() == 1
        customer = Customer.query.first()
        assert customer.email == "new@example.com"
        assert customer.address is None

        create_booking(booking_input(roomIds=["105"], phone="0899999999"))
        assert Customer.query.count() == 2

    def test_unknown_room_is_rejected(self, app):
        with pytest.raises(ValidationError) as err:
            create_booking(booking_input(roomIds=["101", "999"]))
        assert err.value.details == {"roomIds": ["999"]}
        assert Booking.query.count() == 0
        assert Customer.query.count() == 0

    def test_overlapping_room_is_a_conflict(self, app):
        create_booking(booking_input(roomIds=["101"], checkIn="01/06/2024", checkOut="03/06/2024"))

        with pytest.raises(ConflictError) as err:
            create_booking(booking_input(
                customerName="Other Guest", roomIds=["101", "102"],
                checkIn="02/06/2024", checkOut="04/06/2024",
            ))
        assert err.value.details == {"roomIds": ["101"]}
        assert Booking.query.count() == 1

        # back to back is fine
        create_booking(booking_input(
            customerName="Other Guest", roomIds=["101"], checkIn="03/06/2024", checkOut="05/06/2024",
        ))
        assert Booking.query.count() == 2

    def test_failure_midway_leaves_nothing_behind(self, app, monkeypatch):
        calls = []

        def flaky_next_id():
            calls.append(1)
            if len(calls) == 2:
                db.session.flush()
                raise OperationalError("INSERT INTO bookings", {}, Exception("connection reset"))
            return next_booking_id()

        monkeypatch.setattr(booking_service, "next_booking_id", flaky_next_id)

        with pytest.raises(StorageError):
            create_booking(booking_input(roomIds=["101", "102", "105"]))

        assert Booking.query.count() == 0
        assert Customer.query.count() == 0

        monkeypatch.undo()
        # the counter increment was rolled back too
        assert create_booking(booking_input(roomIds=["101"])).id == "BK000001"

    def test_same_customer_and_dates_stay_separate_bookings(self, app):
        create_booking(booking_input(roomIds=["101"]))
        create_booking(booking_input(roomIds=["102"]))

        listed = list_bookings()
        assert len(listed) == 2
        assert sorted(b.room_ids[0] for b in listed) == ["101", "102"]


class TestList:
    def test_newest_first_and_repeatable(self, app):
        first = create_booking(booking_input(roomIds=["101"]))
        second = create_booking(booking_input(customerName="Second", roomIds=["102"]))

        listed = list_bookings()
        assert [b.id for b in listed] == [second.id, first.id]
        assert list_bookings() == listed

    def test_search(self, app):
        create_booking(booking_input(roomIds=["101"]))
        create_booking(booking_input(customerName="Anna Smith", phone="0655555555", roomIds=["102"]))

        assert [b.customer_name for b in list_bookings(search="anna")] == ["Anna Smith"]
        assert [b.customer_name for b in list_bookings(search="0655")] == ["Anna Smith"]
        assert len(list_bookings(search="10/07/2024")) == 2
        assert [b.id for b in list_bookings(search="bk000001")] == ["BK000001"]

    def test_get_booking_by_any_member_id(self, app):
        created = create_booking(booking_input(roomIds=["101", "102"]))
        assert get_booking("BK000002") == created

        with pytest.raises(NotFoundError):
            get_booking("BK404404")


class TestUpdate:
    def test_swap_rooms(self, app):
        created = create_booking(booking_input(roomIds=["101", "102"]))
        kept_row_id = Booking.query.join(Booking.room).filter_by(room_number="102").one().booking_id

        updated = update_booking(created.id, booking_input(roomIds=["102", "105"]))

        assert updated.room_ids == ["102", "105"]
        rows = Booking.query.filter_by(group_id=created.group_id).all()
        assert sorted(r.room.room_number for r in rows) == ["102", "105"]
        assert all(r.check_in_date == date(2024, 7, 10) and r.check_out_date == date(2024, 7, 12) for r in rows)

        # retained room keeps its row, the new room gets a new id
        assert Booking.query.join(Booking.room).filter_by(room_number="102").one().booking_id == kept_row_id
        assert Booking.query.join(Booking.room).filter_by(room_number="105").one().booking_id == "BK000003"
        assert updated.id == kept_row_id

        free = [r.id for r in available_rooms(list_rooms(), list_bookings(), "10/07/2024", "12/07/2024")]
        assert "101" in free
        assert "102" not in free and "105" not in free

    def test_rewrites_every_member(self, app):
        created = create_booking(booking_input(roomIds=["101", "102"]))

        updated = update_booking(created.id, booking_input(
            customerName="Somchai J.", roomIds=["101", "102"], checkIn="11/07/2024", checkOut="14/07/2024",
            paymentStatus="PAID", pricePerNight=950, depositAmount=500,
        ))

        assert updated.customer_name == "Somchai J."
        assert updated.payment_status == "PAID"
        for row in Booking.query.all():
            assert row.check_in_date == date(2024, 7, 11)
            assert row.check_out_date == date(2024, 7, 14)
            assert row.status == "Paid"
            assert row.price_per_night == Decimal("950")
            assert row.deposit == Decimal("500")

    def test_can_move_within_its_own_dates(self, app):
        created = create_booking(booking_input(roomIds=["101"], checkIn="10/07/2024", checkOut="13/07/2024"))
        updated = update_booking(created.id, booking_input(roomIds=["101"], checkIn="11/07/2024", checkOut="14/07/2024"))
        assert updated.check_in == date(2024, 7, 11)

    def test_conflict_leaves_booking_untouched(self, app):
        create_booking(booking_input(customerName="Guest A", roomIds=["101"]))
        other = create_booking(booking_input(customerName="Guest B", roomIds=["102"]))

        with pytest.raises(ConflictError):
            update_booking(other.id, booking_input(customerName="Guest B renamed", roomIds=["101", "105"]))

        assert get_booking(other.id) == other
        assert Booking.query.count() == 2

    def test_failure_midway_rolls_back(self, app, monkeypatch):
        created = create_booking(booking_input(roomIds=["101", "102"]))

        def broken_next_id():
            db.session.flush()
            raise OperationalError("INSERT INTO bookings", {}, Exception("disk full"))

        monkeypatch.setattr(booking_service, "next_booking_id", broken_next_id)
        with pytest.raises(StorageError):
            update_booking(created.id, booking_input(
                customerName="Changed", roomIds=["102", "105"], paymentStatus="PAID",
            ))

        assert get_booking(created.id) == created
        assert Customer.query.first().customer_name == "Somchai Jaidee"

    def test_unknown_booking(self, app):
        with pytest.raises(NotFoundError):
            update_booking("BK999999", booking_input())
