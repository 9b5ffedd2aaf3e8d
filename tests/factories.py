from services.bookings import BookingInput


def booking_payload(**overrides):
    payload = {
        "customerName": "Somchai Jaidee",
        "phone": "0812345678",
        "checkIn": "10/07/2024",
        "checkOut": "12/07/2024",
        "roomIds": ["101"],
        "paymentStatus": "UNPAID",
        "pricePerNight": 800,
        "depositAmount": 0,
        "email": "somchai@example.com",
        "address": "Nakhon Phanom",
        "taxId": None,
    }
    payload.update(overrides)
    return payload


def booking_input(**overrides):
    return BookingInput.from_payload(booking_payload(**overrides))
