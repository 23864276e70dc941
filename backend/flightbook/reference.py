# Static lookup tables shared by every flight handler.

# Two-letter flight number prefix -> airline display name
AIRLINE_CODES = {
    "VN": "Vietnam Airlines",
    "QH": "Bamboo Airways",
    "VJ": "Vietjet Air",
    "BL": "Pacific Airlines",
    "TG": "Thai Airways International",
}

UNKNOWN_AIRLINE = "Unknown Airline"

# Local time-of-day buckets as inclusive (start_hour, end_hour) pairs.
# morning 00:00:00-11:59:59, afternoon 12:00:00-17:59:59, evening 18:00:00-23:59:59
TIME_OF_DAY_BUCKETS = {
    "morning": (0, 11),
    "afternoon": (12, 17),
    "evening": (18, 23),
}

FLIGHT_STATUSES = ("scheduled", "delayed", "cancelled", "in_air", "landed")
BOOKABLE_STATUS = "scheduled"

USER_ROLES = ("customer", "admin")
SEAT_CLASSES = ("economy", "business")
BOOKING_STATUSES = ("pending", "confirmed", "cancelled")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 3
POPULAR_FLIGHTS_LIMIT = 5

# Upper bounds for numeric query parameters; larger values are clamped
MAX_PAGE = 100_000
MAX_LIMIT = 100
MAX_PASSENGER_COUNT = 1_000
