"""
Machine-readable error codes carried in the `error_code` field of error responses.
"""

INVALID_ID = "invalid_id"
SELF_SWIPE = "self_swipe"
FETCH_FAILED = "fetch_failed"
ARTIST_NOT_FOUND = "artist_not_found"
NOT_AUTHORIZED = "not_authorized"
DUPLICATE_APPLICATION = "duplicate_application"
DUPLICATE_REGISTRATION = "duplicate_registration"
EVENT_FULL = "event_full"
BOOKING_STATE = "booking_state"
