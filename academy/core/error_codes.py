class ErrorCode:
    """Machine-readable error codes carried in every error response."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_USER = "INVALID_USER"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"

    USER_NOT_FOUND = "USER_NOT_FOUND"
    COURSE_NOT_FOUND = "COURSE_NOT_FOUND"
    COVER_NOT_FOUND = "COVER_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"

    DUPLICATE_LESSON_ID = "DUPLICATE_LESSON_ID"
    UNKNOWN_LESSON_ID = "UNKNOWN_LESSON_ID"
    COURSE_CONFLICT = "COURSE_CONFLICT"
    CERTIFICATE_ALREADY_CLAIMED = "CERTIFICATE_ALREADY_CLAIMED"

    VALIDATION_ERROR = "VALIDATION_ERROR"
