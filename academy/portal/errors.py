NETWORK_ERROR = "NETWORK_ERROR"


class PortalError(Exception):
    pass


class PortalApiError(PortalError):
    """A failed call to the academy API. ``status_code`` is 0 when no response arrived."""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code}: {message}")


class AlreadyClaimedError(PortalError):
    def __init__(self, student_id: str, course_id: str):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__(f"Certificate already claimed for course {course_id}")


class StorageQuotaError(PortalError):
    def __init__(self, key: str, size: int, quota: int):
        self.key = key
        self.size = size
        self.quota = quota
        super().__init__(f"Value for {key!r} is {size} bytes, quota is {quota}")
