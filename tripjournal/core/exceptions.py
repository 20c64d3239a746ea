"""
ข้อยกเว้นกำหนดเอง สำหรับไคลเอนต์ Trip Journal
"""

from typing import Optional


class JournalException(Exception):
    """Base exception for trip journal client errors"""
    pass


class JournalServiceError(JournalException):
    """Exception raised for journal API failures"""
    pass


class InvalidResponseError(JournalServiceError):
    """Unexpected status code or response shape"""

    def __init__(self, message: str = "Invalid response from server", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidDataError(JournalServiceError):
    """Response body could not be decoded into the expected type"""
    pass


class InvalidTokenError(JournalServiceError):
    """Access token missing, invalid or expired"""

    def __init__(self, message: str = "Your session has expired. Please log in again."):
        super().__init__(message)


class NotFoundError(JournalServiceError):
    """Requested resource is not in the fetched data"""

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class NetworkError(JournalServiceError):
    """Transport-level failure (connection refused, timeout, DNS)"""
    pass


class StorageException(JournalException):
    """Exception raised for credential/cache storage operations"""
    pass


class ConfigException(JournalException):
    """Exception raised for invalid client configuration"""
    pass
