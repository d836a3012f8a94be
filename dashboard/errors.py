__all__ = ["DashboardError", "ApiError", "TransportError", "FormValidationError", "UploadRejected"]


class DashboardError(Exception):
    pass


# Server answered with non-2xx, message is the server's `error` field
class ApiError(DashboardError):
    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}


# Request didn't reach the server or the response was unreadable
class TransportError(DashboardError):
    pass


# Client side validation, raised before any network call
class FormValidationError(DashboardError):
    def __init__(self, message, missing_fields=None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class UploadRejected(DashboardError):
    pass
