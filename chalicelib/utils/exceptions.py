__all__ = ["RecordNotFound", "NumberOfRetriesExceeded", "MandatoryFieldsAreNotFilled", "ValidationException",
           "UploadRejected"]


# Generic Exceptions
class MandatoryFieldsAreNotFilled(Exception):
    pass


# DynamoDB exceptions
class RecordNotFound(Exception):
    pass


# DB Performance Exception
class NumberOfRetriesExceeded(Exception):
    pass


# Validations exceptions
class ValidationException(Exception):
    pass


class UploadRejected(ValidationException):
    pass
