# app/errors.py
# Role: Domain exceptions shared by repositories, services and routes.
#       Each carries a client-safe message and the HTTP status main.py maps it to.

"""
Error taxonomy for the business dashboard API.

Every repository / service call either returns a result or raises exactly one
of these. The message is what the client sees; internal detail (driver
errors, stack traces) only goes to the log.
"""


class BizDashError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BizDashError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(BizDashError):
    """The referenced id does not exist."""

    status_code = 404


class AuthError(BizDashError):
    """Bad credentials, or a missing / invalid / expired session token."""

    status_code = 401


class AuthNotConfiguredError(AuthError):
    """No operator credentials are configured on the server."""

    status_code = 500


class StorageError(BizDashError):
    """The database failed. The message stays generic."""

    status_code = 500
