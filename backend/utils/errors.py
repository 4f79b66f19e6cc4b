# backend/utils/errors.py
# Failures raised by the services. main.py turns each one into a JSON
# response {"detail": message} with the class's status code.


class ServiceError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class InvalidInput(ServiceError):
    status_code = 400
    default_message = "Invalid input"


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = "Access token is missing"


class InvalidCredential(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"


# Unique-constraint violations are reported to the user as a bad request
class Conflict(ServiceError):
    status_code = 400
    default_message = "Already exists"
