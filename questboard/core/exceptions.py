"""
Custom exceptions for Questboard.
Services raise these; the API layer maps them to HTTP responses in main.py.
"""


class QuestboardException(Exception):
    """Base exception for the application"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundException(QuestboardException):
    """Raised when a user, task, goal, category or achievement is absent"""
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class ValidationException(QuestboardException):
    """Raised when input is well-typed but not acceptable"""
    status_code = 400

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")


class ExternalServiceException(QuestboardException):
    """Raised when an external service (the AI roadmap generator) fails"""
    status_code = 502

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service} failed: {message}")


class ConflictException(QuestboardException):
    """Raised when a write would collide with an existing record"""
    status_code = 409
