"""Workflow error taxonomy.

Every service-layer failure is raised as one of these exceptions before any
write happens. Each carries a stable ``code`` plus the entity and field it is
about, so the HTTP layer can render a specific message without looking at
exception text.
"""

from typing import Any, Dict, Optional


class WorkflowError(Exception):
    """Base class for all workflow failures."""

    status_code: int = 400
    code: str = "WORKFLOW_ERROR"

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        field: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.field = field
        if code:
            self.code = code

    def to_detail(self) -> Dict[str, Any]:
        """Serializable error body used by the API exception handler."""
        return {
            "code": self.code,
            "message": self.message,
            "entity": self.entity,
            "field": self.field,
        }


class NotFound(WorkflowError):
    """Entity id does not resolve."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            entity=entity,
            field="id",
            code=f"{entity.upper()}_NOT_FOUND",
        )
        self.entity_id = entity_id


class Forbidden(WorkflowError):
    """Role or ownership check failed."""

    status_code = 403
    code = "FORBIDDEN"


class InvalidTransition(WorkflowError):
    """Status precondition unmet."""

    status_code = 409
    code = "INVALID_TRANSITION"


class TaskNotOpen(InvalidTransition):
    """Applications are only accepted while the task is open."""

    code = "TASK_NOT_OPEN"


class DuplicateApplication(WorkflowError):
    """A worker may apply to a given task at most once."""

    status_code = 409
    code = "DUPLICATE_APPLICATION"


class InvalidArgument(WorkflowError):
    """Malformed or out-of-range input."""

    status_code = 400
    code = "INVALID_ARGUMENT"


class InvalidReviewStatus(InvalidArgument):
    code = "INVALID_REVIEW_STATUS"


class CapacityExceeded(WorkflowError):
    """Task already has as many assigned workers as it asked for."""

    status_code = 409
    code = "CAPACITY_EXCEEDED"
