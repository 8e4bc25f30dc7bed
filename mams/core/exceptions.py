"""
Domain errors raised by the workflow services.

Each error carries a stable ``kind`` used in API responses and an HTTP
status used by the exception handler in ``mams.main``.
"""


class WorkflowError(Exception):
    """Base error for every refused or failed operation."""

    kind = "workflow_error"
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(WorkflowError):
    """Entity does not exist or lies outside the caller's scope."""

    kind = "not_found"
    status_code = 404


class Forbidden(WorkflowError):
    kind = "forbidden"
    status_code = 403


class InvalidInput(WorkflowError):
    """Malformed quantity, missing field, or a uniqueness collision."""

    kind = "invalid_input"
    status_code = 400


class InvalidAssignee(WorkflowError):
    kind = "invalid_assignee"
    status_code = 400


class AlreadyProcessed(WorkflowError):
    """A request has already left its initial state."""

    kind = "already_processed"
    status_code = 409

    def __init__(self, entity: str, entity_id: int, status: str):
        self.entity = entity
        self.entity_id = entity_id
        self.status = status
        super().__init__(f"{entity} {entity_id} already {status}")


class InsufficientStock(WorkflowError):
    kind = "insufficient_stock"
    status_code = 409

    def __init__(self, base_id: int, asset_id: int, message: str = None):
        self.base_id = base_id
        self.asset_id = asset_id
        super().__init__(message or f"Insufficient stock of asset {asset_id} at base {base_id}")


class StorageFailure(WorkflowError):
    """The database aborted the transaction; nothing was applied."""

    kind = "storage_failure"
    status_code = 503
