# src/chaindesk/exceptions.py
from typing import Optional

class ChainDeskError(Exception):
    """Base exception class for client-side errors"""
    pass

class RequestFailedError(ChainDeskError):
    """Raised when the server reports failure or the request never completes"""

    def __init__(self, message: str = "Request failed", status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

class MalformedResponseError(ChainDeskError):
    """Raised when a response cannot be coerced into the expected shape"""
    pass

class InvalidPrizeError(MalformedResponseError):
    """Raised when the prize payload carries no usable number"""
    pass

class WorkflowError(ChainDeskError):
    """Base exception class for workflow state errors"""
    pass

class StepBlockedError(WorkflowError):
    """Raised when a workflow guard refuses to advance"""
    pass

class InsufficientBalanceError(StepBlockedError):
    """Raised when amount plus fee exceeds what the sender can spend"""

    def __init__(self, message: str, available: float, requested: float):
        super().__init__(message)
        self.available = available
        self.requested = requested
