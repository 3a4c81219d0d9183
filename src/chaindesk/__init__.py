# src/chaindesk/__init__.py
"""
chaindesk

Async client for a toy blockchain HTTP service: response normalization,
transaction stepper and chain editor workflows.
"""

__version__ = "0.1.0"

from .api.client import ChainApiClient
from .api.transport import HttpTransport
from .exceptions import (
    ChainDeskError,
    RequestFailedError,
    MalformedResponseError,
    InvalidPrizeError,
    WorkflowError,
    StepBlockedError,
    InsufficientBalanceError,
)
from .workflows.transaction import TransactionWorkflow, Stage
from .workflows.chain import ChainReconciler
from .workflows.mining import PrizeLookup, MiningSession
from .wallet.balances import WalletBook

__all__ = [
    'ChainApiClient',
    'HttpTransport',
    'ChainDeskError',
    'RequestFailedError',
    'MalformedResponseError',
    'InvalidPrizeError',
    'WorkflowError',
    'StepBlockedError',
    'InsufficientBalanceError',
    'TransactionWorkflow',
    'Stage',
    'ChainReconciler',
    'PrizeLookup',
    'MiningSession',
    'WalletBook',
]
