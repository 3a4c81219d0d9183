# src/chaindesk/workflows/__init__.py
from .transaction import TransactionWorkflow, Stage
from .chain import ChainReconciler, ChainValidation, RestoreReport
from .debounce import DebounceRegistry
from .mining import PrizeLookup, MiningSession, MineOutcome

__all__ = [
    'TransactionWorkflow', 'Stage',
    'ChainReconciler', 'ChainValidation', 'RestoreReport',
    'DebounceRegistry',
    'PrizeLookup', 'MiningSession', 'MineOutcome',
]
