# src/chaindesk/api/__init__.py
from .client import ChainApiClient
from .transport import HttpTransport
from .models import (
    Wallet,
    Transaction,
    Block,
    BuildSignResult,
    ValidationEntry,
    ValidationResult,
    ApiResult,
    MineResult,
)

__all__ = [
    'ChainApiClient', 'HttpTransport',
    'Wallet', 'Transaction', 'Block', 'BuildSignResult',
    'ValidationEntry', 'ValidationResult', 'ApiResult', 'MineResult',
]
