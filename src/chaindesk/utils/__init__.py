# src/chaindesk/utils/__init__.py
from .logger import get_logger
from .config import Config
from .coerce import to_number, to_bool, to_index
from .format import shorten, format_amount, wallet_label

__all__ = [
    'get_logger', 'Config',
    'to_number', 'to_bool', 'to_index',
    'shorten', 'format_amount', 'wallet_label',
]
