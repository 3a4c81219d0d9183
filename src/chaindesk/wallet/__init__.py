# src/chaindesk/wallet/__init__.py
from .balances import WalletBook
from .keys import generate_private_key

__all__ = ['WalletBook', 'generate_private_key']
