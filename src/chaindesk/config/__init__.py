# src/chaindesk/config/__init__.py
from .client_config import ClientConfig, DEFAULT_CONFIG

__all__ = ['ClientConfig', 'DEFAULT_CONFIG']
