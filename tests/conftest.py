# tests/conftest.py
import pytest
from unittest.mock import AsyncMock

from chaindesk.api.client import ChainApiClient
from chaindesk.api.models import Block, Wallet

@pytest.fixture
def client():
    """Chain API client double; every endpoint is an AsyncMock"""
    return AsyncMock(spec=ChainApiClient)

@pytest.fixture
def wallets():
    return [
        Wallet(address="addr_alice", name="Alice", public_key="pub_alice",
               private_key="key_alice", balance=100.0, pending_balance=80.0),
        Wallet(address="addr_bob", name="Bob", public_key="pub_bob",
               private_key="key_bob", balance=20.0, pending_balance=20.0),
        Wallet(address="addr_carol", name="Carol", public_key="pub_carol",
               balance=5.0),
    ]

@pytest.fixture
def blocks():
    return [
        Block(index=0, hash="h0", previous_hash="0" * 64),
        Block(index=1, hash="h1", previous_hash="h0"),
        Block(index=2, hash="h2", previous_hash="h1"),
        Block(index=3, hash="h3", previous_hash="h2"),
        Block(index=4, hash="h4", previous_hash="h3"),
    ]
