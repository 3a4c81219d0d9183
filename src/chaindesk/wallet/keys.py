# src/chaindesk/wallet/keys.py
import random
import secrets

from ..utils.config import Config
from ..utils.logger import get_logger

logger = get_logger(__name__)

def _strong_bytes(num_bytes: int) -> bytes:
    return secrets.token_bytes(num_bytes)

def _fallback_bytes(num_bytes: int) -> bytes:
    rng = random.Random()
    return bytes(rng.getrandbits(8) for _ in range(num_bytes))

def generate_private_key(num_bytes: int = Config.PRIVATE_KEY_BYTES) -> str:
    """
    Generate a random private key as lowercase hex.

    Demo only: the server signs with whatever key it receives, and this key
    exists so the operator can watch approval fail with the wrong secret.
    Falls back to the non-cryptographic ``random`` module when the OS
    entropy source is unavailable.
    """
    try:
        raw = _strong_bytes(num_bytes)
    except NotImplementedError:
        logger.warning("No OS entropy source available; generated key is NOT production-safe")
        raw = _fallback_bytes(num_bytes)
    return raw.hex()
