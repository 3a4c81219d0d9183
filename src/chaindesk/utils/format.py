# src/chaindesk/utils/format.py
import math
from typing import Any, Optional

from .config import Config

def shorten(value: Optional[Any], visible: int = Config.SHORTEN_VISIBLE) -> str:
    """Shorten long addresses and keys to head...tail"""
    if not value:
        return ''
    text = str(value)
    if len(text) <= visible * 2:
        return text
    return f"{text[:visible]}...{text[-visible:]}"

def format_amount(value: Optional[float], fraction_digits: int = Config.AMOUNT_FRACTION_DIGITS) -> str:
    """Format an amount with thousands grouping and no trailing zeros"""
    if value is None:
        return '0'
    try:
        number = float(value)
    except (TypeError, ValueError):
        return '0'
    if math.isnan(number):
        return '0'

    text = f"{number:,.{fraction_digits}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text == '-0':
        text = '0'
    return text

def wallet_label(wallet) -> str:
    """Label a wallet as "name (public key)" for selection lists"""
    name = wallet.name or shorten(wallet.address)
    public_key = shorten(wallet.public_key)
    return f"{name} ({public_key})" if public_key else name
