# src/chaindesk/utils/config.py

class Config:
    # API configuration
    DEFAULT_API_BASE_URL = "http://localhost:5000"
    API_BASE_URL_ENV = "CHAINDESK_API_BASE_URL"
    REQUEST_TIMEOUT = 30  # seconds
    USER_AGENT = "chaindesk/0.1"

    # Chain editor configuration
    BLOCK_UPDATE_DEBOUNCE = 0.5  # quiet period per block index, in seconds
    EDITABLE_BLOCK_FIELDS = ("previous_hash",)

    # Transaction configuration
    PRIVATE_KEY_BYTES = 32

    # Display configuration
    SHORTEN_VISIBLE = 6
    AMOUNT_FRACTION_DIGITS = 2

    # Default operator messages
    DEFAULT_REQUEST_ERROR = "Request failed"
    DEFAULT_APPROVAL_MESSAGE = "Transaction moved to mempool."
    DEFAULT_MINE_MESSAGE = "Pending transactions were mined into a new block."
