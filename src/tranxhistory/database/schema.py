"""Constants for the transaction history database schema."""

DATABASE_NAME = "transaction_history.db"
TABLE_NAME = "TRANSACTION_HISTORY"

INDEX_COL = "id"
EPOCH_MILLI_COL = "epoch_milliseconds"
AMOUNT_COL = "amount"
CURRENCY_COL = "currency"
CURRENCY_SPEC_COL = "currency_specifications"  # empty string when absent
TRNX_PURPOSE_COL = "tranx_purpose"
TRNX_INCOMING_COL = "incoming"  # 1 for incoming, 0 for outgoing
TID_COL = "transaction_identity"

DATETIME_INDEX = "idx_dtm"
AMOUNT_INDEX = "idx_amt"
DIRECTION_INDEX = "idx_dir"
PURPOSE_INDEX = "idx_purp"

# Stored amount = value * CURRENCY_DIVISOR + fraction.
# Changing this invalidates every stored amount.
CURRENCY_DIVISOR = 100_000_000

# SQLite INTEGER is a signed 64-bit value.
MAX_STORED_AMOUNT = 2**63 - 1
