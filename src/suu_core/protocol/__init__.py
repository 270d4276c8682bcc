"""Transaction descriptions for the suu contract."""

from suu_core.protocol.transactions import (
    CAPTURE_FEE,
    GAS_BUDGET,
    PURCHASE_PRICE,
    CoinSplit,
    MoveCall,
    ObjectArg,
    PureArg,
    SplitResult,
    Transaction,
    TransactionBuilder,
)

__all__ = [
    "CAPTURE_FEE",
    "CoinSplit",
    "GAS_BUDGET",
    "MoveCall",
    "ObjectArg",
    "PURCHASE_PRICE",
    "PureArg",
    "SplitResult",
    "Transaction",
    "TransactionBuilder",
]
