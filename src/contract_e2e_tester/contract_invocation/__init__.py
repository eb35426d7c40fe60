"""Contract invocation exports."""

from .invocation_models import TransactionResult
from .query_invoker import QueryError, QueryInvoker, is_error_response
from .transaction_invoker import ExecutionError, TransactionInvoker, decode_transaction_data

__all__ = [
    "TransactionResult",
    "QueryError",
    "QueryInvoker",
    "is_error_response",
    "ExecutionError",
    "TransactionInvoker",
    "decode_transaction_data",
]
