"""
Utility decorators for ledger operations.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

F = TypeVar("F", bound=Callable[..., Any])

_CONTEXT_PARAMS = ["external_id", "symbol", "side", "quantity", "price", "limit"]


def _extract_operation_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract ledger context from function arguments."""
    context = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in _CONTEXT_PARAMS and value is not None:
            context[param_name] = _serialize_parameter_value(value)
    return context


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    elif hasattr(value, "quantize"):
        return str(value)  # Handle Decimal types
    else:
        return value


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Setup logging context for a ledger operation."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    return {
        "correlation_id": str(uuid.uuid4())[:8],
        **_extract_operation_context(bound_args),
    }


def log_ledger_operation(func: F) -> F:
    """Decorator to log ledger operations with correlation IDs and timing.

    Recoverable ledger errors are logged at WARNING, anything else at ERROR;
    the exception is always re-raised.
    """
    from portfolio_ledger.core.exceptions.ledger import LedgerException, StorageError

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _setup_logging_context(func, args, kwargs)
        func_name = func.__name__
        bound = logger.bind(**context)

        bound.debug(f"Ledger operation started: {func_name}")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except LedgerException as e:
            elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
            level = "ERROR" if isinstance(e, StorageError) else "WARNING"
            bound.log(
                level,
                f"Ledger operation rejected: {func_name} "
                f"({type(e).__name__}: {e}) after {elapsed_ms}ms",
            )
            raise
        except Exception as e:
            elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
            bound.error(
                f"Ledger operation failed: {func_name} "
                f"({type(e).__name__}: {e}) after {elapsed_ms}ms"
            )
            raise

        elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
        bound.info(f"Ledger operation completed: {func_name} in {elapsed_ms}ms")
        return result

    return wrapper  # type: ignore
