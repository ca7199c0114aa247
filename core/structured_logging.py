"""
Structured logging infrastructure for ShopBot.

Provides JSON logging with:
- Multiple log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Rotating file handlers (daily rotation, 30-day retention)
- Separate error log file
- Performance tracking (latency metrics)
- Context tracking (session_id, query, action, intent)

Usage:
    from core.structured_logging import get_logger, log_cart_action

    logger = get_logger(__name__)
    logger.info("Scoring catalog", extra={"query": "running shoes"})

    # Or use convenience functions:
    log_cart_action(session_id="abc", action="add", applied=["Running Sneakers"])
"""

import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional


ROOT_LOGGER_NAME = "shopbot"


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON for structured logging.

    Output format:
    {
        "timestamp": "2026-10-18T10:30:00.123456Z",
        "level": "INFO",
        "logger": "shopbot.core.orchestrator",
        "message": "Turn processed",
        "event": "conversation_turn",
        "session_id": "session_abc123",
        ...
    }
    """

    EXTRA_FIELDS = [
        # Conversation
        "event", "session_id", "query", "action", "intent", "confidence",
        "reasoning", "state",
        # Products and cart
        "products_shown", "product_ids", "candidates", "resolved_ids",
        "resolution_rule", "applied", "skipped", "cart_items",
        # Providers
        "provider", "llm_model", "llm_latency_ms", "success", "error_kind",
        "attempts",
        # Errors
        "error_type", "error_message", "stack_trace", "context",
        # Performance
        "response_time_ms", "elapsed_ms", "function",
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Extra fields are passed via logger.info("msg", extra={...})
        for field_name in self.EXTRA_FIELDS:
            if hasattr(record, field_name):
                value = getattr(record, field_name)
                if value is not None:
                    log_data[field_name] = value

        if record.exc_info:
            log_data["error_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            log_data["stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    Output format:
    2026-10-18 10:30:00 | INFO     | shopbot.core.orchestrator | Turn processed | event=conversation_turn
    """

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        color = self.COLORS.get(level, "")
        reset = self.COLORS["RESET"]

        msg = f"{timestamp} | {color}{level:8}{reset} | {record.name} | {record.getMessage()}"

        context_parts = []
        for field_name in ["session_id", "event", "provider", "response_time_ms"]:
            if hasattr(record, field_name) and getattr(record, field_name) is not None:
                context_parts.append(f"{field_name}={getattr(record, field_name)}")

        if context_parts:
            msg += f" | {', '.join(context_parts)}"

        if record.exc_info:
            msg += f"\n{self.formatException(record.exc_info)}"

        return msg


# =============================================================================
# Logger Setup
# =============================================================================

_loggers: Dict[str, logging.Logger] = {}
_initialized = False


def _rotating_handler(path: Path, level: int) -> TimedRotatingFileHandler:
    handler = TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        interval=1,
        backupCount=30,  # Keep 30 days
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    handler.suffix = "%Y-%m-%d"
    return handler


def setup_logging(
    log_dir: str = "logs",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    enable_console: bool = True,
    enable_file: bool = True,
    enable_error_log: bool = True,
) -> None:
    """
    Initialize the logging system.

    Creates:
    - logs/shopbot.log (all logs, rotating daily, 30-day retention)
    - logs/errors.log (ERROR and above, rotating daily, 30-day retention)
    - Console output (if enabled)

    Args:
        log_dir: Directory for log files
        console_level: Minimum level for console output
        file_level: Minimum level for file output
        enable_console: Whether to output to console
        enable_file: Whether to write shopbot.log
        enable_error_log: Whether to write errors.log
    """
    global _initialized
    if _initialized:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.handlers = []

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ConsoleFormatter())
        root_logger.addHandler(console_handler)

    if enable_file:
        root_logger.addHandler(_rotating_handler(log_path / "shopbot.log", file_level))

    if enable_error_log:
        root_logger.addHandler(_rotating_handler(log_path / "errors.log", logging.ERROR))

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger under the shopbot namespace

    Example:
        logger = get_logger(__name__)
        logger.info("Catalog loaded", extra={"event": "catalog_loaded"})
    """
    # Not auto-initialized: app.py controls setup. Until then records
    # propagate to the stdlib root logger.
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        logger_name = name
    else:
        logger_name = f"{ROOT_LOGGER_NAME}.{name}"

    if logger_name not in _loggers:
        _loggers[logger_name] = logging.getLogger(logger_name)

    return _loggers[logger_name]


# =============================================================================
# Convenience Functions
# =============================================================================

def log_query(session_id: str, query: str, **extra) -> None:
    """Log an incoming user query."""
    logger = get_logger("query")
    logger.info(
        "User query",
        extra={
            "event": "user_query",
            "session_id": session_id,
            "query": query,
            **extra
        }
    )


def log_classification(
    session_id: str,
    query: str,
    action: str,
    intent: str,
    confidence: float,
    reasoning: str,
    **extra
) -> None:
    """
    Log the cart action and shopping intent chosen for a query.

    Args:
        session_id: Session identifier
        query: Original query
        action: CartAction value (add, remove, none)
        intent: IntentType value
        confidence: Intent confidence
        reasoning: Why the intent was chosen
        **extra: Additional fields
    """
    logger = get_logger("intent")
    logger.info(
        f"Classified: action={action}, intent={intent}",
        extra={
            "event": "classification",
            "session_id": session_id,
            "query": query,
            "action": action,
            "intent": intent,
            "confidence": confidence,
            "reasoning": reasoning,
            **extra
        }
    )


def log_provider_call(
    session_id: str,
    provider: str,
    model: str,
    latency_ms: float,
    success: bool = True,
    error_kind: Optional[str] = None,
    error: Optional[str] = None,
    **extra
) -> None:
    """
    Log one completion backend call.

    Failures log at WARNING: a failed primary is expected to fall back.

    Args:
        session_id: Session identifier
        provider: Backend name (e.g. "gemini")
        model: Model used
        latency_ms: Time taken for the call
        success: Whether the call produced text
        error_kind: ProviderErrorKind value on failure
        error: Error message on failure
        **extra: Additional fields
    """
    logger = get_logger("llm")
    level = logging.INFO if success else logging.WARNING
    message = f"Provider call: {provider}" if success else f"Provider call failed: {provider}"

    logger.log(
        level,
        message,
        extra={
            "event": "provider_call",
            "session_id": session_id,
            "provider": provider,
            "llm_model": model,
            "llm_latency_ms": round(latency_ms, 2),
            "success": success,
            "error_kind": error_kind,
            "error_message": error[:200] if error else None,
            **extra
        }
    )


def log_cart_action(
    session_id: str,
    action: str,
    applied: List[str],
    skipped: Optional[List[str]] = None,
    cart_items: int = 0,
    **extra
) -> None:
    """
    Log a cart mutation triggered from the chat.

    Args:
        session_id: Session identifier
        action: CartAction value
        applied: Names of products the mutation succeeded for
        skipped: Names of products that were skipped
        cart_items: Total item count after the mutation
        **extra: Additional fields
    """
    logger = get_logger("cart")
    logger.info(
        f"Cart {action}: {len(applied)} applied, {len(skipped or [])} skipped",
        extra={
            "event": "cart_action",
            "session_id": session_id,
            "action": action,
            "applied": applied,
            "skipped": skipped or [],
            "cart_items": cart_items,
            **extra
        }
    )


def log_products_shown(
    session_id: str,
    products: list,
    query: str,
    **extra
) -> None:
    """
    Log products suggested to the user.

    Args:
        session_id: Session identifier
        products: Products shown
        query: Original query
        **extra: Additional fields
    """
    logger = get_logger("products")

    product_ids = [p.id if hasattr(p, 'id') else str(p) for p in products[:10]]

    logger.info(
        f"Showing {len(products)} products",
        extra={
            "event": "products_shown",
            "session_id": session_id,
            "products_shown": len(products),
            "product_ids": product_ids,
            "query": query,
            **extra
        }
    )


def log_error(
    session_id: str,
    error: Exception,
    context: Optional[str] = None,
    **extra
) -> None:
    """
    Log an error with full context.

    Args:
        session_id: Session identifier
        error: The exception
        context: What was happening when it occurred
        **extra: Additional fields
    """
    logger = get_logger("error")
    logger.error(
        f"Error: {type(error).__name__}: {error}",
        extra={
            "event": "error",
            "session_id": session_id,
            "error_type": type(error).__name__,
            "stack_trace": "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
            "context": context,
            **extra
        },
    )


def log_conversation_turn(
    session_id: str,
    query: str,
    action: str,
    intent: str,
    confidence: float,
    products_shown: int = 0,
    product_ids: Optional[list] = None,
    provider: Optional[str] = None,
    response_time_ms: Optional[float] = None,
    **extra
) -> None:
    """
    Log a complete conversation turn.

    This is the primary log event for conversation analytics. It captures
    everything about a single user interaction in one record.

    Args:
        session_id: Session identifier
        query: The user message
        action: CartAction value
        intent: IntentType value
        confidence: Intent confidence (0.0 to 1.0)
        products_shown: Number of products suggested or mutated
        product_ids: Ids of those products
        provider: Backend that answered, if any
        response_time_ms: Total turn time in milliseconds
        **extra: Additional fields
    """
    logger = get_logger("conversation")

    logger.info(
        f"Conversation turn: {action}/{intent}",
        extra={
            "event": "conversation_turn",
            "session_id": session_id,
            "query": query,
            "action": action,
            "intent": intent,
            "confidence": round(confidence, 2) if confidence else None,
            "products_shown": products_shown,
            "product_ids": product_ids or [],
            "provider": provider,
            "response_time_ms": round(response_time_ms, 2) if response_time_ms else None,
            **extra
        }
    )


# =============================================================================
# Performance Timing
# =============================================================================

def timed(event_name: str, logger_name: str = "performance"):
    """
    Decorator to time function execution and log it at DEBUG.

    Usage:
        @timed("relevance_scoring")
        def score(self, query, catalog, profile):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start) * 1000
                get_logger(logger_name).error(
                    f"{event_name} failed after {elapsed_ms:.2f}ms",
                    extra={
                        "event": f"{event_name}_error",
                        "elapsed_ms": round(elapsed_ms, 2),
                        "function": func.__name__,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True
                )
                raise

            elapsed_ms = (time.perf_counter() - start) * 1000
            get_logger(logger_name).debug(
                f"{event_name} completed",
                extra={
                    "event": f"{event_name}_timing",
                    "elapsed_ms": round(elapsed_ms, 2),
                    "function": func.__name__,
                }
            )
            return result
        return wrapper
    return decorator


class Timer:
    """
    Context manager for timing code blocks.

    Usage:
        with Timer() as t:
            # ... do work ...
        print(f"Took {t.elapsed_ms}ms")
    """

    def __init__(self):
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000
