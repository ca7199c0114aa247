"""
Conversation CSV logger for analytics.

Writes ONE row per user interaction with all relevant data.
This is separate from the debug logs - it's designed for spreadsheet import.

Output file: logs/conversations.csv
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.structured_logging import get_logger

_logger = get_logger("core.conversation_csv")


# Column order shared with the Google Sheets logger
COLUMNS = [
    'timestamp',
    'session_id',
    'user_query',
    'bot_response',
    'turn_role',
    'action',
    'intent',
    'confidence',
    'products_shown',
    'product_ids',
    'provider',
    'cart_items',
    'response_time_ms',
]


def build_row(
    session_id: str,
    user_query: str,
    bot_response: str,
    turn_role: str,
    action: str,
    intent: str,
    confidence: Optional[float],
    product_ids: Optional[List[int]] = None,
    provider: Optional[str] = None,
    cart_items: int = 0,
    response_time_ms: Optional[float] = None,
) -> List[str]:
    """Flatten one turn into a row in COLUMNS order."""
    product_ids = product_ids or []
    return [
        datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        session_id or '',
        user_query or '',
        bot_response or '',
        turn_role or '',
        action or '',
        intent or '',
        f"{confidence:.2f}" if confidence is not None else '',
        str(len(product_ids)),
        '|'.join(str(i) for i in product_ids),
        provider or '',
        str(cart_items),
        f"{response_time_ms:.2f}" if response_time_ms is not None else '',
    ]


class ConversationCSVLogger:
    """
    Logs conversation turns to a clean CSV file.

    Usage:
        logger = ConversationCSVLogger()
        logger.log(
            session_id="session_123",
            user_query="Do you have any shoes?",
            bot_response="We have Running Sneakers for $129...",
            turn_role="assistant",
            action="none",
            intent="product_search",
            confidence=0.8,
            product_ids=[7],
            provider="gemini",
            response_time_ms=850.5
        )
    """

    COLUMNS = COLUMNS

    def __init__(self, log_dir: str = "logs"):
        """
        Args:
            log_dir: Directory to store the CSV file
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.log_dir / "conversations.csv"
        self._ensure_headers()

    def _ensure_headers(self):
        """Create CSV with headers if it doesn't exist."""
        if not self.csv_path.exists():
            with open(self.csv_path, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(self.COLUMNS)

    def log(self, **turn) -> None:
        """Log a single conversation turn; keyword arguments as in build_row()."""
        row = [self._escape(value) for value in build_row(**turn)]

        try:
            with open(self.csv_path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(row)
        except PermissionError:
            # File is locked (open in a spreadsheet app); don't crash the turn
            _logger.warning(
                f"Could not write to {self.csv_path} (file locked)",
                extra={"event": "conversation_csv_locked"}
            )

    def _escape(self, value: str) -> str:
        """Replace newlines with spaces for clean single-line output."""
        value = str(value) if value else ''
        return value.replace('\n', ' ').replace('\r', ' ')


# Global instance for convenience
_conversation_logger: Optional[ConversationCSVLogger] = None


def init_conversation_logger(log_dir: str = "logs") -> ConversationCSVLogger:
    """Create (or replace) the global conversation CSV logger."""
    global _conversation_logger
    _conversation_logger = ConversationCSVLogger(log_dir=log_dir)
    return _conversation_logger


def get_conversation_logger() -> Optional[ConversationCSVLogger]:
    """Get the global conversation CSV logger, if initialized."""
    return _conversation_logger


def log_conversation(**turn) -> bool:
    """
    Log a conversation turn to CSV.

    This is the function the orchestrator calls. Returns False when the
    logger has not been initialized.
    """
    logger = get_conversation_logger()
    if logger is None:
        return False
    logger.log(**turn)
    return True
