"""
Google Sheets logger for cloud deployment.

Logs conversations and errors to Google Sheets for persistent storage
when running on Streamlit Cloud (where local files are ephemeral).

Sheets structure:
- conversations-YYYY-MM-DD: Daily conversation logs
- errors-YYYY-MM-DD: Daily error logs
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials

from core.conversation_csv import COLUMNS as CONVERSATION_COLUMNS, build_row
from core.structured_logging import get_logger

_logger = get_logger("core.gsheets_logger")

ERROR_COLUMNS = [
    'timestamp',
    'session_id',
    'error_type',
    'error_message',
    'stack_trace',
    'context',
]


class GoogleSheetsLogger:
    """
    Logs data to Google Sheets with daily sheet rotation.

    Each day gets its own sheet (tab) within the spreadsheet:
    - conversations-2026-10-18
    - errors-2026-10-18
    """

    SCOPES = [
        'https://www.googleapis.com/auth/spreadsheets',
        'https://www.googleapis.com/auth/drive'
    ]

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_dict: Dict[str, Any],
        client: Any = None,
    ):
        """
        Args:
            spreadsheet_id: The Google Sheets spreadsheet ID
            credentials_dict: Service account credentials as a dict
            client: Pre-authorized gspread client (skips credential setup)
        """
        self.spreadsheet_id = spreadsheet_id
        self.credentials_dict = credentials_dict
        self._client = client
        self._spreadsheet = None
        self._sheet_cache: Dict[str, Any] = {}

    def _get_client(self):
        if self._client is None:
            credentials = Credentials.from_service_account_info(
                self.credentials_dict,
                scopes=self.SCOPES
            )
            self._client = gspread.authorize(credentials)
        return self._client

    def _get_spreadsheet(self):
        if self._spreadsheet is None:
            self._spreadsheet = self._get_client().open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _get_or_create_sheet(self, sheet_name: str, columns: List[str]):
        """Get existing sheet or create new one with headers."""
        if sheet_name in self._sheet_cache:
            return self._sheet_cache[sheet_name]

        spreadsheet = self._get_spreadsheet()
        try:
            worksheet = spreadsheet.worksheet(sheet_name)
        except gspread.WorksheetNotFound:
            worksheet = spreadsheet.add_worksheet(
                title=sheet_name,
                rows=1000,
                cols=len(columns)
            )
            worksheet.append_row(columns, value_input_option='RAW')

        self._sheet_cache[sheet_name] = worksheet
        return worksheet

    def _get_today_sheet_name(self, prefix: str) -> str:
        return f"{prefix}-{datetime.now().strftime('%Y-%m-%d')}"

    def log_conversation(self, **turn) -> bool:
        """
        Log a conversation turn; keyword arguments as in build_row().

        Returns:
            True if logged successfully, False otherwise
        """
        try:
            worksheet = self._get_or_create_sheet(
                self._get_today_sheet_name("conversations"), CONVERSATION_COLUMNS
            )
            worksheet.append_row(build_row(**turn), value_input_option='RAW')
            return True
        except Exception as e:
            _logger.warning(
                f"Failed to log to Google Sheets: {e}",
                extra={"event": "gsheets_failed", "error_type": type(e).__name__}
            )
            return False

    def log_error(
        self,
        session_id: str,
        error_type: str,
        error_message: str,
        stack_trace: Optional[str] = None,
        context: Optional[str] = None,
    ) -> bool:
        """
        Log an error to Google Sheets.

        Returns:
            True if logged successfully, False otherwise
        """
        try:
            worksheet = self._get_or_create_sheet(
                self._get_today_sheet_name("errors"), ERROR_COLUMNS
            )
            row = [
                datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
                session_id or '',
                error_type or '',
                error_message or '',
                (stack_trace or '')[:50000],  # Sheets cell limit
                context or '',
            ]
            worksheet.append_row(row, value_input_option='RAW')
            return True
        except Exception as e:
            _logger.warning(
                f"Failed to log error to Google Sheets: {e}",
                extra={"event": "gsheets_failed", "error_type": type(e).__name__}
            )
            return False


# Global instance
_gsheets_logger: Optional[GoogleSheetsLogger] = None


def init_gsheets_logger(spreadsheet_id: str, credentials_dict: Dict[str, Any]) -> GoogleSheetsLogger:
    """Initialize the global Google Sheets logger."""
    global _gsheets_logger
    _gsheets_logger = GoogleSheetsLogger(spreadsheet_id, credentials_dict)
    return _gsheets_logger


def get_gsheets_logger() -> Optional[GoogleSheetsLogger]:
    """Get the global Google Sheets logger instance."""
    return _gsheets_logger


def log_to_gsheets(**turn) -> bool:
    """
    Log a conversation turn to Google Sheets.

    Returns True if logged, False if logger not initialized or failed.
    """
    logger = get_gsheets_logger()
    if logger is None:
        return False
    return logger.log_conversation(**turn)


def log_error_to_gsheets(
    session_id: str,
    error_type: str,
    error_message: str,
    stack_trace: Optional[str] = None,
    context: Optional[str] = None,
) -> bool:
    """
    Log an error to Google Sheets.

    Returns True if logged, False if logger not initialized or failed.
    """
    logger = get_gsheets_logger()
    if logger is None:
        return False
    return logger.log_error(
        session_id=session_id,
        error_type=error_type,
        error_message=error_message,
        stack_trace=stack_trace,
        context=context,
    )
