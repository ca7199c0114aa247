"""
Tests for the conversation analytics loggers (CSV and Google Sheets).
"""

import csv
from unittest.mock import MagicMock

import gspread
import pytest
from google.auth.exceptions import RefreshError

import core.conversation_csv as conversation_csv
import core.gsheets_logger as gsheets_logger
from core.conversation_csv import COLUMNS, ConversationCSVLogger, build_row, log_conversation
from core.gsheets_logger import GoogleSheetsLogger, log_error_to_gsheets, log_to_gsheets

TURN = dict(
    session_id="session_1",
    user_query="Do you have any shoes?",
    bot_response="We have Running Sneakers\nfor $129.",
    turn_role="assistant",
    action="none",
    intent="product_search",
    confidence=0.8,
    product_ids=[8, 9],
    provider="gemini",
    cart_items=2,
    response_time_ms=850.456,
)


@pytest.fixture(autouse=True)
def no_global_loggers(monkeypatch):
    monkeypatch.setattr(conversation_csv, "_conversation_logger", None)
    monkeypatch.setattr(gsheets_logger, "_gsheets_logger", None)


class TestBuildRow:

    def test_row_matches_columns(self):
        row = dict(zip(COLUMNS, build_row(**TURN)))

        assert row["session_id"] == "session_1"
        assert row["confidence"] == "0.80"
        assert row["products_shown"] == "2"
        assert row["product_ids"] == "8|9"
        assert row["provider"] == "gemini"
        assert row["cart_items"] == "2"
        assert row["response_time_ms"] == "850.46"

    def test_optional_fields_blank(self):
        turn = dict(TURN, product_ids=None, provider=None, confidence=None, response_time_ms=None)
        row = dict(zip(COLUMNS, build_row(**turn)))
        assert row["product_ids"] == ""
        assert row["products_shown"] == "0"
        assert row["provider"] == ""
        assert row["confidence"] == ""


class TestConversationCSVLogger:

    def test_writes_header_and_row(self, tmp_path):
        logger = ConversationCSVLogger(log_dir=str(tmp_path))
        logger.log(**TURN)

        with open(logger.csv_path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))

        assert rows[0] == COLUMNS
        assert len(rows) == 2
        assert rows[1][COLUMNS.index("bot_response")] == "We have Running Sneakers for $129."

    def test_header_written_once(self, tmp_path):
        ConversationCSVLogger(log_dir=str(tmp_path)).log(**TURN)
        ConversationCSVLogger(log_dir=str(tmp_path)).log(**TURN)

        with open(tmp_path / "conversations.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 3

    def test_module_function_without_init(self):
        assert log_conversation(**TURN) is False

    def test_module_function_after_init(self, tmp_path):
        conversation_csv.init_conversation_logger(str(tmp_path))
        assert log_conversation(**TURN) is True


class TestGoogleSheetsLogger:

    def make_logger(self):
        worksheet = MagicMock()
        spreadsheet = MagicMock()
        spreadsheet.worksheet.return_value = worksheet
        client = MagicMock()
        client.open_by_key.return_value = spreadsheet
        return GoogleSheetsLogger("sheet-id", {}, client=client), spreadsheet, worksheet

    def test_appends_conversation_row(self):
        logger, spreadsheet, worksheet = self.make_logger()

        assert logger.log_conversation(**TURN) is True

        sheet_name = spreadsheet.worksheet.call_args[0][0]
        assert sheet_name.startswith("conversations-")
        row = worksheet.append_row.call_args[0][0]
        assert row[COLUMNS.index("product_ids")] == "8|9"

    def test_creates_missing_sheet_with_header(self):
        logger, spreadsheet, _ = self.make_logger()
        spreadsheet.worksheet.side_effect = gspread.WorksheetNotFound("missing")
        new_sheet = MagicMock()
        spreadsheet.add_worksheet.return_value = new_sheet

        assert logger.log_conversation(**TURN) is True
        assert new_sheet.append_row.call_args_list[0][0][0] == COLUMNS

    def test_sheets_failure_returns_false(self):
        logger, _, worksheet = self.make_logger()
        worksheet.append_row.side_effect = gspread.exceptions.GSpreadException("quota exceeded")

        assert logger.log_conversation(**TURN) is False

    def test_expired_credentials_return_false(self):
        client = MagicMock()
        client.open_by_key.side_effect = RefreshError("invalid_grant: Invalid JWT Signature")
        logger = GoogleSheetsLogger("sheet-id", {}, client=client)

        assert logger.log_conversation(**TURN) is False
        assert logger.log_error("session_1", "RuntimeError", "boom") is False

    def test_log_error(self):
        logger, spreadsheet, worksheet = self.make_logger()
        assert logger.log_error("session_1", "RuntimeError", "boom", context="handler:none") is True
        assert spreadsheet.worksheet.call_args[0][0].startswith("errors-")
        assert worksheet.append_row.call_args[0][0][2:4] == ["RuntimeError", "boom"]

    def test_module_functions_without_init(self):
        assert log_to_gsheets(**TURN) is False
        assert log_error_to_gsheets("s", "E", "m") is False
