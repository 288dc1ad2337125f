from datetime import date
from decimal import Decimal

from statement_import.common.models import DividendEvent, SecurityRef
from statement_import.parsing.exceptions import NoMatch, SecurityWarning, UnrecognizedDocument
from statement_import.parsing.items import ExtractionResult, wrap_failure, wrap_success
from statement_import.parsing.segmenter import Block

BLOCK = Block(lines=("01-07-2025 01-07-2025 .VEQT UNIT DIST",), start_line=11, end_line=12)


def dividend():
    return DividendEvent(
        date=date(2025, 1, 7), amount=2069, currency="USD", shares=Decimal("29"),
        security=SecurityRef(ticker="VEQT.TO", name="", uuid="u-1"), note="REC 12/30/24",
    )


class TestItems:

    def test_success_to_dict(self):
        warning = SecurityWarning(code="SECURITY_NAME_MISSING", message="No name", ticker="VEQT.TO")
        item = wrap_success(dividend(), [warning], BLOCK, "s.pdf", "questrade")

        assert not item.is_failure
        assert item.to_dict() == {
            "status": "ok",
            "source_id": "s.pdf",
            "institution": "questrade",
            "start_line": 11,
            "kind": "DIVIDEND",
            "date": "2025-01-07",
            "amount": 2069,
            "currency": "USD",
            "shares": "29",
            "fee": None,
            "gross": None,
            "ticker": "VEQT.TO",
            "security_name": "",
            "note": "REC 12/30/24",
            "warnings": [{"code": "SECURITY_NAME_MISSING", "message": "No name"}],
        }

    def test_failure_keeps_block_text(self):
        item = wrap_failure(NoMatch("Section 'distribution' did not match"), BLOCK, "s.pdf", "questrade")

        assert item.is_failure
        assert item.reason == "NoMatch"
        assert item.block_text == BLOCK.text
        assert item.to_dict()["status"] == "failed"

    def test_result_views(self):
        ok = wrap_success(dividend(), [], BLOCK, "s.pdf", "questrade")
        failed = wrap_failure(NoMatch("x"), BLOCK, "s.pdf", "questrade")
        result = ExtractionResult(source_id="s.pdf", institution="questrade", items=[ok, failed])

        assert result.ok
        assert result.transactions == [ok.transaction]
        assert result.failures == [failed]
        assert len(result.to_dicts()) == 2

    def test_rejected_result(self):
        result = ExtractionResult(source_id="s.pdf", error=UnrecognizedDocument("No layout", source_id="s.pdf"))
        assert not result.ok
        assert result.to_dicts() == []
