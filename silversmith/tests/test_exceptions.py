"""
Tests for SilversmithError (silversmith.exceptions).
"""

from silversmith.exceptions import SilversmithError


class TestSilversmithError:
    def test_details(self):
        exc = SilversmithError("BATCH_ON_HOLD", batch="BAT-2026-00001", reason="stones")

        assert exc.code == "BATCH_ON_HOLD"
        assert exc.details == {"batch": "BAT-2026-00001", "reason": "stones"}
        assert str(exc) == "SilversmithError(BATCH_ON_HOLD: batch=BAT-2026-00001, reason=stones)"

    def test_without_details(self):
        assert str(SilversmithError("NOTHING_TO_SEND")) == "SilversmithError(NOTHING_TO_SEND)"

    def test_code_is_allowed_as_a_detail_name(self):
        exc = SilversmithError("UNRECOGNIZED_CODE", code="ZZ999")

        assert exc.code == "UNRECOGNIZED_CODE"
        assert exc.details == {"code": "ZZ999"}

    def test_as_dict_keeps_error_code(self):
        exc = SilversmithError("UNRECOGNIZED_CODE", code="ZZ999", raw="zz999")

        assert exc.as_dict() == {"code": "UNRECOGNIZED_CODE", "raw": "zz999"}
