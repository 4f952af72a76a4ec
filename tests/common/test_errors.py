# tests/common/test_errors.py
"""
asmconf.common.errorsモジュールの単体テスト。
"""
from asmconf.common.errors import (
    AsmConfError,
    HexDecodeError,
    HexValidationError,
    NumericConversionError,
    SchemaDeserializationError,
)

# @intent:test_suite 例外階層とメッセージの検証。

class TestErrors:
    # @intent:test_case_hierarchy 全ての例外が AsmConfError と ValueError の派生であることを検証します。
    def test_hierarchy(self):
        for cls in (HexValidationError, HexDecodeError, NumericConversionError, SchemaDeserializationError):
            assert issubclass(cls, AsmConfError)
            assert issubclass(cls, ValueError)

    def test_hex_validation_message(self):
        err = HexValidationError("x", 4)
        assert str(err) == "Invalid hex character 'x' at index 4"

    def test_schema_error_with_and_without_path(self):
        assert str(SchemaDeserializationError("boom", "fields.op")) == "fields.op: boom"
        err = SchemaDeserializationError("boom")
        assert str(err) == "boom"
        assert err.path is None

    def test_numeric_conversion_message(self):
        err = NumericConversionError(NumericConversionError.OVERFLOW, "100", "u8")
        assert str(err) == "Cannot convert '100' to u8: overflow"
