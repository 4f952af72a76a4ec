# asmconf/common/errors.py
"""
例外定義モジュール。

ByteString のコーデックとフィールドスキーマのデシリアライズで発生する
エラーを定義します。すべて ValueError の派生であり、呼び出し元で
ValueError として捕捉することもできます。
"""
from typing import Optional


# @intent:responsibility asmconf 全体の例外の基底クラス。
class AsmConfError(ValueError):
    pass


# @intent:responsibility 16進アルファベット外の文字を検出したことを、文字と位置付きで通知します。
class HexValidationError(AsmConfError):
    """
    16進文字列に不正な文字が含まれていた場合に送出されます。
    最初に見つかった不正文字 (char) とその0始まりの位置 (index) を保持します。
    """
    def __init__(self, char: str, index: int):
        self.char = char
        self.index = index
        super().__init__(f"Invalid hex character {char!r} at index {index}")


# @intent:responsibility 構文上は正しい16進文字列をバイト列へ変換できないことを通知します。
# @intent:rationale 奇数長はデコード時にしか判明しないため、HexValidationError とは別の型にしています。
class HexDecodeError(AsmConfError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Cannot decode hex string: {reason}")


# @intent:responsibility ByteString と固定幅整数との変換失敗を通知します。
class NumericConversionError(AsmConfError):
    """
    reason は "empty", "invalid_digit", "overflow" のいずれか。
    """
    EMPTY = "empty"
    INVALID_DIGIT = "invalid_digit"
    OVERFLOW = "overflow"

    def __init__(self, reason: str, text: str, int_type: str):
        self.reason = reason
        self.text = text
        self.int_type = int_type
        super().__init__(f"Cannot convert {text!r} to {int_type}: {reason}")


# @intent:responsibility 設定ドキュメントの構造エラー（未知のタグ、必須キーの欠落、型の不一致）を通知します。
class SchemaDeserializationError(AsmConfError):
    """
    path はエラー箇所をドット区切りで示します（例: "fields.opcode.values.0f.aliases"）。
    """
    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        if path:
            super().__init__(f"{path}: {message}")
        else:
            super().__init__(message)
