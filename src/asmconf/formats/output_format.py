# asmconf/formats/output_format.py
"""
出力フォーマット識別子。
アセンブラ/ディスアセンブラ生成エンジンが使用するレンダリングバックエンドを指定します。
"""
from enum import Enum

from asmconf.common.errors import SchemaDeserializationError


# @intent:responsibility 出力レンダラの種類を閉じた集合として定義します。
class OutputFormat(Enum):
    BYTE_STREAM = "byte_stream"
    ARCH_LIB = "arch_lib"

    @property
    def token(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "OutputFormat":
        for member in cls:
            if member.value == token:
                return member
        expected = ", ".join(m.value for m in cls)
        raise SchemaDeserializationError(f"Unknown output format {token!r} (expected one of: {expected})")
