# asmconf/types/bytestring.py
"""
正規化16進バイト列 (ByteString)

このモジュールは、小文字16進テキストとして保持されるバイト列の値型を定義します。
16進テキスト・生のバイト列・固定幅整数の相互変換と、
不正文字の位置を特定できる検証の責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from asmconf.common.errors import HexDecodeError, HexValidationError, NumericConversionError

HEX_CHARS = "0123456789abcdef"


# @intent:responsibility 変換対象となる固定幅整数型（幅と符号）を定義します。
# @intent:rationale usize/isize は64bitターゲットを前提とします。
class IntType(Enum):
    U8 = ("u8", 1, False)
    U16 = ("u16", 2, False)
    U32 = ("u32", 4, False)
    U64 = ("u64", 8, False)
    USIZE = ("usize", 8, False)
    I8 = ("i8", 1, True)
    I16 = ("i16", 2, True)
    I32 = ("i32", 4, True)
    I64 = ("i64", 8, True)
    ISIZE = ("isize", 8, True)

    def __init__(self, type_name: str, width: int, signed: bool):
        self.type_name = type_name
        self.width = width
        self.signed = signed

    @property
    def bits(self) -> int:
        return self.width * 8

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


# @intent:responsibility 小文字16進テキストとして正規化されたバイト列を不変に保持します。
# @intent:rationale 比較・順序・ハッシュはすべて正規化テキストに基づくため、辞書のキーとして使用できます。
@dataclass(frozen=True, order=True)
class ByteString:
    """
    小文字16進テキストで表現されたバイト列。

    構築時に全文字が 0-9a-f であることを検証しますが、長さは検証しません。
    奇数長の文字列も保持でき、bytes() の呼び出し時に初めてエラーとなります。
    """
    hex: str

    # @intent:pre-condition hex は文字列である必要があります。
    # @intent:post-condition hex は小文字化され、全文字が16進アルファベットに含まれます。
    def __post_init__(self):
        if not isinstance(self.hex, str):
            raise TypeError(f"ByteString expects a str, got {type(self.hex).__name__}")
        value = self.hex.lower()
        for index, c in enumerate(value):
            if c not in HEX_CHARS:
                raise HexValidationError(c, index)
        object.__setattr__(self, "hex", value)

    @classmethod
    def from_hex(cls, text: str) -> "ByteString":
        """
        16進テキストから構築します。大文字小文字は問いません。
        不正文字があれば、最初の不正文字とその位置を持つ HexValidationError を送出します。
        """
        return cls(text)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview, Iterable[int]]) -> "ByteString":
        """
        任意のバイト列から構築します。各バイトは2桁の小文字16進になります。
        """
        return cls(bytes(data).hex())

    # @intent:responsibility 整数をビッグエンディアンの全幅バイト表現で符号化します。
    # @intent:pre-condition value は int_type の表現範囲内である必要があります。
    @classmethod
    def from_int(cls, value: int, int_type: IntType) -> "ByteString":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected an int, got {type(value).__name__}")
        if not int_type.min_value <= value <= int_type.max_value:
            raise NumericConversionError(NumericConversionError.OVERFLOW, str(value), int_type.type_name)
        return cls.from_bytes(value.to_bytes(int_type.width, "big", signed=int_type.signed))

    # @intent:responsibility 任意のテキストを ByteString に変換します。
    # @intent:rationale まず16進として解釈し、失敗した場合のみテキストのUTF-8バイト列を符号化します。
    #                  "face" のように偶然16進として有効な語は16進として解釈されます。この優先順位は変更しません。
    @classmethod
    def coerce(cls, text: str) -> "ByteString":
        try:
            return cls.from_hex(text)
        except HexValidationError:
            return cls.from_bytes(text.encode("utf-8"))

    def into_hex(self) -> str:
        return self.hex

    # @intent:responsibility 16進テキストを2桁ずつバイトにデコードします。
    # @intent:post-condition 奇数長なら HexDecodeError、不正文字なら HexValidationError を送出します。
    def bytes(self) -> bytes:
        if len(self.hex) % 2 != 0:
            raise HexDecodeError("odd length")
        for index, c in enumerate(self.hex):
            if c not in HEX_CHARS:
                raise HexValidationError(c, index)
        return bytes.fromhex(self.hex)

    @property
    def byte_length(self) -> int:
        if len(self.hex) % 2 != 0:
            raise HexDecodeError("odd length")
        return len(self.hex) // 2

    # @intent:responsibility 16進テキストを符号なしの大きさとして解釈し、指定された整数型に変換します。
    # @intent:rationale 符号付き型では2の補数として再解釈するため、from_int との往復で値が保存されます。
    def to_int(self, int_type: IntType) -> int:
        if not self.hex:
            raise NumericConversionError(NumericConversionError.EMPTY, self.hex, int_type.type_name)
        try:
            magnitude = int(self.hex, 16)
        except ValueError:
            raise NumericConversionError(NumericConversionError.INVALID_DIGIT, self.hex, int_type.type_name)
        if magnitude >> int_type.bits:
            raise NumericConversionError(NumericConversionError.OVERFLOW, self.hex, int_type.type_name)
        if int_type.signed and magnitude > int_type.max_value:
            return magnitude - (1 << int_type.bits)
        return magnitude

    def __str__(self) -> str:
        return self.hex
