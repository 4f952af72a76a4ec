from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from asmconf.common.errors import SchemaDeserializationError
from asmconf.formats.output_format import OutputFormat
from asmconf.types.bytestring import ByteString


# @intent:responsibility フィールド種別のタグを定義し、過去に使われた別表記を正規タグへ解決します。
class FieldType(Enum):
    IMMEDIATE = "immediate"
    ADDRESS = "address"
    ENUMERATOR = "enumerator"
    OPCODE = "opcode"

    @classmethod
    def resolve(cls, tag: str) -> "FieldType":
        """
        正規名または別名からフィールド種別を返します。大文字小文字は区別します。
        """
        if isinstance(tag, str) and tag in FIELD_TYPE_ALIASES:
            return FIELD_TYPE_ALIASES[tag]
        expected = ", ".join(sorted(FIELD_TYPE_ALIASES))
        raise SchemaDeserializationError(f"Unknown field type {tag!r} (expected one of: {expected})")


FIELD_TYPE_ALIASES: Dict[str, FieldType] = {
    "immediate": FieldType.IMMEDIATE,
    "raw": FieldType.IMMEDIATE,
    "imm": FieldType.IMMEDIATE,
    "address": FieldType.ADDRESS,
    "addr": FieldType.ADDRESS,
    "enumerator": FieldType.ENUMERATOR,
    "enum": FieldType.ENUMERATOR,
    "opcode": FieldType.OPCODE,
    "opc": FieldType.OPCODE,
    "code": FieldType.OPCODE,
    "instruction": FieldType.OPCODE,
}


# @intent:responsibility 即値のビット列をエンジンがどう解釈するかを定義します。
class ImmediateKind(Enum):
    BYTES = "bytes"
    SIGNED_INT = "signed_int"
    UNSIGNED_INT = "unsigned_int"
    SIGNED_FLOAT = "signed_float"
    UNSIGNED_FLOAT = "unsigned_float"


@dataclass(frozen=True)
class AsmFieldMeta:
    name: str
    size: int  # ビット数かバイト数かはエンジンが決める
    comment: Optional[str] = None


# @intent:data_structure 列挙フィールドの1つの選択肢。
@dataclass(frozen=True)
class EnumOption:
    discriminator: ByteString
    aliases: Tuple[str, ...] = ()
    comment: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "aliases", tuple(self.aliases))


# @intent:data_structure オペコードフィールドの1つの命令コード。EnumOption と同じ構造だが、データ値ではなく命令を選択する。
@dataclass(frozen=True)
class OpCode:
    code: ByteString
    aliases: Tuple[str, ...] = ()
    comment: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "aliases", tuple(self.aliases))


# @intent:responsibility 全フィールド種別に共通するメタデータと、その読み取りアクセサを提供します。
# @intent:rationale メタデータは各種別に埋め込み、name/size/comment は種別に依存せず同じ方法で参照できるようにします。
@dataclass(frozen=True)
class AsmField:
    """
    命令エンコーディングの名前付きフィールドの基底クラス。
    直接インスタンス化せず、ImmediateField, AddressField, EnumeratorField, OpcodeField を使用します。
    """
    meta: AsmFieldMeta

    field_type = None  # サブクラスで FieldType を設定する

    @property
    def name(self) -> str:
        return self.meta.name

    @property
    def size(self) -> int:
        return self.meta.size

    @property
    def comment(self) -> Optional[str]:
        return self.meta.comment


@dataclass(frozen=True)
class ImmediateField(AsmField):
    kind: ImmediateKind = ImmediateKind.BYTES

    field_type = FieldType.IMMEDIATE


@dataclass(frozen=True)
class AddressField(AsmField):
    field_type = FieldType.ADDRESS


# @intent:responsibility 判別値から選択肢へのマッピングを持つ列挙フィールド。
# @intent:post-condition values は読み取り専用ビューとして保持されます。
@dataclass(frozen=True)
class EnumeratorField(AsmField):
    values: Mapping[ByteString, EnumOption] = field(default_factory=dict)

    field_type = FieldType.ENUMERATOR
    __hash__ = None  # values は MappingProxyType でハッシュ不可

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def find_by_alias(self, alias: str) -> List[EnumOption]:
        return [opt for opt in self.values.values() if alias in opt.aliases]


# @intent:responsibility 命令コードから命令レコードへのマッピングを持つオペコードフィールド。
@dataclass(frozen=True)
class OpcodeField(AsmField):
    values: Mapping[ByteString, OpCode] = field(default_factory=dict)

    field_type = FieldType.OPCODE
    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def find_by_alias(self, alias: str) -> List[OpCode]:
        """
        指定された別名を持つ命令コードを返します。別名は一意とは限らないためリストで返します。
        """
        return [op for op in self.values.values() if alias in op.aliases]


# @intent:responsibility 出力フォーマット、ワードサイズ、名前付きフィールドを束ねる設定のルート。
# @intent:rationale フィールド間のサイズ整合性は検証しません。これはエンジン側の責務です。
@dataclass(frozen=True)
class AsmConfig:
    output_format: OutputFormat
    word_size: int
    fields: Mapping[str, AsmField] = field(default_factory=dict)

    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get_field(self, name: str) -> AsmField:
        return self.fields[name]

    def fields_of_type(self, field_type: FieldType) -> List[AsmField]:
        return [f for f in self.fields.values() if f.field_type is field_type]
