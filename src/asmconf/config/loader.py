import warnings
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from asmconf.common.errors import SchemaDeserializationError
from asmconf.common.types import Document
from asmconf.formats.output_format import OutputFormat
from asmconf.types.bytestring import ByteString
from .models import (
    AddressField,
    AsmConfig,
    AsmField,
    AsmFieldMeta,
    EnumeratorField,
    EnumOption,
    FieldType,
    ImmediateField,
    ImmediateKind,
    OpCode,
    OpcodeField,
)

U64_MAX = (1 << 64) - 1

_CONFIG_KEYS = {"output_format", "word_size", "fields"}
_META_KEYS = {"name", "size", "comment"}
_FIELD_KEYS = {
    FieldType.IMMEDIATE: {"type", "meta", "kind"},
    FieldType.ADDRESS: {"type", "meta"},
    FieldType.ENUMERATOR: {"type", "meta", "values"},
    FieldType.OPCODE: {"type", "meta", "values"},
}


# @intent:responsibility 構造化ドキュメント（YAML/JSON由来の辞書）を AsmConfig に変換します。
# @intent:rationale 構築は全体が成功するか例外で失敗するかのどちらかで、部分的な AsmConfig は返しません。
class ConfigLoader:
    def load_from_file(self, path: str) -> AsmConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return self.parse_config(data)

    def load_from_string(self, text: str) -> AsmConfig:
        return self.parse_config(yaml.safe_load(text))

    def parse_config(self, data: Document) -> AsmConfig:
        data = self._expect_mapping(data, None)
        self._warn_unknown_keys(data, _CONFIG_KEYS, None)

        token = self._require(data, "output_format", None)
        if not isinstance(token, str):
            raise SchemaDeserializationError("Output format must be a string", "output_format")
        try:
            output_format = OutputFormat.from_token(token)
        except SchemaDeserializationError as e:
            raise SchemaDeserializationError(e.message, "output_format")

        word_size = self._parse_int(self._require(data, "word_size", None), "word_size")

        fields: Dict[str, AsmField] = {}
        fields_data = data.get("fields")
        if fields_data is not None:
            fields_data = self._expect_mapping(fields_data, "fields")
            for name, field_data in fields_data.items():
                if not isinstance(name, str):
                    raise SchemaDeserializationError(f"Field name must be a string, got {name!r}", "fields")
                fields[name] = self.parse_field(field_data, f"fields.{name}")

        return AsmConfig(output_format=output_format, word_size=word_size, fields=fields)

    # @intent:responsibility 1つのフィールドドキュメントを、タグに応じた種別のフィールドに変換します。
    # @intent:pre-condition "type" キーに正規名または別名が入っている必要があります。
    def parse_field(self, data: Document, path: Optional[str] = None) -> AsmField:
        data = self._expect_mapping(data, path)
        tag = self._require(data, "type", path)
        try:
            field_type = FieldType.resolve(tag)
        except SchemaDeserializationError as e:
            raise SchemaDeserializationError(e.message, self._join(path, "type"))
        self._warn_unknown_keys(data, _FIELD_KEYS[field_type], path)

        meta = self._parse_meta(self._require(data, "meta", path), self._join(path, "meta"))

        if field_type is FieldType.IMMEDIATE:
            kind = self._parse_kind(data.get("kind"), self._join(path, "kind"))
            return ImmediateField(meta=meta, kind=kind)
        if field_type is FieldType.ADDRESS:
            return AddressField(meta=meta)

        values_path = self._join(path, "values")
        values_data = self._expect_mapping(self._require(data, "values", path), values_path)
        if field_type is FieldType.ENUMERATOR:
            options = {}
            for key, entry in values_data.items():
                discriminator = self._parse_key(key, values_path)
                entry_path = self._join(values_path, str(key))
                aliases, comment = self._parse_option(entry, "discriminator", discriminator, entry_path)
                options[discriminator] = EnumOption(discriminator=discriminator, aliases=aliases, comment=comment)
            return EnumeratorField(meta=meta, values=options)

        codes = {}
        for key, entry in values_data.items():
            code = self._parse_key(key, values_path)
            entry_path = self._join(values_path, str(key))
            aliases, comment = self._parse_option(entry, "code", code, entry_path)
            codes[code] = OpCode(code=code, aliases=aliases, comment=comment)
        return OpcodeField(meta=meta, values=codes)

    def _parse_meta(self, data: Any, path: str) -> AsmFieldMeta:
        data = self._expect_mapping(data, path)
        self._warn_unknown_keys(data, _META_KEYS, path)
        name = self._require(data, "name", path)
        if not isinstance(name, str):
            raise SchemaDeserializationError(f"Field name must be a string, got {name!r}", self._join(path, "name"))
        size = self._parse_int(self._require(data, "size", path), self._join(path, "size"))
        comment = self._parse_comment(data.get("comment"), self._join(path, "comment"))
        return AsmFieldMeta(name=name, size=size, comment=comment)

    def _parse_kind(self, value: Any, path: str) -> ImmediateKind:
        if value is None:
            return ImmediateKind.BYTES
        for kind in ImmediateKind:
            if kind.value == value:
                return kind
        expected = ", ".join(k.value for k in ImmediateKind)
        raise SchemaDeserializationError(f"Unknown immediate kind {value!r} (expected one of: {expected})", path)

    # @intent:responsibility 選択肢マップのキーを ByteString として検証します。
    # @intent:rationale 16進として不正なキーは HexValidationError をそのまま伝播させ、文字と位置を呼び出し元に渡します。
    def _parse_key(self, key: Any, path: str) -> ByteString:
        if not isinstance(key, str):
            raise SchemaDeserializationError(
                f"Discriminator {key!r} must be a hex string (quote it in YAML)", path)
        return ByteString.from_hex(key)

    def _parse_option(self, data: Any, key_name: str, key: ByteString, path: str) -> Tuple[Tuple[str, ...], Optional[str]]:
        data = self._expect_mapping(data, path)
        self._warn_unknown_keys(data, {key_name, "aliases", "comment"}, path)

        repeated = data.get(key_name)
        if repeated is not None:
            if not isinstance(repeated, str) or ByteString.from_hex(repeated) != key:
                raise SchemaDeserializationError(
                    f"{key_name} {repeated!r} does not match its key {key.hex!r}", self._join(path, key_name))

        aliases = self._require(data, "aliases", path)
        if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
            raise SchemaDeserializationError("Aliases must be a list of strings", self._join(path, "aliases"))
        comment = self._parse_comment(data.get("comment"), self._join(path, "comment"))
        return tuple(aliases), comment

    def _parse_comment(self, value: Any, path: str) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        raise SchemaDeserializationError(f"Comment must be a string, got {value!r}", path)

    def _parse_int(self, value: Any, path: Optional[str] = None) -> int:
        if isinstance(value, bool):
            raise SchemaDeserializationError(f"Invalid integer format: {value}", path)
        if isinstance(value, int):
            result = value
        elif isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    result = int(value, 16)
                else:
                    result = int(value)
            except ValueError:
                raise SchemaDeserializationError(f"Invalid integer format: {value}", path)
        else:
            raise SchemaDeserializationError(f"Invalid integer format: {value}", path)
        if not 0 <= result <= U64_MAX:
            raise SchemaDeserializationError(f"Integer out of range for u64: {result}", path)
        return result

    def _require(self, data: Mapping[str, Any], key: str, path: Optional[str]) -> Any:
        if key not in data:
            raise SchemaDeserializationError(f"Missing required key {key!r}", path)
        return data[key]

    def _expect_mapping(self, data: Any, path: Optional[str]) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise SchemaDeserializationError(f"Expected a mapping, got {type(data).__name__}", path)
        return data

    def _warn_unknown_keys(self, data: Mapping[str, Any], known: set, path: Optional[str]) -> None:
        unknown: List[str] = [str(k) for k in data if k not in known]
        if unknown:
            where = f" in {path}" if path else ""
            warnings.warn(f"Ignoring unknown keys{where}: {', '.join(sorted(unknown))}", UserWarning, stacklevel=3)

    def _join(self, path: Optional[str], key: str) -> str:
        return f"{path}.{key}" if path else key
