"""
AsmConfig を構造化ドキュメント（辞書）および YAML テキストへ書き出すモジュール。
"""
from typing import Any, Dict

import yaml

from asmconf.common.types import Document
from .models import AsmConfig, AsmField, AsmFieldMeta, EnumeratorField, ImmediateField, OpcodeField


# @intent:responsibility ConfigLoader の逆変換を提供します。
# @intent:post-condition 出力されるタグは常に正規名であり、別名は出力しません。
class ConfigWriter:
    def to_document(self, config: AsmConfig) -> Document:
        return {
            "output_format": config.output_format.token,
            "word_size": config.word_size,
            "fields": {name: self.field_to_document(f) for name, f in config.fields.items()},
        }

    def field_to_document(self, asm_field: AsmField) -> Document:
        doc: Dict[str, Any] = {
            "type": asm_field.field_type.value,
            "meta": self._meta_to_document(asm_field.meta),
        }
        if isinstance(asm_field, ImmediateField):
            doc["kind"] = asm_field.kind.value
        elif isinstance(asm_field, EnumeratorField):
            doc["values"] = {
                str(key): self._option_to_document("discriminator", key, opt.aliases, opt.comment)
                for key, opt in sorted(asm_field.values.items())
            }
        elif isinstance(asm_field, OpcodeField):
            doc["values"] = {
                str(key): self._option_to_document("code", key, op.aliases, op.comment)
                for key, op in sorted(asm_field.values.items())
            }
        return doc

    def dump_to_string(self, config: AsmConfig) -> str:
        return yaml.safe_dump(self.to_document(config), sort_keys=False, allow_unicode=True)

    def save_to_file(self, config: AsmConfig, path: str) -> None:
        with open(path, 'w', encoding="utf-8") as f:
            yaml.safe_dump(self.to_document(config), f, sort_keys=False, allow_unicode=True)

    def _meta_to_document(self, meta: AsmFieldMeta) -> Document:
        doc: Dict[str, Any] = {"name": meta.name, "size": meta.size}
        if meta.comment is not None:
            doc["comment"] = meta.comment
        return doc

    # @intent:rationale 各エントリにもキーを重ねて出力し、キーを必須とする読み手でも読めるようにします。
    def _option_to_document(self, key_name, key, aliases, comment) -> Document:
        doc: Dict[str, Any] = {key_name: str(key), "aliases": list(aliases)}
        if comment is not None:
            doc["comment"] = comment
        return doc
