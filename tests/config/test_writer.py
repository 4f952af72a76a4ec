# tests/config/test_writer.py
"""
asmconf.config.writerモジュールの単体テスト。
"""
import pytest
import yaml

from asmconf.config.loader import ConfigLoader
from asmconf.config.models import (
    AddressField,
    AsmConfig,
    AsmFieldMeta,
    EnumeratorField,
    EnumOption,
    ImmediateField,
    ImmediateKind,
    OpCode,
    OpcodeField,
)
from asmconf.config.writer import ConfigWriter
from asmconf.formats.output_format import OutputFormat
from asmconf.types.bytestring import ByteString

# @intent:test_suite AsmConfig からドキュメント/YAMLへの書き出しの検証。


@pytest.fixture
def config():
    nop = ByteString.from_hex("00")
    ld = ByteString.from_hex("3E")
    eq = ByteString.from_hex("0")
    fields = {
        "op": OpcodeField(
            meta=AsmFieldMeta(name="op", size=8, comment="opcode"),
            values={
                ld: OpCode(code=ld, aliases=["ld"], comment="load immediate"),
                nop: OpCode(code=nop, aliases=["nop"]),
            },
        ),
        "cond": EnumeratorField(
            meta=AsmFieldMeta(name="cond", size=1),
            values={eq: EnumOption(discriminator=eq, aliases=["eq"])},
        ),
        "imm": ImmediateField(meta=AsmFieldMeta(name="imm", size=8), kind=ImmediateKind.UNSIGNED_INT),
        "target": AddressField(meta=AsmFieldMeta(name="target", size=16)),
    }
    return AsmConfig(output_format=OutputFormat.BYTE_STREAM, word_size=8, fields=fields)


class TestConfigWriter:
    # @intent:test_case_document 正規タグ・小文字16進キー・トークンで出力されることを検証します。
    def test_to_document(self, config):
        doc = ConfigWriter().to_document(config)
        assert doc["output_format"] == "byte_stream"
        assert doc["word_size"] == 8
        assert doc["fields"]["op"] == {
            "type": "opcode",
            "meta": {"name": "op", "size": 8, "comment": "opcode"},
            "values": {
                "00": {"code": "00", "aliases": ["nop"]},
                "3e": {"code": "3e", "aliases": ["ld"], "comment": "load immediate"},
            },
        }
        assert doc["fields"]["cond"]["type"] == "enumerator"
        assert doc["fields"]["cond"]["values"] == {"0": {"discriminator": "0", "aliases": ["eq"]}}
        assert doc["fields"]["imm"] == {
            "type": "immediate",
            "meta": {"name": "imm", "size": 8},
            "kind": "unsigned_int",
        }
        assert doc["fields"]["target"] == {"type": "address", "meta": {"name": "target", "size": 16}}

    def test_aliased_tag_is_written_canonically(self):
        field = ConfigLoader().parse_field({"type": "instruction", "meta": {"name": "op", "size": 4}, "values": {}})
        assert ConfigWriter().field_to_document(field)["type"] == "opcode"

    # @intent:test_case_reload 書き出したドキュメントを読み直すと等しい設定になることを検証します。
    def test_document_reloads_to_equal_config(self, config):
        doc = ConfigWriter().to_document(config)
        assert ConfigLoader().parse_config(doc) == config

    def test_dump_to_string_is_loadable_yaml(self, config):
        text = ConfigWriter().dump_to_string(config)
        # "00" は YAML で整数として解釈されないよう引用される必要がある
        assert yaml.safe_load(text)["fields"]["op"]["values"]["00"] == {"code": "00", "aliases": ["nop"]}
        assert ConfigLoader().load_from_string(text) == config

    def test_save_to_file(self, config, tmp_path):
        path = tmp_path / "out.yaml"
        ConfigWriter().save_to_file(config, str(path))
        assert ConfigLoader().load_from_file(str(path)) == config
