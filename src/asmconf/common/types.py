"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Any, Dict

# @intent:data_structure JSON/YAML/TOML パーサが生成する生のドキュメント（辞書）の型エイリアス。
# Loader と Writer の両方で共通して使用されます。
Document = Dict[str, Any]
