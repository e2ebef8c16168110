"""型定義モジュール

このモジュールは、gettext JSON の辞書表現など、パッケージ全体で使用される
共通の型エイリアスを定義します。
"""

from typing import List, Optional, Tuple, TypeAlias, Union

# pydantic の TypeAdapter で検証するため typing_extensions 版を使う
from typing_extensions import TypedDict


class GettextJSONEntryDict(TypedDict, total=False):
    """gettext JSON のエントリの型定義（文字列はデコード済み）"""

    msgid: str
    msgstr: str
    msgid_plural: Optional[str]
    msgstr_plural: Optional[List[str]]
    comments: Optional[List[str]]
    fuzzy: Optional[bool]
    obsolete: Optional[bool]
    msgid_previous: Optional[str]


class GettextJSONDict(TypedDict, total=False):
    """gettext JSON 文書全体の型定義"""

    header_comment: Optional[str]
    header_meta: Optional[str]
    entries: Optional[List[GettextJSONEntryDict]]


# 入力データ（ファイル内容）
InputData: TypeAlias = Union[bytes, str]

# (ファイルパス, ファイル内容) の組
NamedInput: TypeAlias = Tuple[str, InputData]

# 選択されたエントリの1始まりのインデックス
EntryIndexList: TypeAlias = List[int]
