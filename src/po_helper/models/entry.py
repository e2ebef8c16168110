"""POエントリのモデル"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from po_helper.core.constants import FUZZY_FLAG, MERGE_KEY_SEPARATOR, EntryState
from po_helper.utils.flag_utils import (
    comment_has_fuzzy_flag,
    comments_have_fuzzy_flag,
    is_flag_line,
    split_flags,
    strip_fuzzy_from_comments,
)

logger = logging.getLogger(__name__)


class Entry(BaseModel):
    """POエントリのPydanticモデル実装

    msgid / msgstr 系のフィールドはPOエスケープ形式（``\\n`` などが2文字のまま）で保持します。
    ``raw_lines`` はパーサーが生成したエントリにのみ設定され、
    シリアライザーはこれが存在する場合に元の行をそのまま出力します。
    """

    model_config = ConfigDict(validate_assignment=False)

    msgid: str = ""
    msgstr: str = ""
    msgid_plural: Optional[str] = None
    msgstr_plural: List[str] = Field(default_factory=list)
    comments: List[str] = Field(default_factory=list)
    fuzzy: bool = False
    obsolete: bool = False
    msgid_previous: Optional[str] = None
    # 元の行（パース由来の場合のみ）。ダンプと構造比較からは除外
    raw_lines: Optional[List[str]] = Field(default=None, exclude=True, repr=False)

    @field_validator("msgid_plural", "msgid_previous", mode="before")
    @classmethod
    def _empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        """空文字列はNoneとして扱う"""
        if v == "":
            return None
        return v

    @classmethod
    def from_comments(cls, comments: List[str], **data) -> "Entry":
        """コメント行からfuzzyを導出してエントリを作成する"""
        return cls(comments=comments, fuzzy=comments_have_fuzzy_flag(comments), **data)

    @property
    def flags(self) -> List[str]:
        """``#,`` 行に含まれるフラグの一覧"""
        result: List[str] = []
        for line in self.comments:
            if is_flag_line(line):
                result.extend(split_flags(line))
        if self.fuzzy and FUZZY_FLAG not in result:
            result.insert(0, FUZZY_FLAG)
        elif not self.fuzzy and FUZZY_FLAG in result:
            result.remove(FUZZY_FLAG)
        return result

    @property
    def is_plural(self) -> bool:
        return bool(self.msgid_plural)

    def has_translation(self) -> bool:
        """翻訳が存在するかどうか

        複数形エントリはいずれかの形式が空でなければ翻訳ありとみなします。
        """
        if self.msgstr_plural:
            return any(s != "" for s in self.msgstr_plural)
        return self.msgstr != ""

    def is_untranslated(self) -> bool:
        """翻訳が完全に空かどうか"""
        if self.msgstr_plural:
            return all(s == "" for s in self.msgstr_plural)
        return self.msgstr == ""

    def is_same(self) -> bool:
        """訳文が原文と同一かどうか（複数形は形式0で判定）"""
        if self.msgstr_plural:
            return self.msgstr_plural[0] == self.msgid
        return self.msgstr == self.msgid

    def get_state(self) -> EntryState:
        """エントリの状態を取得する

        判定の優先順位は obsolete > fuzzy > untranslated > same > translated です。
        """
        if self.obsolete:
            return EntryState.OBSOLETE
        if self.fuzzy:
            return EntryState.FUZZY
        if self.is_untranslated():
            return EntryState.UNTRANSLATED
        if self.is_same():
            return EntryState.SAME
        return EntryState.TRANSLATED

    @property
    def merge_key(self) -> str:
        """重複判定に使うキー（msgid + NUL + msgid_plural）"""
        return self.msgid + MERGE_KEY_SEPARATOR + (self.msgid_plural or "")

    def content_key(self) -> Tuple:
        """差分比較で使う内容のタプル"""
        return (
            self.msgid,
            self.msgstr,
            self.msgid_plural or "",
            tuple(self.msgstr_plural),
            self.fuzzy,
            self.obsolete,
        )

    def content_equal(self, other: "Entry") -> bool:
        """msgid, msgstr, 複数形, fuzzy, obsolete が一致するかどうか"""
        return self.content_key() == other.content_key()

    def structurally_equal(self, other: "Entry") -> bool:
        """raw_lines を無視して全フィールドが一致するかどうか"""
        return self.model_dump() == other.model_dump()

    def invalidate_raw_lines(self) -> None:
        """元の行を破棄し、以降の出力を正規化出力に切り替える"""
        self.raw_lines = None

    def unset_fuzzy(self) -> bool:
        """fuzzyフラグを外す（訳文は保持）

        Returns:
            エントリが変更された場合はTrue
        """
        has_flag = any(comment_has_fuzzy_flag(c) for c in self.comments)
        if not self.fuzzy and not has_flag:
            return False
        self.fuzzy = False
        if has_flag:
            self.comments = strip_fuzzy_from_comments(self.comments)
        self.invalidate_raw_lines()
        return True

    def clear_fuzzy(self) -> bool:
        """fuzzyエントリの訳文を空にしてfuzzyフラグを外す

        Returns:
            エントリが変更された場合はTrue
        """
        was_fuzzy = self.fuzzy
        changed = self.unset_fuzzy()
        if was_fuzzy:
            self.msgstr = ""
            self.msgstr_plural = ["" for _ in self.msgstr_plural]
        return changed
