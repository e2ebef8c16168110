"""統計情報のデータモデル"""

from typing import Any

from pydantic import BaseModel, Field, computed_field


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


class DiffStat(BaseModel):
    """2つのカタログの差分統計"""

    added: int = Field(0, description="新しいカタログにのみ存在するエントリ数")
    changed: int = Field(0, description="msgidが同じで内容が異なるエントリ数")
    deleted: int = Field(0, description="古いカタログにのみ存在するエントリ数")

    @computed_field
    @property
    def total(self) -> int:
        return self.added + self.changed + self.deleted

    def is_empty(self) -> bool:
        return self.total == 0

    def summary(self) -> str:
        """``"2 new, 3 removed, 1 changed"`` 形式の要約（変更なしは ``"Nothing changed."``）"""
        parts = []
        if self.added:
            parts.append(f"{self.added} new")
        if self.deleted:
            parts.append(f"{self.deleted} removed")
        if self.changed:
            parts.append(f"{self.changed} changed")
        if not parts:
            return "Nothing changed."
        return ", ".join(parts)


class ReportStats(BaseModel):
    """状態ごとのエントリ数

    msgfmt --statistics と互換にするため、訳文が原文と同じエントリは
    ``same`` と ``translated`` の両方に数えます。
    """

    translated: int = Field(0, description="翻訳済みエントリ数（sameを含む）")
    untranslated: int = Field(0, description="未翻訳エントリ数")
    same: int = Field(0, description="訳文が原文と同じエントリ数")
    fuzzy: int = Field(0, description="ファジーエントリ数")
    obsolete: int = Field(0, description="廃止エントリ数")

    @computed_field
    @property
    def total(self) -> int:
        """廃止エントリを除いた全エントリ数"""
        return self.translated + self.untranslated + self.fuzzy

    @computed_field
    @property
    def progress(self) -> float:
        """翻訳の進捗率（%）"""
        if self.total == 0:
            return 0.0
        return round(self.translated / self.total * 100, 1)

    def __getitem__(self, key: str) -> Any:
        """辞書形式でのアクセスをサポート"""
        return getattr(self, key)

    def format_line(self) -> str:
        """0でない状態だけを並べた1行の要約（same と obsolete を含む）"""
        parts = []
        if self.translated:
            parts.append(_plural(self.translated, "translated message", "translated messages"))
        if self.fuzzy:
            parts.append(_plural(self.fuzzy, "fuzzy translation", "fuzzy translations"))
        if self.untranslated:
            parts.append(
                _plural(self.untranslated, "untranslated message", "untranslated messages")
            )
        if self.same:
            parts.append(_plural(self.same, "same message", "same messages"))
        if self.obsolete:
            parts.append(_plural(self.obsolete, "obsolete entry", "obsolete entries"))
        if not parts:
            return "0 translated messages."
        return ", ".join(parts) + "."

    def format_msgfmt(self) -> str:
        """msgfmt --statistics と同じ形式の要約"""
        parts = []
        if self.translated:
            parts.append(_plural(self.translated, "translated message", "translated messages"))
        if self.fuzzy:
            parts.append(_plural(self.fuzzy, "fuzzy translation", "fuzzy translations"))
        if self.untranslated:
            parts.append(
                _plural(self.untranslated, "untranslated message", "untranslated messages")
            )
        if not parts:
            return "0 translated messages."
        return ", ".join(parts) + "."
