"""エントリの状態分類とフィルタ"""

import logging
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, model_validator

from po_helper.core.constants import EntryState
from po_helper.models.entry import Entry
from po_helper.types import EntryIndexList

logger = logging.getLogger(__name__)


class EntryStateFilter(BaseModel):
    """エントリの状態によるフィルタ条件

    translated / untranslated / fuzzy は OR で結合されます。
    only_same / only_obsolete は他の条件より優先される単独モードです。
    """

    model_config = ConfigDict(frozen=True)

    translated: bool = False
    untranslated: bool = False
    fuzzy: bool = False
    with_obsolete: bool = True
    no_obsolete: bool = False
    only_same: bool = False
    only_obsolete: bool = False

    @model_validator(mode="after")
    def _check_exclusive(self) -> "EntryStateFilter":
        """単独モードの排他チェック"""
        if self.only_same and self.only_obsolete:
            raise ValueError("only_same と only_obsolete は同時に指定できません")
        if (self.only_same or self.only_obsolete) and self.has_state_filter():
            raise ValueError(
                "only_same / only_obsolete は translated, untranslated, fuzzy と同時に指定できません"
            )
        return self

    @classmethod
    def default(cls) -> "EntryStateFilter":
        """全ての状態を選択し、廃止エントリも含めるフィルタ"""
        return cls()

    def has_state_filter(self) -> bool:
        return self.translated or self.untranslated or self.fuzzy

    def include_obsolete(self) -> bool:
        """廃止エントリを含めるかどうか（no_obsolete が優先）"""
        if self.no_obsolete:
            return False
        return self.with_obsolete

    def match(self, entry: Entry) -> bool:
        """エントリがフィルタ条件に一致するかどうか"""
        if self.only_same:
            return entry.is_same() and not entry.obsolete
        if self.only_obsolete:
            return entry.obsolete
        if entry.obsolete:
            return self.include_obsolete()
        if self.has_state_filter():
            if self.translated and entry.has_translation() and not entry.fuzzy:
                return True
            if self.untranslated and entry.is_untranslated():
                return True
            if self.fuzzy and entry.fuzzy:
                return True
            return False
        return True


def classify(entry: Entry) -> EntryState:
    """エントリの状態を1つに分類する"""
    return entry.get_state()


def filter_entries(entries: Iterable[Entry], entry_filter: EntryStateFilter) -> List[Entry]:
    """フィルタ条件に一致するエントリを順序を保って返す"""
    entries = list(entries)
    result = [entry for entry in entries if entry_filter.match(entry)]
    logger.debug("フィルタ結果: %d / %d件", len(result), len(entries))
    return result


def filter_indices(entries: Iterable[Entry], entry_filter: EntryStateFilter) -> EntryIndexList:
    """フィルタ条件に一致するエントリの1始まりのインデックスを返す"""
    return [i for i, entry in enumerate(entries, start=1) if entry_filter.match(entry)]
