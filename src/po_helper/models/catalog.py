"""カタログ（ヘッダー + エントリ列）のモデル"""

import logging
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from po_helper.models.entry import Entry

logger = logging.getLogger(__name__)


class Catalog(BaseModel):
    """POカタログのPydanticモデル実装

    ヘッダーはエントリとしては保持せず、``header_comment`` と ``header_meta`` に分けて保持します。
    PO テキストから生成した場合は ``header_lines`` に元のヘッダー行がそのまま残り、
    シリアライザーはそれを優先して出力します。
    """

    model_config = ConfigDict(validate_assignment=False)

    header_comment: str = ""
    header_meta: str = ""
    entries: List[Entry] = Field(default_factory=list)
    header_lines: Optional[List[str]] = Field(default=None, exclude=True, repr=False)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_po(cls, data: Union[bytes, str]) -> "Catalog":
        """PO テキストからカタログを作成する"""
        from po_helper.core.parser import parse_po

        return parse_po(data)

    @classmethod
    def from_json(cls, data: Union[bytes, str], path: str = "") -> "Catalog":
        """gettext JSON からカタログを作成する"""
        from po_helper.core.gettext_json import parse_gettext_json

        return parse_gettext_json(data, path)

    def to_po(self, no_header: bool = False, trailing_newline: bool = False) -> str:
        """PO テキストに変換する"""
        from po_helper.core.serializer import build_po

        return build_po(self, no_header=no_header, trailing_newline=trailing_newline)

    def to_json(self, indent: Optional[int] = None) -> str:
        """gettext JSON テキストに変換する"""
        from po_helper.core.gettext_json import dumps_gettext_json

        return dumps_gettext_json(self, indent=indent)

    def with_entries(self, entries: Iterable[Entry]) -> "Catalog":
        """ヘッダーを引き継いだまま、エントリを差し替えたカタログを返す"""
        return self.model_copy(update={"entries": list(entries)})

    def unset_fuzzy(self) -> int:
        """全エントリのfuzzyフラグを外す（訳文は保持）

        Returns:
            変更したエントリ数
        """
        changed = sum(1 for entry in self.entries if entry.unset_fuzzy())
        logger.debug("fuzzyフラグを外しました: %d件", changed)
        return changed

    def clear_fuzzy(self) -> int:
        """fuzzyエントリの訳文を空にしてfuzzyフラグを外す

        Returns:
            変更したエントリ数
        """
        changed = sum(1 for entry in self.entries if entry.clear_fuzzy())
        logger.debug("fuzzyエントリの訳文を消去しました: %d件", changed)
        return changed

    def structurally_equal(self, other: "Catalog") -> bool:
        """header_lines / raw_lines を無視して一致するかどうか"""
        return self.model_dump() == other.model_dump()
