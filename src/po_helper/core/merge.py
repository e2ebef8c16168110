"""複数カタログのマージ"""

import logging
from typing import Iterable, List, Set

from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry

logger = logging.getLogger(__name__)


def merge_catalogs(sources: Iterable[Catalog]) -> Catalog:
    """複数のカタログを1つにまとめる

    ヘッダーは最初のカタログから取り、エントリは ``merge_key`` ごとに
    最初に現れたものを残します（後から現れた重複は内容に関係なく捨てる）。

    Args:
        sources: 優先度の高い順に並べたカタログ

    Returns:
        マージしたカタログ
    """
    sources = list(sources)
    if not sources:
        return Catalog()

    seen: Set[str] = set()
    merged: List[Entry] = []
    dropped = 0
    for source in sources:
        for entry in source.entries:
            key = entry.merge_key
            if key in seen:
                dropped += 1
                continue
            seen.add(key)
            merged.append(entry)

    if dropped:
        logger.debug("重複エントリを %d件 除外しました", dropped)
    return sources[0].with_entries(merged)
