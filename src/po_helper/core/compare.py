"""2つのカタログの差分"""

import logging
from typing import List, Tuple

from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.models.stats import DiffStat

logger = logging.getLogger(__name__)


def _active_sorted(catalog: Catalog) -> List[Entry]:
    """廃止エントリを除き、msgid順に並べる"""
    entries = [entry for entry in catalog.entries if not entry.obsolete]
    return sorted(entries, key=lambda entry: entry.msgid)


def diff_catalogs(old: Catalog, new: Catalog) -> Tuple[DiffStat, List[Entry]]:
    """古いカタログと新しいカタログの差分を求める

    廃止エントリは両方から除外したうえで msgid 順にマージ比較します。

    Args:
        old: 古いカタログ
        new: 新しいカタログ

    Returns:
        (差分統計, 追加・変更されたエントリ)。エントリは msgid 順
    """
    old_entries = _active_sorted(old)
    new_entries = _active_sorted(new)
    stat = DiffStat()
    review: List[Entry] = []

    i = j = 0
    while i < len(old_entries) and j < len(new_entries):
        old_entry = old_entries[i]
        new_entry = new_entries[j]
        if old_entry.msgid < new_entry.msgid:
            stat.deleted += 1
            i += 1
        elif old_entry.msgid > new_entry.msgid:
            stat.added += 1
            review.append(new_entry)
            j += 1
        else:
            if not old_entry.content_equal(new_entry):
                stat.changed += 1
                review.append(new_entry)
            i += 1
            j += 1

    stat.deleted += len(old_entries) - i
    for new_entry in new_entries[j:]:
        stat.added += 1
        review.append(new_entry)

    logger.debug(
        "差分: deleted=%d, added=%d, changed=%d", stat.deleted, stat.added, stat.changed
    )
    return stat, review


def review_catalog(old: Catalog, new: Catalog) -> Tuple[DiffStat, Catalog]:
    """差分統計と、新しいカタログのヘッダーを持つレビュー用カタログを返す"""
    stat, review = diff_catalogs(old, new)
    return stat, new.with_entries(review)
