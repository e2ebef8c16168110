"""カタログの状態別統計"""

import logging

from po_helper.models.catalog import Catalog
from po_helper.models.stats import ReportStats

logger = logging.getLogger(__name__)


def count_report_stats(catalog: Catalog) -> ReportStats:
    """カタログのエントリを状態ごとに数える

    fuzzy は未翻訳より優先し、廃止エントリは obsolete にのみ数えます。
    """
    stats = ReportStats()
    for entry in catalog.entries:
        if entry.obsolete:
            stats.obsolete += 1
            continue
        if entry.msgid == "":
            continue
        if entry.fuzzy:
            stats.fuzzy += 1
            continue
        if not entry.has_translation():
            stats.untranslated += 1
            continue
        if entry.is_same():
            stats.same += 1
        stats.translated += 1
    logger.debug("統計: %s", stats.format_line())
    return stats


def format_stat_line(stats: ReportStats) -> str:
    return stats.format_line()


def format_msgfmt_statistics(stats: ReportStats) -> str:
    return stats.format_msgfmt()
