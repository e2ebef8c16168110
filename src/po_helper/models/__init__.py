"""データモデル"""

from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.models.stats import DiffStat, ReportStats

__all__ = ["Catalog", "DiffStat", "Entry", "ReportStats"]
