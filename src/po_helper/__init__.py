"""PO / gettext JSON カタログ操作ライブラリ"""

__version__ = "0.1.0"

from po_helper.core.compare import diff_catalogs
from po_helper.core.entry_filter import EntryStateFilter, filter_entries
from po_helper.core.entry_range import EntryRangeError, parse_entry_range
from po_helper.core.gettext_json import (
    GettextJSONError,
    dumps_gettext_json,
    parse_gettext_json,
)
from po_helper.core.merge import merge_catalogs
from po_helper.core.parser import parse_po, parse_po_entries, split_header
from po_helper.core.polib_adapter import catalog_to_pofile, load_with_polib, pofile_to_catalog
from po_helper.core.select import (
    compare,
    compare_to_json,
    compare_to_po,
    load_catalog,
    msg_cat,
    msg_select,
    select_entries,
)
from po_helper.core.serializer import build_po, build_po_content
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.models.stats import DiffStat, ReportStats

__all__ = [
    "Catalog",
    "DiffStat",
    "Entry",
    "EntryRangeError",
    "EntryStateFilter",
    "GettextJSONError",
    "ReportStats",
    "build_po",
    "build_po_content",
    "catalog_to_pofile",
    "compare",
    "compare_to_json",
    "compare_to_po",
    "diff_catalogs",
    "dumps_gettext_json",
    "filter_entries",
    "load_catalog",
    "load_with_polib",
    "merge_catalogs",
    "msg_cat",
    "msg_select",
    "parse_entry_range",
    "parse_gettext_json",
    "parse_po",
    "parse_po_entries",
    "pofile_to_catalog",
    "select_entries",
    "split_header",
]
