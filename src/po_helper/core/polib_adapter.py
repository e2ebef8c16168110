"""polib との相互変換

このモジュールは、カタログと ``polib.POFile`` を相互に変換する関数を提供します。
MO ファイルの生成やメタデータ辞書の操作など、polib の機能を利用する場合に使います。
"""

import logging
from typing import Dict, List, Optional, Tuple

import polib

from po_helper.core.escape import po_escape, po_unescape
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.utils.flag_utils import is_flag_line

logger = logging.getLogger(__name__)


def _split_header_comment(header_comment: str) -> str:
    """``# `` 付きのヘッダーコメントを polib の header 文字列にする"""
    lines = []
    for line in header_comment.rstrip("\n").split("\n"):
        if line.startswith("# "):
            lines.append(line[2:])
        elif line.startswith("#"):
            lines.append(line[1:])
        else:
            lines.append(line)
    return "\n".join(lines)


def _parse_metadata(header_meta: str) -> Dict[str, str]:
    """``Key: Value`` 形式のヘッダーメタデータを辞書にする"""
    metadata: Dict[str, str] = {}
    for line in header_meta.split("\n"):
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        metadata[key.strip()] = value.strip()
    return metadata


def _parse_occurrences(text: str) -> List[Tuple[str, str]]:
    occurrences = []
    for token in text.split():
        if ":" in token:
            path, line = token.rsplit(":", 1)
            occurrences.append((path, line))
        else:
            occurrences.append((token, ""))
    return occurrences


def entry_to_poentry(entry: Entry) -> polib.POEntry:
    """エントリを polib.POEntry に変換する"""
    tcomments: List[str] = []
    extracted: List[str] = []
    occurrences: List[Tuple[str, str]] = []
    previous_msgid: Optional[str] = None
    for comment in entry.comments:
        line = comment.strip()
        if is_flag_line(line):
            continue
        if line.startswith("#."):
            extracted.append(line[2:].strip())
        elif line.startswith("#:"):
            occurrences.extend(_parse_occurrences(line[2:]))
        elif line.startswith("#| msgid "):
            previous_msgid = po_unescape(line[len("#| msgid ") :].strip().strip('"'))
        elif line.startswith("#"):
            tcomments.append(line[1:].strip())

    if entry.obsolete and entry.msgid_previous:
        previous_msgid = po_unescape(entry.msgid_previous)

    kwargs = {
        "msgid": po_unescape(entry.msgid),
        "msgstr": po_unescape(entry.msgstr),
        "flags": entry.flags,
        "obsolete": entry.obsolete,
        "occurrences": occurrences,
        "comment": "\n".join(extracted),
        "tcomment": "\n".join(tcomments),
    }
    if entry.msgid_plural:
        kwargs["msgid_plural"] = po_unescape(entry.msgid_plural)
        kwargs["msgstr_plural"] = {
            i: po_unescape(s) for i, s in enumerate(entry.msgstr_plural)
        }
    if previous_msgid:
        kwargs["previous_msgid"] = previous_msgid
    return polib.POEntry(**kwargs)


def catalog_to_pofile(catalog: Catalog, wrapwidth: int = 78) -> polib.POFile:
    """カタログを polib.POFile に変換する

    Args:
        catalog: 変換するカタログ
        wrapwidth: polib が出力する際の折り返し幅

    Returns:
        polib.POFile
    """
    pofile = polib.POFile(wrapwidth=wrapwidth)
    if catalog.header_comment.strip():
        pofile.header = _split_header_comment(catalog.header_comment)
    pofile.metadata = _parse_metadata(catalog.header_meta)
    for entry in catalog.entries:
        pofile.append(entry_to_poentry(entry))
    logger.debug("polib.POFile に変換しました: エントリ %d件", len(pofile))
    return pofile


def poentry_to_entry(po_entry: polib.POEntry) -> Entry:
    """polib.POEntry をエントリに変換する（raw_lines なし）"""
    comments: List[str] = []
    if po_entry.tcomment:
        comments.extend(f"# {line}".rstrip() for line in po_entry.tcomment.split("\n"))
    if po_entry.comment:
        comments.extend(f"#. {line}".rstrip() for line in po_entry.comment.split("\n"))
    if po_entry.occurrences:
        refs = [f"{path}:{line}" if line else path for path, line in po_entry.occurrences]
        comments.append("#: " + " ".join(refs))
    flags = [flag for flag in po_entry.flags if flag != "fuzzy"]
    if flags:
        comments.append("#, " + ", ".join(flags))

    msgid_previous: Optional[str] = None
    if po_entry.previous_msgid:
        if po_entry.obsolete:
            msgid_previous = po_escape(po_entry.previous_msgid)
        else:
            comments.append(f'#| msgid "{po_escape(po_entry.previous_msgid)}"')

    if po_entry.msgctxt:
        logger.debug("msgctxt は保持されません: %s", po_entry.msgctxt)

    msgstr_plural: List[str] = []
    if po_entry.msgid_plural:
        msgstr_plural = [
            po_escape(value)
            for _, value in sorted(
                po_entry.msgstr_plural.items(), key=lambda item: int(item[0])
            )
        ]

    return Entry(
        msgid=po_escape(po_entry.msgid),
        msgstr=po_escape(po_entry.msgstr or ""),
        msgid_plural=po_escape(po_entry.msgid_plural) if po_entry.msgid_plural else None,
        msgstr_plural=msgstr_plural,
        comments=comments,
        fuzzy="fuzzy" in po_entry.flags,
        obsolete=bool(po_entry.obsolete),
        msgid_previous=msgid_previous,
    )


def pofile_to_catalog(pofile: polib.POFile) -> Catalog:
    """polib.POFile をカタログに変換する"""
    header_comment = ""
    if pofile.header:
        lines = [f"# {line}".rstrip() for line in pofile.header.split("\n")]
        header_comment = "\n".join(lines) + "\n"
    header_meta = "".join(f"{key}: {value}\n" for key, value in pofile.ordered_metadata())
    entries = [poentry_to_entry(po_entry) for po_entry in pofile]
    return Catalog(header_comment=header_comment, header_meta=header_meta, entries=entries)


def load_with_polib(data: str) -> Catalog:
    """polib で PO テキストを解析してカタログに変換する"""
    return pofile_to_catalog(polib.pofile(data))
