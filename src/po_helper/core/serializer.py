"""PO シリアライザー

エントリに元の行（``raw_lines``）があればそのまま再出力し、
ない場合はフィールドから正規化したPOテキストを組み立てます。
"""

import logging
from typing import List, Optional, Sequence

from po_helper.core.constants import (
    KEYWORD_MSGID,
    KEYWORD_MSGID_PLURAL,
    KEYWORD_MSGSTR,
    OBSOLETE_PREFIX,
    PREVIOUS_MSGID_PREFIX,
)
from po_helper.core.escape import po_escape, split_escaped_lines
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.utils.flag_utils import (
    is_flag_line,
    merge_fuzzy_into_flag_line,
    strip_fuzzy_from_flag_line,
)

logger = logging.getLogger(__name__)


def format_keyword_lines(prefix: str, keyword: str, value: str) -> List[str]:
    """キーワード行を出力形式の行リストにする

    値に ``\\n`` エスケープが含まれない場合は1行、含まれる場合は
    ``keyword ""`` の後に ``\\n`` ごとの継続行を並べます。

    Args:
        prefix: 行頭に付けるプレフィックス（廃止エントリは ``#~ ``）
        keyword: ``msgid`` / ``msgstr[0]`` などのキーワード
        value: POエスケープ済みの値
    """
    parts = split_escaped_lines(value)
    if len(parts) == 1:
        return [f'{prefix}{keyword} "{value}"']
    lines = [f'{prefix}{keyword} ""']
    lines.extend(f'{prefix}"{part}"' for part in parts if part)
    return lines


def _format_comments(entry: Entry) -> List[str]:
    lines: List[str] = []
    wrote_fuzzy = False
    for comment in entry.comments:
        comment = comment.rstrip("\n")
        if is_flag_line(comment):
            if entry.fuzzy:
                lines.append(merge_fuzzy_into_flag_line(comment, True))
                wrote_fuzzy = True
                continue
            comment = strip_fuzzy_from_flag_line(comment)
            if comment == "":
                continue
        lines.append(comment)
    if entry.fuzzy and not wrote_fuzzy:
        lines.append("#, fuzzy")
    return lines


def synthesize_entry_lines(entry: Entry) -> List[str]:
    """フィールドから正規化したエントリの行を組み立てる"""
    lines = _format_comments(entry)
    prefix = OBSOLETE_PREFIX if entry.obsolete else ""
    if entry.obsolete and entry.msgid_previous:
        lines.append(f'{PREVIOUS_MSGID_PREFIX}{KEYWORD_MSGID} "{entry.msgid_previous}"')
    lines.extend(format_keyword_lines(prefix, KEYWORD_MSGID, entry.msgid))
    if entry.msgid_plural:
        lines.extend(
            format_keyword_lines(prefix, KEYWORD_MSGID_PLURAL, entry.msgid_plural)
        )
    if entry.msgstr_plural:
        for index, value in enumerate(entry.msgstr_plural):
            keyword = f"{KEYWORD_MSGSTR}[{index}]"
            lines.extend(format_keyword_lines(prefix, keyword, value))
    else:
        lines.extend(format_keyword_lines(prefix, KEYWORD_MSGSTR, entry.msgstr))
    return lines


def entry_lines(entry: Entry) -> List[str]:
    """エントリを出力行のリストにする（元の行があればそのまま）"""
    if entry.raw_lines is not None:
        return [line.rstrip("\n") for line in entry.raw_lines]
    return synthesize_entry_lines(entry)


def synthesize_header_lines(header_comment: str, header_meta: str) -> List[str]:
    """ヘッダーコメントとメタデータからヘッダー行を組み立てる"""
    lines: List[str] = []
    if header_comment:
        if header_comment.endswith("\n"):
            header_comment = header_comment[:-1]
        lines.extend(header_comment.split("\n"))
    lines.append(f'{KEYWORD_MSGID} ""')
    lines.append(f'{KEYWORD_MSGSTR} ""')
    if header_meta:
        parts = header_meta.split("\n")
        for i, part in enumerate(parts):
            if i < len(parts) - 1:
                part += "\n"
            elif part == "":
                continue
            lines.append(f'"{po_escape(part)}"')
    return lines


def header_lines_for(catalog: Catalog) -> List[str]:
    """カタログの出力用ヘッダー行（区切りの空行は含まない場合がある）"""
    if catalog.header_lines is not None:
        return list(catalog.header_lines)
    return synthesize_header_lines(catalog.header_comment, catalog.header_meta)


def build_po_content(
    header_lines: Optional[Sequence[str]],
    entries: Sequence[Entry],
    trailing_newline: bool = False,
) -> str:
    """ヘッダー行とエントリからPOテキストを組み立てる

    Args:
        header_lines: ヘッダー行。Noneの場合はヘッダーを出力しない
        entries: 出力するエントリ
        trailing_newline: 最後のエントリの後に空行を出力するかどうか

    Returns:
        POテキスト
    """
    out: List[str] = []
    if header_lines:
        out.extend(line.rstrip("\n") for line in header_lines)
        if entries and out[-1].strip() != "":
            out.append("")
    for i, entry in enumerate(entries):
        if i > 0:
            out.append("")
        out.extend(entry_lines(entry))
    if trailing_newline and entries:
        out.append("")
    if not out:
        return ""
    return "\n".join(out) + "\n"


def build_po(
    catalog: Catalog, no_header: bool = False, trailing_newline: bool = False
) -> str:
    """カタログをPOテキストに変換する

    Args:
        catalog: 変換するカタログ
        no_header: Trueの場合はヘッダーを出力しない
        trailing_newline: 最後のエントリの後に空行を出力するかどうか
    """
    header = None if no_header else header_lines_for(catalog)
    content = build_po_content(header, catalog.entries, trailing_newline)
    logger.debug("POを出力しました: エントリ %d件", len(catalog.entries))
    return content
