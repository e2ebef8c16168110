"""PO パーサー

PO/POT テキストを1行ずつ読み、ヘッダー行とエントリ列に分解する状態機械。
文法検証は行わず、どのような入力でも例外を送出しません。
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple, Union

from po_helper.core.constants import OBSOLETE_PREFIX, PREVIOUS_MSGID_PREFIX
from po_helper.core.escape import po_unescape, strip_quotes
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry

logger = logging.getLogger(__name__)

_MSGSTR_INDEX_RE = re.compile(r"^msgstr\[(\d+)\]")


class ParserState(Enum):
    """パーサーの状態"""

    PRE_HEADER = auto()  # 最初の msgid "" より前
    HEADER = auto()  # ヘッダーブロック内
    BODY = auto()  # エントリ本体


class ActiveField(Enum):
    """継続行の追加先"""

    MSGID = auto()
    MSGID_PLURAL = auto()
    MSGSTR = auto()
    MSGSTR_PLURAL = auto()


@dataclass
class _PendingEntry:
    """組み立て中のエントリ"""

    comments: List[str] = field(default_factory=list)
    raw_lines: List[str] = field(default_factory=list)
    msgid: List[str] = field(default_factory=list)
    msgid_plural: List[str] = field(default_factory=list)
    msgstr: List[str] = field(default_factory=list)
    msgstr_plural: List[List[str]] = field(default_factory=list)
    active: Optional[ActiveField] = None
    plural_index: int = 0
    has_keyword: bool = False
    obsolete: bool = False
    msgid_previous: Optional[str] = None

    def has_content(self) -> bool:
        return bool("".join(self.msgid) or "".join(self.msgstr))

    def reset_values(self) -> None:
        self.msgid = []
        self.msgid_plural = []
        self.msgstr = []
        self.msgstr_plural = []
        self.active = None
        self.plural_index = 0

    def append(self, value: str) -> None:
        """アクティブなフィールドに値を追加する"""
        if self.active is ActiveField.MSGID:
            self.msgid.append(value)
        elif self.active is ActiveField.MSGID_PLURAL:
            self.msgid_plural.append(value)
        elif self.active is ActiveField.MSGSTR:
            self.msgstr.append(value)
        elif self.active is ActiveField.MSGSTR_PLURAL:
            self.msgstr_plural[self.plural_index].append(value)

    def build(self) -> Entry:
        msgid_plural = "".join(self.msgid_plural)
        msgstr_plural: List[str] = []
        if msgid_plural:
            msgstr_plural = ["".join(parts) for parts in self.msgstr_plural]
        return Entry.from_comments(
            list(self.comments),
            msgid="".join(self.msgid),
            msgstr="".join(self.msgstr),
            msgid_plural=msgid_plural or None,
            msgstr_plural=msgstr_plural,
            obsolete=self.obsolete,
            msgid_previous=self.msgid_previous,
            raw_lines=list(self.raw_lines),
        )


def _keyword_value(trimmed: str, keyword: str) -> str:
    """``keyword "value"`` から引用符を外した値を取り出す"""
    return strip_quotes(trimmed[len(keyword) :].strip())


class PoParser:
    """PO テキストの行指向パーサー

    1回の ``parse`` 呼び出しごとに状態を初期化します。
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = ParserState.PRE_HEADER
        self.header_lines: List[str] = []
        self.entries: List[Entry] = []
        self._pending: Optional[_PendingEntry] = None

    def parse(self, data: Union[bytes, str]) -> Tuple[List[Entry], List[str]]:
        """PO テキストを解析する

        Args:
            data: PO テキスト（bytes の場合は UTF-8 として surrogateescape でデコード）

        Returns:
            (エントリのリスト, ヘッダー行のリスト)
        """
        self._reset()
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="surrogateescape")
        lines = data.split("\n")
        # 末尾の改行による空要素は行として扱わない
        if lines and lines[-1] == "":
            lines.pop()

        for line in lines:
            if self.state is ParserState.PRE_HEADER:
                self._feed_pre_header(line)
            elif self.state is ParserState.HEADER:
                self._feed_header(line)
            else:
                self._feed_body(line)

        if self.state is ParserState.BODY:
            self._finalize()
        logger.debug(
            "POを解析しました: エントリ %d件, ヘッダー %d行",
            len(self.entries),
            len(self.header_lines),
        )
        return self.entries, self.header_lines

    def _feed_pre_header(self, line: str) -> None:
        trimmed = line.strip()
        if trimmed.startswith("msgid ") and _keyword_value(trimmed, "msgid") == "":
            self.header_lines.append(line)
            self.state = ParserState.HEADER
            return
        if self._starts_entry(trimmed):
            self._begin_headerless_body(line)
            return
        self.header_lines.append(line)

    def _feed_header(self, line: str) -> None:
        trimmed = line.strip()
        if trimmed == "":
            self.header_lines.append(line)
            self.state = ParserState.BODY
            return
        if trimmed.startswith("msgstr") or trimmed.startswith('"'):
            self.header_lines.append(line)
            return
        # 空行なしでエントリが始まった
        self.state = ParserState.BODY
        self._feed_body(line)

    @staticmethod
    def _starts_entry(trimmed: str) -> bool:
        """ヘッダー外のエントリ開始行かどうか"""
        if trimmed.startswith(PREVIOUS_MSGID_PREFIX + "msgid "):
            return True
        if trimmed.startswith(OBSOLETE_PREFIX):
            trimmed = trimmed[len(OBSOLETE_PREFIX) :].strip()
        return trimmed.startswith("msgid ")

    def _begin_headerless_body(self, line: str) -> None:
        """ヘッダーのないファイルで最初のエントリが現れた場合の処理

        最後の空行より後ろの行は、そのエントリに属するものとして移動します。
        """
        last_blank = -1
        for i, header_line in enumerate(self.header_lines):
            if header_line.strip() == "":
                last_blank = i
        tail = self.header_lines[last_blank + 1 :]
        self.header_lines = self.header_lines[: last_blank + 1]
        self.state = ParserState.BODY
        if tail:
            self._pending = _PendingEntry(
                comments=[t for t in tail if t.strip().startswith("#")],
                raw_lines=list(tail),
            )
        self._feed_body(line)

    def _feed_body(self, line: str) -> None:
        trimmed = line.strip()
        obsolete_prefixed = False

        if trimmed.startswith(PREVIOUS_MSGID_PREFIX):
            rest = trimmed[len(PREVIOUS_MSGID_PREFIX) :].strip()
            if rest.startswith("msgid "):
                self._on_previous_msgid(line, _keyword_value(rest, "msgid"))
                return
        elif trimmed.startswith(OBSOLETE_PREFIX):
            content = trimmed[len(OBSOLETE_PREFIX) :].strip()
            if content.startswith('"') and self._pending and self._pending.active:
                self._pending.obsolete = True
                self._on_continuation(line, content)
                return
            obsolete_prefixed = True
            trimmed = content

        if trimmed.startswith("#"):
            self._on_comment(line)
        elif trimmed.startswith("msgid_plural "):
            value = _keyword_value(trimmed, "msgid_plural")
            self._on_keyword(line, ActiveField.MSGID_PLURAL, value, obsolete_prefixed)
        elif trimmed.startswith("msgid "):
            self._on_msgid(line, _keyword_value(trimmed, "msgid"), obsolete_prefixed)
        elif trimmed.startswith("msgstr["):
            self._on_msgstr_plural(line, trimmed, obsolete_prefixed)
        elif trimmed.startswith("msgstr "):
            value = _keyword_value(trimmed, "msgstr")
            self._on_keyword(line, ActiveField.MSGSTR, value, obsolete_prefixed)
        elif trimmed.startswith('"') and self._pending and self._pending.active:
            self._on_continuation(line, trimmed)
        elif trimmed == "":
            self._on_blank(line)
        else:
            self._on_other(line)

    def _ensure_pending(self) -> _PendingEntry:
        if self._pending is None:
            self._pending = _PendingEntry()
        return self._pending

    def _start_new_if_complete(self) -> _PendingEntry:
        """完成済みのエントリがあれば確定し、組み立て先を返す"""
        pending = self._pending
        if pending is not None and pending.has_keyword and pending.has_content():
            self._finalize()
        return self._ensure_pending()

    def _on_comment(self, line: str) -> None:
        pending = self._start_new_if_complete()
        pending.comments.append(line)
        pending.raw_lines.append(line)

    def _on_previous_msgid(self, line: str, value: str) -> None:
        pending = self._start_new_if_complete()
        pending.msgid_previous = value or None
        pending.obsolete = True
        pending.raw_lines.append(line)

    def _on_msgid(self, line: str, value: str, obsolete_prefixed: bool) -> None:
        pending = self._pending
        if pending is not None and pending.has_content():
            self._finalize()
        pending = self._ensure_pending()
        pending.reset_values()
        pending.msgid.append(value)
        pending.active = ActiveField.MSGID
        pending.has_keyword = True
        if obsolete_prefixed:
            pending.obsolete = True
        pending.raw_lines.append(line)

    def _on_keyword(
        self, line: str, active: ActiveField, value: str, obsolete_prefixed: bool
    ) -> None:
        pending = self._ensure_pending()
        pending.active = active
        pending.append(value)
        pending.has_keyword = True
        if obsolete_prefixed:
            pending.obsolete = True
        pending.raw_lines.append(line)

    def _on_msgstr_plural(self, line: str, trimmed: str, obsolete_prefixed: bool) -> None:
        match = _MSGSTR_INDEX_RE.match(trimmed)
        index = int(match.group(1)) if match else 0
        pending = self._ensure_pending()
        while len(pending.msgstr_plural) <= index:
            pending.msgstr_plural.append([])
        pending.plural_index = index
        close = trimmed.find("]")
        value = strip_quotes(trimmed[close + 1 :].strip())
        self._on_keyword(line, ActiveField.MSGSTR_PLURAL, value, obsolete_prefixed)

    def _on_continuation(self, line: str, trimmed: str) -> None:
        pending = self._ensure_pending()
        pending.append(strip_quotes(trimmed))
        pending.raw_lines.append(line)

    def _on_blank(self, line: str) -> None:
        pending = self._pending
        if pending is None:
            # エントリ間の余分な空行は次のエントリの先頭として残す
            self._pending = _PendingEntry(raw_lines=[line])
            return
        if pending.has_content():
            self._finalize()
        elif not pending.has_keyword:
            # コメントだけのエントリは次のエントリの先頭として残す
            pending.raw_lines.append(line)
        else:
            self._pending = None

    def _on_other(self, line: str) -> None:
        # msgctxt などの未対応行は元の行にのみ残す
        pending = self._start_new_if_complete()
        pending.active = None
        pending.raw_lines.append(line)

    def _finalize(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is None or not pending.has_content():
            return
        self.entries.append(pending.build())


def parse_po_entries(data: Union[bytes, str]) -> Tuple[List[Entry], List[str]]:
    """PO テキストを (エントリ, ヘッダー行) に分解する"""
    return PoParser().parse(data)


def split_header(header_lines: List[str]) -> Tuple[str, str]:
    """ヘッダー行をヘッダーコメントとヘッダーメタデータに分ける

    Args:
        header_lines: パーサーが返したヘッダー行

    Returns:
        (header_comment, header_meta)。header_meta はデコード済みの文字列
    """
    comment_lines: List[str] = []
    index = 0
    found = False
    for index, line in enumerate(header_lines):
        trimmed = line.strip()
        if trimmed.startswith("msgid ") and _keyword_value(trimmed, "msgid") == "":
            found = True
            break
        comment_lines.append(line)

    header_comment = "\n".join(comment_lines) + "\n" if comment_lines else ""
    if not found:
        return header_comment, ""

    meta_parts: List[str] = []
    for line in header_lines[index + 1 :]:
        trimmed = line.strip()
        if trimmed.startswith("msgstr "):
            meta_parts.append(_keyword_value(trimmed, "msgstr"))
        elif trimmed.startswith('"'):
            meta_parts.append(strip_quotes(trimmed))
        else:
            break
    return header_comment, po_unescape("".join(meta_parts))


def parse_po(data: Union[bytes, str]) -> Catalog:
    """PO テキストからカタログを作成する"""
    entries, header_lines = parse_po_entries(data)
    header_comment, header_meta = split_header(header_lines)
    return Catalog(
        header_comment=header_comment,
        header_meta=header_meta,
        entries=entries,
        header_lines=header_lines,
    )
