"""gettext JSON ブリッジ

カタログと gettext JSON（``header_comment`` / ``header_meta`` / ``entries``）の相互変換。
JSON 側の文字列はデコード済み、カタログ側はPOエスケープ形式で保持するため、
変換時にエスケープコーデックを通します。

JSON の読み込みは LLM が出力した崩れた JSON を想定し、以下の順に解析を試みます。

1. 厳密な解析
2. 修復（BOM 除去、コードブロック抽出など）後の厳密な解析
3. フィールド単位の寛容な抽出
"""

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import TypeAdapter

from po_helper.core.escape import json_decoded_to_po_format, po_unescape
from po_helper.core.json_repair import find_matching_brace, prepare_json_for_parse
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.types import GettextJSONDict, GettextJSONEntryDict
from po_helper.utils.flag_utils import strip_fuzzy_from_comments

logger = logging.getLogger(__name__)

DEFAULT_SNIPPET_LENGTH = 800

EXPECTED_SCHEMA = (
    '{"header_comment":"","header_meta":"","entries":'
    '[{"msgid":"...","msgstr":"...","fuzzy":false,...}]}'
)

_DOCUMENT_ADAPTER = TypeAdapter(GettextJSONDict)
_DECODER = json.JSONDecoder()

_DOCUMENT_KEY_RE = re.compile(r'"(header_comment|header_meta|entries)"')


def format_gettext_json_parse_error(
    data: Union[bytes, str],
    path: str,
    parse_error: Exception,
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> str:
    """全ての修復が失敗した場合のエラーメッセージを組み立てる

    LLM やユーザーがファイルを修正できるよう、スキーマと内容の抜粋を含めます。
    """
    raw = data if isinstance(data, bytes) else data.encode("utf-8", errors="replace")
    snippet = raw[:snippet_length].decode("utf-8", errors="replace")
    if len(raw) > snippet_length:
        snippet += f"\n... (truncated, total {len(raw)} bytes)"
    return (
        f"failed to parse gettext JSON file: {path}\n"
        "\n"
        f"Parse error: {parse_error}\n"
        "\n"
        "Repair attempts (BOM removal, markdown code block extraction, "
        "tolerant field extraction) all failed.\n"
        "The file may have:\n"
        "- Invalid JSON syntax (missing commas, brackets, quotes, trailing commas)\n"
        "- Truncated or malformed content\n"
        "- Incorrect gettext schema\n"
        "\n"
        "Expected schema:\n"
        f"  {EXPECTED_SCHEMA}\n"
        "\n"
        f"Content snippet (first {snippet_length} bytes):\n"
        "---\n"
        f"{snippet}\n"
        "---\n"
        "\n"
        "Please fix the JSON file to conform to the gettext JSON schema"
    )


class GettextJSONError(ValueError):
    """gettext JSON を解析できなかった場合の例外"""

    def __init__(
        self,
        data: Union[bytes, str],
        path: str,
        parse_error: Exception,
        snippet_length: int = DEFAULT_SNIPPET_LENGTH,
    ) -> None:
        self.path = path
        self.parse_error = parse_error
        self.snippet_length = snippet_length
        super().__init__(
            format_gettext_json_parse_error(data, path, parse_error, snippet_length)
        )


# ---------------------------------------------------------------------------
# Entry <-> JSON 辞書
# ---------------------------------------------------------------------------


def entry_to_json_dict(entry: Entry) -> GettextJSONEntryDict:
    """エントリを gettext JSON のエントリ辞書に変換する

    fuzzy フラグはコメントから取り除き、``fuzzy`` フィールドだけで表現します。
    空の任意フィールドは出力しません。
    """
    result: GettextJSONEntryDict = {
        "msgid": po_unescape(entry.msgid),
        "msgstr": po_unescape(entry.msgstr),
    }
    if entry.msgid_plural:
        result["msgid_plural"] = po_unescape(entry.msgid_plural)
    if entry.msgstr_plural:
        result["msgstr_plural"] = [po_unescape(s) for s in entry.msgstr_plural]
    comments = strip_fuzzy_from_comments(entry.comments)
    if comments:
        result["comments"] = comments
    result["fuzzy"] = entry.fuzzy
    if entry.obsolete:
        result["obsolete"] = True
    if entry.msgid_previous:
        result["msgid_previous"] = po_unescape(entry.msgid_previous)
    return result


def entry_from_json_dict(data: GettextJSONEntryDict) -> Entry:
    """gettext JSON のエントリ辞書からエントリを作成する（raw_lines なし）"""
    msgid_plural = data.get("msgid_plural") or ""
    msgid_previous = data.get("msgid_previous") or ""
    return Entry(
        msgid=json_decoded_to_po_format(data.get("msgid") or ""),
        msgstr=json_decoded_to_po_format(data.get("msgstr") or ""),
        msgid_plural=json_decoded_to_po_format(msgid_plural) or None,
        msgstr_plural=[
            json_decoded_to_po_format(s) for s in data.get("msgstr_plural") or []
        ],
        comments=list(data.get("comments") or []),
        fuzzy=bool(data.get("fuzzy")),
        obsolete=bool(data.get("obsolete")),
        msgid_previous=json_decoded_to_po_format(msgid_previous) or None,
    )


def catalog_to_json_dict(catalog: Catalog) -> GettextJSONDict:
    """カタログを gettext JSON の辞書に変換する"""
    return {
        "header_comment": catalog.header_comment,
        "header_meta": catalog.header_meta,
        "entries": [entry_to_json_dict(entry) for entry in catalog.entries],
    }


def catalog_from_json_dict(data: GettextJSONDict) -> Catalog:
    """gettext JSON の辞書からカタログを作成する"""
    return Catalog(
        header_comment=data.get("header_comment") or "",
        header_meta=data.get("header_meta") or "",
        entries=[entry_from_json_dict(e) for e in data.get("entries") or []],
    )


def dumps_gettext_json(catalog: Catalog, indent: Optional[int] = None) -> str:
    """カタログを gettext JSON テキストに変換する

    非ASCII文字はエスケープせずに出力し、末尾には常に改行を付けます。
    """
    separators = (",", ":") if indent is None else None
    text = json.dumps(
        catalog_to_json_dict(catalog),
        ensure_ascii=False,
        indent=indent,
        separators=separators,
    )
    return text + "\n"


# ---------------------------------------------------------------------------
# 解析戦略
# ---------------------------------------------------------------------------


def _decode_strict(text: str) -> GettextJSONDict:
    return _DOCUMENT_ADAPTER.validate_json(text)


def _decode_repaired(text: str) -> GettextJSONDict:
    return _DOCUMENT_ADAPTER.validate_json(prepare_json_for_parse(text))


_MISSING = object()


def _lookup(text: str, key: str) -> Any:
    """``"key"`` の直後にある JSON 値を取り出す（見つからなければ _MISSING）"""
    match = re.search(r'"%s"\s*:?\s*' % re.escape(key), text)
    if match is None:
        return _MISSING
    try:
        value, _ = _DECODER.raw_decode(text, match.end())
    except ValueError:
        return _MISSING
    return value


def _as_str(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    if isinstance(value, (int, float)):
        return value != 0
    return False


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_as_str(v) for v in value]


def _iter_entry_chunks(text: str) -> List[str]:
    """``"entries": [`` 以降のオブジェクトを1つずつ切り出す"""
    match = re.search(r'"entries"\s*:?\s*\[', text)
    if match is None:
        return []
    chunks: List[str] = []
    pos = match.end()
    while True:
        start = text.find("{", pos)
        close = text.find("]", pos)
        if start < 0 or 0 <= close < start:
            break
        end = find_matching_brace(text, start)
        if end < 0:
            chunks.append(text[start:])
            break
        chunks.append(text[start : end + 1])
        pos = end + 1
    return chunks


def _extract_entry(chunk: str) -> GettextJSONEntryDict:
    result: GettextJSONEntryDict = {
        "msgid": _as_str(_lookup(chunk, "msgid")),
        "msgstr": _as_str(_lookup(chunk, "msgstr")),
        "msgstr_plural": _as_str_list(_lookup(chunk, "msgstr_plural")),
        "comments": _as_str_list(_lookup(chunk, "comments")),
        "fuzzy": _as_bool(_lookup(chunk, "fuzzy")),
        "obsolete": _as_bool(_lookup(chunk, "obsolete")),
        "msgid_previous": _as_str(_lookup(chunk, "msgid_previous")),
    }
    msgid_plural = _lookup(chunk, "msgid_plural")
    if msgid_plural is not _MISSING:
        result["msgid_plural"] = _as_str(msgid_plural)
    return result


def _decode_tolerant(text: str) -> GettextJSONDict:
    """構造の崩れを無視してフィールド単位で値を拾う

    読めない値は空文字列・空リスト・False で置き換えます。
    スキーマのキーが1つも見つからない場合のみ ValueError を送出します。
    """
    text = prepare_json_for_parse(text)
    if _DOCUMENT_KEY_RE.search(text) is None:
        raise ValueError("gettext JSON のキーが見つかりません")
    return {
        "header_comment": _as_str(_lookup(text, "header_comment")),
        "header_meta": _as_str(_lookup(text, "header_meta")),
        "entries": [_extract_entry(chunk) for chunk in _iter_entry_chunks(text)],
    }


ParseStrategy = Tuple[str, Callable[[str], GettextJSONDict]]

PARSE_STRATEGIES: Sequence[ParseStrategy] = (
    ("strict", _decode_strict),
    ("repair", _decode_repaired),
    ("tolerant", _decode_tolerant),
)


def parse_gettext_json_dict(
    data: Union[bytes, str], path: str = "", snippet_length: int = DEFAULT_SNIPPET_LENGTH
) -> GettextJSONDict:
    """gettext JSON テキストを辞書に解析する

    Args:
        data: JSON テキスト
        path: エラーメッセージに含めるファイルパス
        snippet_length: エラーメッセージに含める内容の最大バイト数

    Returns:
        解析結果の辞書

    Raises:
        GettextJSONError: 全ての解析戦略が失敗した場合
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    first_error: Optional[Exception] = None
    for name, strategy in PARSE_STRATEGIES:
        try:
            document = strategy(text)
        except ValueError as e:
            logger.warning("gettext JSON の解析に失敗しました（%s）: %s", name, e)
            if first_error is None:
                first_error = e
            continue
        if name != "strict":
            logger.warning("gettext JSON を %s で解析しました: %s", name, path or "-")
        return document
    assert first_error is not None
    raise GettextJSONError(data, path, first_error, snippet_length)


def parse_gettext_json(
    data: Union[bytes, str], path: str = "", snippet_length: int = DEFAULT_SNIPPET_LENGTH
) -> Catalog:
    """gettext JSON テキストからカタログを作成する

    Raises:
        GettextJSONError: 全ての解析戦略が失敗した場合
    """
    catalog = catalog_from_json_dict(parse_gettext_json_dict(data, path, snippet_length))
    logger.debug("gettext JSON を解析しました: エントリ %d件", len(catalog.entries))
    return catalog


def merge_key(entry: Union[Entry, Dict[str, Any]]) -> str:
    """重複判定のキー（msgid + NUL + msgid_plural）を返す"""
    if isinstance(entry, Entry):
        return entry.merge_key
    return (entry.get("msgid") or "") + "\x00" + (entry.get("msgid_plural") or "")
