"""読み込み・選択・連結・比較の一連の処理

PO と gettext JSON のどちらの入力も受け付け、内容から形式を判定します。
"""

import logging
from typing import Iterable, List, Optional, Tuple

from po_helper.core.compare import review_catalog
from po_helper.core.entry_filter import EntryStateFilter, filter_entries
from po_helper.core.entry_range import parse_entry_range
from po_helper.core.gettext_json import (
    DEFAULT_SNIPPET_LENGTH,
    dumps_gettext_json,
    parse_gettext_json,
)
from po_helper.core.merge import merge_catalogs
from po_helper.core.parser import parse_po
from po_helper.core.serializer import build_po
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry
from po_helper.models.stats import DiffStat
from po_helper.types import InputData, NamedInput

logger = logging.getLogger(__name__)

_LEADING_SPACE = " \t\r\n\ufeff"


def is_json_input(data: InputData) -> bool:
    """先頭の空白（とBOM）を除いた最初の文字が ``{`` なら JSON とみなす"""
    if isinstance(data, bytes):
        data = data[:512].decode("utf-8", errors="ignore")
    return data.lstrip(_LEADING_SPACE).startswith("{")


def load_catalog(
    data: InputData, path: str = "", snippet_length: int = DEFAULT_SNIPPET_LENGTH
) -> Catalog:
    """PO または gettext JSON を読み込む

    Raises:
        GettextJSONError: JSON と判定した入力を解析できなかった場合
    """
    if is_json_input(data):
        logger.debug("gettext JSON として読み込みます: %s", path or "-")
        return parse_gettext_json(data, path, snippet_length)
    logger.debug("PO として読み込みます: %s", path or "-")
    return parse_po(data)


def select_entries(
    catalog: Catalog,
    range_spec: str = "",
    entry_filter: Optional[EntryStateFilter] = None,
) -> List[Entry]:
    """状態でフィルタした後、範囲指定でエントリを選択する

    範囲はフィルタ後のエントリ列に対する1始まりの番号です。

    Raises:
        EntryRangeError: 範囲指定が不正な場合
    """
    if entry_filter is None:
        entry_filter = EntryStateFilter.default()
    filtered = filter_entries(catalog.entries, entry_filter)
    indices = parse_entry_range(range_spec, len(filtered))
    return [filtered[i - 1] for i in indices]


def _apply_fuzzy_transform(catalog: Catalog, unset_fuzzy: bool, clear_fuzzy: bool) -> Catalog:
    if unset_fuzzy and clear_fuzzy:
        raise ValueError("unset_fuzzy と clear_fuzzy は同時に指定できません")
    if not (unset_fuzzy or clear_fuzzy):
        return catalog
    # エントリは複製してから変更する
    catalog = catalog.with_entries(e.model_copy(deep=True) for e in catalog.entries)
    if clear_fuzzy:
        catalog.clear_fuzzy()
    else:
        catalog.unset_fuzzy()
    return catalog


def msg_select(
    data: InputData,
    range_spec: str = "",
    *,
    entry_filter: Optional[EntryStateFilter] = None,
    output_json: bool = False,
    no_header: bool = False,
    unset_fuzzy: bool = False,
    clear_fuzzy: bool = False,
    trailing_newline: Optional[bool] = None,
    json_indent: Optional[int] = None,
    path: str = "",
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> str:
    """カタログを読み込み、フィルタと範囲で選択したエントリを出力する

    Args:
        data: PO または gettext JSON の内容
        range_spec: 範囲指定（空文字列は全て）
        entry_filter: 状態フィルタ（省略時は全て選択）
        output_json: Trueなら gettext JSON、Falseなら PO で出力
        no_header: PO 出力でヘッダーを省略する
        unset_fuzzy: fuzzy フラグを外す（訳文は保持）
        clear_fuzzy: fuzzy エントリの訳文を空にして fuzzy フラグを外す
        trailing_newline: PO 出力の最後に空行を付けるか。Noneなら入力がPOの場合に付ける
        json_indent: JSON 出力のインデント
        path: エラーメッセージ用の入力パス
        snippet_length: JSON 解析エラー時に表示する内容の最大バイト数

    Returns:
        出力テキスト。PO 出力で選択されたエントリがない場合は空文字列

    Raises:
        ValueError: unset_fuzzy と clear_fuzzy を同時に指定した場合、範囲指定や JSON が不正な場合
    """
    if unset_fuzzy and clear_fuzzy:
        raise ValueError("unset_fuzzy と clear_fuzzy は同時に指定できません")
    input_was_po = not is_json_input(data)
    catalog = load_catalog(data, path, snippet_length)
    selected = catalog.with_entries(select_entries(catalog, range_spec, entry_filter))
    selected = _apply_fuzzy_transform(selected, unset_fuzzy, clear_fuzzy)
    logger.info("%d / %d件のエントリを選択しました", len(selected), len(catalog))

    if output_json:
        return dumps_gettext_json(selected, indent=json_indent)
    if not selected.entries:
        return ""
    if trailing_newline is None:
        trailing_newline = input_was_po
    return build_po(selected, no_header=no_header, trailing_newline=trailing_newline)


def msg_cat(
    sources: Iterable[NamedInput],
    *,
    entry_filter: Optional[EntryStateFilter] = None,
    output_json: bool = False,
    unset_fuzzy: bool = False,
    clear_fuzzy: bool = False,
    json_indent: Optional[int] = None,
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> str:
    """複数の PO / gettext JSON を1つにまとめて出力する

    同じ msgid（複数形は msgid_plural も）のエントリは最初のものを残します。

    Args:
        sources: (パス, 内容) の組を優先度の高い順に並べたもの
    """
    if unset_fuzzy and clear_fuzzy:
        raise ValueError("unset_fuzzy と clear_fuzzy は同時に指定できません")
    catalogs = [load_catalog(data, path, snippet_length) for path, data in sources]
    if not catalogs:
        raise ValueError("入力ファイルが指定されていません")
    merged = merge_catalogs(catalogs)
    if not merged.header_lines:
        # ヘッダーのない入力でも msgid "" のヘッダーを出力する
        merged = merged.model_copy(update={"header_lines": None})
    if entry_filter is not None:
        merged = merged.with_entries(filter_entries(merged.entries, entry_filter))
    merged = _apply_fuzzy_transform(merged, unset_fuzzy, clear_fuzzy)
    logger.info("%d件のファイルから %d件のエントリをまとめました", len(catalogs), len(merged))

    if output_json:
        return dumps_gettext_json(merged, indent=json_indent)
    return build_po(merged)


def compare(
    old_data: InputData,
    new_data: InputData,
    old_path: str = "",
    new_path: str = "",
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> Tuple[DiffStat, Catalog]:
    """2つのカタログを比較し、差分統計とレビュー用カタログを返す

    レビュー用カタログは新しいカタログのヘッダーと、追加・変更されたエントリを持ちます。
    """
    old = load_catalog(old_data, old_path, snippet_length)
    new = load_catalog(new_data, new_path, snippet_length)
    return review_catalog(old, new)


def compare_to_po(
    old_data: InputData,
    new_data: InputData,
    old_path: str = "",
    new_path: str = "",
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
) -> Tuple[DiffStat, str]:
    """比較結果のレビュー用カタログを PO テキストで返す（追加・変更がなければ空）"""
    stat, review = compare(old_data, new_data, old_path, new_path, snippet_length)
    if not review.entries:
        return stat, ""
    return stat, build_po(review)


def compare_to_json(
    old_data: InputData,
    new_data: InputData,
    old_path: str = "",
    new_path: str = "",
    snippet_length: int = DEFAULT_SNIPPET_LENGTH,
    json_indent: Optional[int] = None,
) -> Tuple[DiffStat, str]:
    """比較結果のレビュー用カタログを gettext JSON で返す（追加・変更がなくても出力する）"""
    stat, review = compare(old_data, new_data, old_path, new_path, snippet_length)
    return stat, dumps_gettext_json(review, indent=json_indent)
