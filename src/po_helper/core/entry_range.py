"""エントリ範囲の指定（``"3,5,9-13"``, ``"-5"``, ``"50-"``）の解析"""

import logging
from typing import Set

from po_helper.types import EntryIndexList

logger = logging.getLogger(__name__)


class EntryRangeError(ValueError):
    """範囲指定が不正な場合の例外"""

    def __init__(self, token: str, message: str) -> None:
        self.token = token
        super().__init__(f"{message}: {token}")


def _to_int(text: str, token: str, message: str) -> int:
    # ASCII数字のみ
    if not text.isascii() or not text.isdigit():
        raise EntryRangeError(token, message)
    return int(text)


def parse_entry_range(spec: str, max_entry: int) -> EntryIndexList:
    """範囲指定を解析し、選択された1始まりのインデックスを昇順で返す

    Args:
        spec: カンマ区切りの範囲指定。空文字列は全エントリ
        max_entry: エントリ数（フィルタ後）

    Returns:
        重複を除いた昇順のインデックス。1..max_entry の範囲外は黙って除外する

    Raises:
        EntryRangeError: 数値でないトークン、開始 > 終了、``-`` のみの指定
    """
    if spec.strip() == "":
        spec = "1-"

    selected: Set[int] = set()
    for token in spec.split(","):
        token = token.strip()
        if token == "":
            continue
        if "-" in token:
            start_text, end_text = (part.strip() for part in token.split("-", 1))
            if start_text == "" and end_text == "":
                raise EntryRangeError(token, "不正な範囲指定です")
            if start_text == "":
                start = 1
                end = _to_int(end_text, token, "不正な範囲の終了値です")
            elif end_text == "":
                start = _to_int(start_text, token, "不正な範囲の開始値です")
                end = max_entry
            else:
                start = _to_int(start_text, token, "不正な範囲の開始値です")
                end = _to_int(end_text, token, "不正な範囲の終了値です")
                if start > end:
                    raise EntryRangeError(token, "範囲の開始値が終了値より大きいです")
            selected.update(range(max(start, 1), min(end, max_entry) + 1))
        else:
            number = _to_int(token, token, "不正なエントリ番号です")
            if 1 <= number <= max_entry:
                selected.add(number)

    result = sorted(selected)
    logger.debug("範囲指定 %r: %d件を選択", spec, len(result))
    return result
