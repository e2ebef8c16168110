"""LLM が出力した「ほぼ正しい」JSON の前処理

BOM の除去、Markdown コードブロックからの抽出、前後の余計な文章を除いた
``{...}`` オブジェクトの切り出しを行います。
"""

import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

_BOM = "\ufeff"
_FENCE = "```"


def find_matching_brace(text: str, start: int) -> int:
    """``text[start]`` の ``{`` に対応する ``}`` の位置を返す

    文字列リテラル内の括弧とエスケープは無視します。

    Returns:
        対応する ``}`` の位置。閉じていない場合は -1
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def extract_json_object(text: str) -> Optional[str]:
    """最初の ``{`` から対応する ``}`` までを切り出す"""
    start = text.find("{")
    if start < 0:
        return None
    end = find_matching_brace(text, start)
    if end < 0:
        return None
    return text[start : end + 1]


def extract_fenced_block(text: str) -> str:
    """Markdown のコードブロック（```json ... ```）の中身を取り出す

    コードブロックがなければ元の文字列を返します。
    """
    index = text.find(_FENCE)
    if index < 0:
        return text
    body = text[index + len(_FENCE) :]
    if body.startswith("json"):
        body = body[len("json") :]
    end = body.find(_FENCE)
    if end >= 0:
        body = body[:end]
    return body.strip()


def prepare_json_for_parse(data: Union[bytes, str]) -> str:
    """JSON 解析の前に典型的な崩れを修復する

    Args:
        data: JSON テキスト

    Returns:
        修復後の JSON テキスト（修復できなかった部分はそのまま）
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    text = data.strip()
    if text.startswith(_BOM):
        text = text[len(_BOM) :].strip()
    text = extract_fenced_block(text)
    extracted = extract_json_object(text)
    if extracted is not None:
        return extracted
    return text
