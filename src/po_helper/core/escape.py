"""エスケープコーデック

PO文字列リテラルで使われるエスケープ（\\n \\t \\r \\" \\\\）の
エンコード・デコードと、JSONデコード済み文字列からPO形式への変換を提供します。
"""

from typing import List

# 実文字 -> POエスケープ
_ESCAPE_MAP = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}

# エスケープ文字 -> 実文字
_UNESCAPE_MAP = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}


def po_escape(s: str) -> str:
    """文字列をPOの引用符付き出力用にエスケープする

    Args:
        s: デコード済みの文字列

    Returns:
        POエスケープ済みの文字列
    """
    return "".join(_ESCAPE_MAP.get(ch, ch) for ch in s)


def po_unescape(s: str) -> str:
    """POエスケープシーケンスを実文字に戻す

    未知のシーケンス（例: ``\\a``）はバックスラッシュを残したままコピーします。
    """
    out: List[str] = []
    i = 0
    length = len(s)
    while i < length:
        ch = s[i]
        if ch == "\\" and i + 1 < length:
            decoded = _UNESCAPE_MAP.get(s[i + 1])
            if decoded is not None:
                out.append(decoded)
                i += 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def json_decoded_to_po_format(s: str) -> str:
    """JSONデコード済みの文字列をPOエスケープ形式に変換する

    LLMが二重エスケープした出力（``\\\\n`` がデコード後に ``\\n`` の2文字として残る）
    を許容するため、バックスラッシュ直後が n, t, r, ", \\ の場合は
    そのまま2文字のPOエスケープとして出力します。
    それ以外の単独バックスラッシュは ``\\\\`` として出力します。
    """
    out: List[str] = []
    i = 0
    length = len(s)
    while i < length:
        ch = s[i]
        if ch == "\\":
            if i + 1 < length and s[i + 1] in _UNESCAPE_MAP:
                out.append("\\" + s[i + 1])
                i += 2
                continue
            out.append("\\\\")
        else:
            out.append(_ESCAPE_MAP.get(ch, ch))
        i += 1
    return "".join(out)


def split_escaped_lines(s: str) -> List[str]:
    """POエスケープ済み文字列を ``\\n`` エスケープの直後で分割する

    ``str.split`` と同様に区切りの数 + 1 個の要素を返しますが、
    最後以外の要素は末尾の ``\\n`` を保持します。
    ``\\\\n``（エスケープされたバックスラッシュ + n）では分割しません。

    Example:
        ``"a\\nb"`` -> ``["a\\n", "b"]``、``"a\\n"`` -> ``["a\\n", ""]``
    """
    parts: List[str] = []
    start = 0
    i = 0
    length = len(s)
    while i < length:
        if s[i] == "\\" and i + 1 < length:
            if s[i + 1] == "n":
                parts.append(s[start : i + 2])
                start = i + 2
            i += 2
            continue
        i += 1
    parts.append(s[start:])
    return parts


def strip_quotes(s: str) -> str:
    """両端が引用符の場合のみ、先頭と末尾の引用符を1つずつ取り除く"""
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    return s
