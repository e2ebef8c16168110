"""フラグ行ユーティリティ

``#,`` で始まるフラグコメント行に含まれる ``fuzzy`` フラグを
検出・除去・付加するための関数群
"""

from typing import List, Sequence

from po_helper.core.constants import FLAG_PREFIX, FUZZY_FLAG


def is_flag_line(line: str) -> bool:
    """``#,`` で始まるフラグ行かどうか"""
    return line.strip().startswith(FLAG_PREFIX)


def split_flags(line: str) -> List[str]:
    """フラグ行からフラグのリストを取り出す（空要素は除く）"""
    flags_str = line.strip()[len(FLAG_PREFIX) :]
    return [flag.strip() for flag in flags_str.split(",") if flag.strip()]


def comment_has_fuzzy_flag(line: str) -> bool:
    """フラグ行に ``fuzzy`` が含まれるかどうか

    Args:
        line: コメント行（例: ``#, fuzzy, c-format``）

    Returns:
        ``fuzzy`` フラグを含むフラグ行であればTrue
    """
    if not is_flag_line(line):
        return False
    return FUZZY_FLAG in split_flags(line)


def comments_have_fuzzy_flag(comments: Sequence[str]) -> bool:
    """コメント行のいずれかに ``fuzzy`` フラグがあるかどうか"""
    return any(comment_has_fuzzy_flag(c) for c in comments)


def strip_fuzzy_from_flag_line(line: str) -> str:
    """フラグ行から ``fuzzy`` を取り除く

    Args:
        line: コメント行

    Returns:
        ``fuzzy`` を除いたフラグ行。他のフラグが残らない場合は空文字。
        フラグ行でない場合は元の行をそのまま返す。
    """
    if not is_flag_line(line):
        return line
    flags = [flag for flag in split_flags(line) if flag != FUZZY_FLAG]
    if not flags:
        return ""
    return "#, " + ", ".join(flags)


def merge_fuzzy_into_flag_line(line: str, add_fuzzy: bool) -> str:
    """フラグ行の先頭に ``fuzzy`` を付加する

    既存の ``fuzzy`` は重複させません。``add_fuzzy`` がFalseの場合、
    またはフラグ行でない場合は元の行をそのまま返します。
    """
    if not add_fuzzy or not is_flag_line(line):
        return line
    flags = [flag for flag in split_flags(line) if flag != FUZZY_FLAG]
    return ", ".join(["#, " + FUZZY_FLAG] + flags)


def strip_fuzzy_from_comments(comments: Sequence[str]) -> List[str]:
    """コメント列からfuzzyフラグを取り除き、空になった行を捨てる"""
    result: List[str] = []
    for comment in comments:
        stripped = strip_fuzzy_from_flag_line(comment)
        if stripped != "":
            result.append(stripped)
    return result
