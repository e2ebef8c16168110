"""定数定義モジュール

このモジュールは、PO/gettextエンジン全体で使用される定数を定義します。
"""

from enum import Enum


class EntryState(str, Enum):
    """エントリの翻訳状態を表す列挙型"""

    TRANSLATED = "translated"
    UNTRANSLATED = "untranslated"
    FUZZY = "fuzzy"
    SAME = "same"
    OBSOLETE = "obsolete"


# 状態の表示順序
ENTRY_STATE_ORDER = [
    EntryState.TRANSLATED,
    EntryState.FUZZY,
    EntryState.UNTRANSLATED,
    EntryState.SAME,
    EntryState.OBSOLETE,
]

# POキーワード
KEYWORD_MSGID = "msgid"
KEYWORD_MSGID_PLURAL = "msgid_plural"
KEYWORD_MSGSTR = "msgstr"

# 行プレフィックス
OBSOLETE_PREFIX = "#~ "
PREVIOUS_MSGID_PREFIX = "#~| "
FLAG_PREFIX = "#,"
FUZZY_FLAG = "fuzzy"

# マージキーの区切り文字
MERGE_KEY_SEPARATOR = "\x00"
