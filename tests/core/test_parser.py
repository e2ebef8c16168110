"""POパーサーのテスト

パース結果の各フィールドと、パースしてそのまま出力した場合に
入力とバイト単位で一致することを確認します。
"""

from __future__ import annotations

from pathlib import Path

import pytest

from po_helper.core.parser import PoParser, parse_po, parse_po_entries, split_header
from po_helper.core.serializer import build_po

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "po"
DATA_FILES = ["standard.po", "multiline.po", "plural.po", "obsolete.po"]

INLINE_CASES = {
    "headerless_plural": (
        'msgid "%d file"\n'
        'msgid_plural "%d files"\n'
        'msgstr[0] "%d 个文件"\n'
        'msgstr[1] "%d 个文件"\n'
    ),
    "leading_blank_lines": (
        "\n"
        "\n"
        'msgid ""\n'
        'msgstr ""\n'
        '"X-Generator: test\\n"\n'
        "\n"
        'msgid "a"\n'
        'msgstr "b"\n'
    ),
    "blank_lines_in_header_comment": (
        "# Title\n"
        "\n"
        "# Another paragraph\n"
        'msgid ""\n'
        'msgstr ""\n'
        "\n"
        'msgid "a"\n'
        'msgstr "b"\n'
    ),
    "orphan_comment_block": (
        'msgid "a"\n'
        'msgstr "A"\n'
        "\n"
        "# translator note\n"
        "\n"
        "#: b.c:1\n"
        'msgid "b"\n'
        'msgstr "B"\n'
    ),
    "extra_blank_line_between_entries": (
        'msgid ""\n'
        'msgstr ""\n'
        "\n"
        'msgid "a"\n'
        'msgstr "A"\n'
        "\n"
        "\n"
        'msgid "b"\n'
        'msgstr "B"\n'
    ),
    "blank_line_before_comment_block": (
        'msgid ""\n'
        'msgstr ""\n'
        "\n"
        "\n"
        "# c\n"
        'msgid "a"\n'
        'msgstr "A"\n'
    ),
    "headerless_with_comments": (
        "# note\n"
        "#: a.c:1\n"
        'msgid "a"\n'
        'msgstr "b"\n'
    ),
    "msgctxt": (
        'msgctxt "menu"\n'
        'msgid "Open"\n'
        'msgstr "開く"\n'
    ),
    "crlf": (
        'msgid ""\r\n'
        'msgstr ""\r\n'
        "\r\n"
        'msgid "a"\r\n'
        'msgstr "b"\r\n'
    ),
}


def _corpus():
    cases = [
        pytest.param((DATA_DIR / name).read_text(encoding="utf-8"), id=name)
        for name in DATA_FILES
    ]
    cases.extend(pytest.param(text, id=name) for name, text in INLINE_CASES.items())
    return cases


@pytest.mark.parametrize("text", _corpus())
def test_round_trip_is_byte_identical(text):
    """パースしてそのまま出力すると入力と一致する"""
    assert build_po(parse_po(text)) == text


@pytest.mark.parametrize("text", _corpus())
def test_synthesized_output_is_stable(text):
    """元の行を捨てて正規化出力しても、再パース結果の構造は変わらない"""
    catalog = parse_po(text)
    for entry in catalog.entries:
        entry.invalidate_raw_lines()
    catalog.header_lines = None

    reparsed = parse_po(build_po(catalog))

    assert reparsed.structurally_equal(catalog)
    assert parse_po(build_po(reparsed)).structurally_equal(reparsed)


def test_standard_header_is_split(standard_po_bytes):
    """ヘッダーコメントとメタデータに分割される"""
    catalog = parse_po(standard_po_bytes)

    assert catalog.header_comment == (
        "# SOME DESCRIPTIVE TITLE.\n"
        "# Copyright (C) YEAR THE PACKAGE'S COPYRIGHT HOLDER\n"
        "#\n"
    )
    assert catalog.header_meta == (
        "Project-Id-Version: demo 1.0\n"
        "Language: zh_CN\n"
        "Content-Type: text/plain; charset=UTF-8\n"
        "Plural-Forms: nplurals=1; plural=0;\n"
    )


def test_standard_entries(standard_po_bytes):
    """各エントリのフィールドが取り出される"""
    entries, header_lines = parse_po_entries(standard_po_bytes)

    assert [e.msgid for e in entries] == ["Hello", "Open %s", "Quit", "Save %s", "OK"]
    assert entries[0].msgstr == "你好"
    assert entries[1].comments == ["#: src/main.c:20", "#, c-format"]
    assert entries[2].msgstr == ""
    assert entries[3].fuzzy is True
    assert all(not e.fuzzy for i, e in enumerate(entries) if i != 3)
    assert header_lines[-1] == ""


def test_multiline_values_are_joined(data_path):
    """継続行は連結され、エスケープはそのまま保持される"""
    catalog = parse_po(data_path("multiline.po").read_bytes())
    first, second, third = catalog.entries

    assert first.msgid == "Line one\\nLine two\\n"
    assert first.msgstr == "第一行\\n第二行\\n"
    assert first.comments == ["#. Shown in the about dialog", "#: src/about.c:12"]
    assert second.msgid == 'Say \\"hi\\"\\tnow'
    assert third.msgid == "Path: C:\\\\Temp\\nDone"


def test_plural_entries(data_path):
    """複数形エントリ"""
    catalog = parse_po(data_path("plural.po").read_bytes())
    files, folders = catalog.entries

    assert files.msgid_plural == "%d files"
    assert files.msgstr_plural == ["%d fichier", "%d fichiers"]
    assert files.msgstr == ""
    assert folders.msgstr_plural == ["", ""]
    assert folders.is_untranslated()


def test_obsolete_entries(data_path):
    """廃止エントリと #~| による以前の msgid"""
    catalog = parse_po(data_path("obsolete.po").read_bytes())
    current, removed, old, multi = catalog.entries

    assert not current.obsolete
    assert removed.obsolete
    assert removed.msgstr == "Supprimé"
    assert old.obsolete
    assert old.fuzzy
    assert old.msgid_previous == "Older text"
    assert old.msgid == "Old text"
    assert multi.obsolete
    assert multi.msgid == "Multi\\nline"


def test_previous_msgid_starts_new_entry():
    """空行がなくても #~| は新しいエントリを開始する"""
    text = (
        'msgid "a"\n'
        'msgstr "A"\n'
        '#~| msgid "old"\n'
        '#~ msgid "b"\n'
        '#~ msgstr "B"\n'
    )
    entries, _ = parse_po_entries(text)

    assert len(entries) == 2
    assert not entries[0].obsolete
    assert entries[1].obsolete
    assert entries[1].msgid_previous == "old"


def test_obsolete_flag_does_not_leak_to_next_entry():
    """廃止エントリの後の通常エントリは廃止扱いにならない"""
    text = '#~ msgid "x"\n#~ msgstr "y"\n\nmsgid "z"\nmsgstr "w"\n'
    entries, _ = parse_po_entries(text)

    assert [e.obsolete for e in entries] == [True, False]


def test_comment_after_complete_entry_starts_new_entry():
    """内容のあるエントリの後のコメントは次のエントリに属する"""
    text = 'msgid "a"\nmsgstr "A"\n#: b.c:2\nmsgid "b"\nmsgstr "B"\n'
    entries, _ = parse_po_entries(text)

    assert len(entries) == 2
    assert entries[0].comments == []
    assert entries[1].comments == ["#: b.c:2"]


def test_final_entry_without_trailing_newline():
    """末尾に改行のない最後のエントリも確定される"""
    text = 'msgid ""\nmsgstr ""\n\nmsgid "a"\nmsgstr "A"'
    catalog = parse_po(text)

    assert len(catalog) == 1
    assert catalog.entries[0].msgstr == "A"
    assert build_po(catalog) == text + "\n"


def test_extra_blank_lines_travel_with_next_entry():
    """エントリ間の余分な空行は次のエントリの元の行に残り、コメントには入らない"""
    entries, _ = parse_po_entries(INLINE_CASES["blank_line_before_comment_block"])

    assert entries[0].raw_lines == ["", "# c", 'msgid "a"', 'msgstr "A"']
    assert entries[0].comments == ["# c"]

    entries, _ = parse_po_entries(INLINE_CASES["extra_blank_line_between_entries"])
    assert [e.msgid for e in entries] == ["a", "b"]
    assert entries[1].raw_lines[0] == ""


def test_trailing_blank_lines_are_not_entries():
    """末尾の空行だけではエントリにならない"""
    text = 'msgid "a"\nmsgstr "A"\n\n\n'
    catalog = parse_po(text)

    assert len(catalog) == 1
    assert build_po(catalog, trailing_newline=True) == 'msgid "a"\nmsgstr "A"\n\n'


def test_header_followed_by_entry_without_blank_line():
    """ヘッダーの直後に空行なしでエントリが続く場合"""
    text = 'msgid ""\nmsgstr ""\n"Language: fr\\n"\nmsgid "a"\nmsgstr "A"\n'
    catalog = parse_po(text)

    assert catalog.header_meta == "Language: fr\n"
    assert [e.msgid for e in catalog.entries] == ["a"]


def test_headerless_file_has_no_header_lines():
    """ヘッダーがない場合、コメントは最初のエントリに移る"""
    entries, header_lines = parse_po_entries(INLINE_CASES["headerless_with_comments"])

    assert header_lines == []
    assert entries[0].comments == ["# note", "#: a.c:1"]
    assert split_header(header_lines) == ("", "")


def test_fuzzy_detected_only_in_flag_lines():
    """fuzzy は #, 行のフラグとしてのみ認識される"""
    text = (
        "#, c-format, fuzzy\n"
        'msgid "a"\n'
        'msgstr "A"\n'
        "\n"
        "# fuzzy\n"
        'msgid "b"\n'
        'msgstr "B"\n'
    )
    entries, _ = parse_po_entries(text)

    assert entries[0].fuzzy is True
    assert entries[1].fuzzy is False


def test_msgstr_plural_index_gap_is_filled():
    """飛ばされた複数形インデックスは空文字列で埋められる"""
    text = 'msgid "a"\nmsgid_plural "as"\nmsgstr[2] "x"\n'
    entries, _ = parse_po_entries(text)

    assert entries[0].msgstr_plural == ["", "", "x"]


def test_invalid_utf8_is_preserved():
    """不正なUTF-8バイトも出力で元に戻る"""
    data = b'# \xff\xfe\nmsgid "a"\nmsgstr "b"\n'
    output = build_po(parse_po(data))

    assert output.encode("utf-8", errors="surrogateescape") == data


@pytest.mark.parametrize(
    "text",
    [
        '"orphan continuation"\nmsgstr[x] "?"\n#~\n',
        'msgid "a"\nmsgstr[abc "x"\n"dangling"\n',
        'msgid "unterminated\nmsgstr\n\n\n#~| msgid\n',
        "",
        "\n\n\n",
    ],
)
def test_malformed_input_does_not_raise(text):
    """不正な入力でも例外を送出しない"""
    catalog = parse_po(text)
    assert isinstance(catalog.entries, list)


def test_parser_instance_is_reusable():
    """同じパーサーで複数回パースしても状態が残らない"""
    parser = PoParser()
    first, _ = parser.parse('msgid "a"\nmsgstr "A"\n')
    second, header = parser.parse('msgid ""\nmsgstr ""\n\nmsgid "b"\nmsgstr "B"\n')

    assert [e.msgid for e in first] == ["a"]
    assert [e.msgid for e in second] == ["b"]
    assert header == ['msgid ""', 'msgstr ""', ""]
