from __future__ import annotations

from po_helper.core.serializer import (
    build_po,
    build_po_content,
    format_keyword_lines,
    synthesize_entry_lines,
    synthesize_header_lines,
)
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry


def test_format_keyword_lines_single_line():
    """改行を含まない値は1行で出力される"""
    assert format_keyword_lines("", "msgid", "Hello") == ['msgid "Hello"']


def test_format_keyword_lines_multi_line():
    """\\n を含む値は空の先頭行と継続行に分割される"""
    assert format_keyword_lines("#~ ", "msgstr", "a\\nb\\n") == [
        '#~ msgstr ""',
        '#~ "a\\n"',
        '#~ "b\\n"',
    ]


def test_simple_entry():
    """コメントのない通常エントリ"""
    entry = Entry(msgid="Hello", msgstr="Bonjour")
    assert synthesize_entry_lines(entry) == ['msgid "Hello"', 'msgstr "Bonjour"']


def test_fuzzy_added_without_flag_line():
    """フラグ行がない fuzzy エントリには #, fuzzy が追加される"""
    entry = Entry(msgid="a", msgstr="b", comments=["#: a.c:1"], fuzzy=True)
    assert synthesize_entry_lines(entry) == [
        "#: a.c:1",
        "#, fuzzy",
        'msgid "a"',
        'msgstr "b"',
    ]


def test_fuzzy_merged_into_existing_flag_line():
    """既存のフラグ行には fuzzy が先頭に付加される"""
    entry = Entry(msgid="a", comments=["#, c-format"], fuzzy=True)
    assert synthesize_entry_lines(entry)[0] == "#, fuzzy, c-format"


def test_fuzzy_flag_removed_when_not_fuzzy():
    """fuzzy でないエントリのフラグ行から fuzzy を取り除く"""
    entry = Entry(msgid="a", comments=["#, fuzzy", "#, fuzzy, python-format"])
    assert synthesize_entry_lines(entry) == [
        "#, python-format",
        'msgid "a"',
        'msgstr ""',
    ]


def test_obsolete_entry_with_previous_msgid():
    """廃止エントリは #~ 付きで、以前の msgid は #~| で出力される"""
    entry = Entry(msgid="new", msgstr="x", obsolete=True, msgid_previous="old")
    assert synthesize_entry_lines(entry) == [
        '#~| msgid "old"',
        '#~ msgid "new"',
        '#~ msgstr "x"',
    ]


def test_plural_entry():
    """複数形エントリは msgstr[N] で出力される"""
    entry = Entry(msgid="%d file", msgid_plural="%d files", msgstr_plural=["un", "deux"])
    assert synthesize_entry_lines(entry) == [
        'msgid "%d file"',
        'msgid_plural "%d files"',
        'msgstr[0] "un"',
        'msgstr[1] "deux"',
    ]


def test_plural_entry_without_translations():
    """msgstr_plural が空の複数形エントリは msgstr で出力される"""
    entry = Entry(msgid="%d file", msgid_plural="%d files")
    assert synthesize_entry_lines(entry)[-1] == 'msgstr ""'


def test_raw_lines_are_written_verbatim():
    """raw_lines があればそのまま出力される"""
    entry = Entry(msgid="a", raw_lines=["#   odd spacing", 'msgid   "a"', 'msgstr "A"'])
    assert build_po_content(None, [entry]) == '#   odd spacing\nmsgid   "a"\nmsgstr "A"\n'


def test_synthesize_header_lines():
    """ヘッダーコメントとメタデータからヘッダー行を作る"""
    lines = synthesize_header_lines(
        "# Title\n", 'Content-Type: text/plain; charset=UTF-8\nX-Note: "q"\n'
    )
    assert lines == [
        "# Title",
        'msgid ""',
        'msgstr ""',
        '"Content-Type: text/plain; charset=UTF-8\\n"',
        '"X-Note: \\"q\\"\\n"',
    ]


def test_build_po_synthesized_header():
    """ヘッダー行がない場合はヘッダーを組み立て、空行で区切る"""
    catalog = Catalog(entries=[Entry(msgid="a", msgstr="b")])
    assert build_po(catalog) == 'msgid ""\nmsgstr ""\n\nmsgid "a"\nmsgstr "b"\n'


def test_build_po_trailing_newline():
    """trailing_newline を指定すると最後に空行が付く"""
    catalog = Catalog(entries=[Entry(msgid="a", msgstr="b")])
    assert build_po(catalog, no_header=True, trailing_newline=True) == (
        'msgid "a"\nmsgstr "b"\n\n'
    )


def test_build_po_entries_separated_by_blank_line():
    """エントリ同士は空行1つで区切られる"""
    catalog = Catalog(entries=[Entry(msgid="a", msgstr="b"), Entry(msgid="c", msgstr="d")])
    assert build_po(catalog, no_header=True) == (
        'msgid "a"\nmsgstr "b"\n\nmsgid "c"\nmsgstr "d"\n'
    )


def test_build_po_verbatim_header_without_blank():
    """空行で終わらない元のヘッダー行の後には区切りの空行が入る"""
    catalog = Catalog(
        header_lines=['msgid ""', 'msgstr ""'],
        entries=[Entry(msgid="a", msgstr="b")],
    )
    assert build_po(catalog) == 'msgid ""\nmsgstr ""\n\nmsgid "a"\nmsgstr "b"\n'


def test_build_po_header_only():
    """エントリがない場合はヘッダーのみ（区切りの空行なし）"""
    catalog = Catalog(header_meta="Language: de\n")
    assert build_po(catalog) == 'msgid ""\nmsgstr ""\n"Language: de\\n"\n'


def test_build_po_empty():
    """ヘッダーもエントリもなければ空文字列"""
    assert build_po(Catalog(), no_header=True) == ""
    assert build_po_content([], [], trailing_newline=True) == ""
