from __future__ import annotations

from po_helper.core.compare import diff_catalogs, review_catalog
from po_helper.core.parser import parse_po
from po_helper.models.catalog import Catalog
from po_helper.models.entry import Entry

OLD_PO = 'msgid "hello"\nmsgstr "你好"\n'


def test_added_entry():
    """新しいカタログにだけあるエントリは追加として数えられる"""
    new_po = OLD_PO + '\nmsgid "world"\nmsgstr "世界"\n'
    stat, review = diff_catalogs(parse_po(OLD_PO), parse_po(new_po))

    assert (stat.added, stat.changed, stat.deleted) == (1, 0, 0)
    assert [e.msgid for e in review] == ["world"]
    assert stat.summary() == "1 new"


def test_changed_and_deleted_entries():
    """内容が変わったエントリと削除されたエントリ"""
    old = Catalog(
        entries=[
            Entry(msgid="a", msgstr="A"),
            Entry(msgid="b", msgstr="B"),
            Entry(msgid="c", msgstr="C"),
        ]
    )
    new = Catalog(
        entries=[
            Entry(msgid="c", msgstr="C2"),
            Entry(msgid="a", msgstr="A"),
            Entry(msgid="d", msgstr="D"),
        ]
    )
    stat, review = diff_catalogs(old, new)

    assert (stat.added, stat.changed, stat.deleted) == (1, 1, 1)
    assert [e.msgid for e in review] == ["c", "d"]
    assert stat.summary() == "1 new, 1 removed, 1 changed"


def test_fuzzy_change_counts_as_changed():
    """fuzzy フラグだけの変更も変更として数えられる"""
    old = Catalog(entries=[Entry(msgid="a", msgstr="A", fuzzy=True)])
    new = Catalog(entries=[Entry(msgid="a", msgstr="A")])
    stat, _ = diff_catalogs(old, new)

    assert stat.changed == 1


def test_comment_change_is_ignored():
    """コメントだけの変更は差分にならない"""
    old = Catalog(entries=[Entry(msgid="a", msgstr="A", comments=["#: a.c:1"])])
    new = Catalog(entries=[Entry(msgid="a", msgstr="A", comments=["#: a.c:2"])])
    stat, review = diff_catalogs(old, new)

    assert stat.is_empty()
    assert review == []
    assert stat.summary() == "Nothing changed."


def test_obsolete_entries_are_ignored():
    """廃止エントリは比較の対象外"""
    old = parse_po('#~ msgid "x"\n#~ msgstr "y"\n')
    new = parse_po('msgid "x"\nmsgstr "y"\n')
    stat, review = diff_catalogs(old, new)

    assert (stat.added, stat.changed, stat.deleted) == (1, 0, 0)
    assert [e.msgid for e in review] == ["x"]


def test_review_catalog_keeps_new_header():
    """レビュー用カタログは新しいカタログのヘッダーを持つ"""
    old = parse_po('msgid ""\nmsgstr ""\n"Language: fr\\n"\n\nmsgid "a"\nmsgstr "A"\n')
    new = parse_po('msgid ""\nmsgstr ""\n"Language: de\\n"\n\nmsgid "a"\nmsgstr "B"\n')
    stat, review = review_catalog(old, new)

    assert stat.changed == 1
    assert review.header_meta == "Language: de\n"
    assert [e.msgstr for e in review.entries] == ["B"]
    assert len(new) == 1
