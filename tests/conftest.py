"""pytestの設定ファイル

テストで共通して使うフィクスチャを定義します。
"""

from pathlib import Path

import pytest

from po_helper.config import reset_config

DATA_DIR = Path(__file__).parent / "data"


def get_test_data_path(name: str) -> Path:
    """テストデータのパスを取得する"""
    return DATA_DIR / "po" / name


@pytest.fixture
def data_path():
    """テストデータのパスを返す関数のフィクスチャ"""
    return get_test_data_path


@pytest.fixture
def standard_po_bytes() -> bytes:
    """ヘッダーコメントと各状態のエントリを含むPOファイルの内容"""
    return get_test_data_path("standard.po").read_bytes()


@pytest.fixture
def mixed_state_po() -> str:
    """翻訳済み・未翻訳・ファジー・同一・廃止のエントリを1つずつ含むPO"""
    return (
        'msgid ""\n'
        'msgstr ""\n'
        '"Content-Type: text/plain; charset=UTF-8\\n"\n'
        "\n"
        'msgid "Apple"\n'
        'msgstr "Pomme"\n'
        "\n"
        'msgid "Banana"\n'
        'msgstr ""\n'
        "\n"
        "#, fuzzy\n"
        'msgid "Cherry"\n'
        'msgstr "Cerise"\n'
        "\n"
        'msgid "Date"\n'
        'msgstr "Date"\n'
        "\n"
        '#~ msgid "Elder"\n'
        '#~ msgstr "Sureau"\n'
    )


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """ユーザーの設定ファイルを読まないようにする"""
    monkeypatch.setenv("PO_HELPER_CONFIG", str(tmp_path / "po_helper_config.json"))
    reset_config()
    yield
    reset_config()
