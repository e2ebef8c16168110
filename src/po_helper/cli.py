"""コマンドラインインターフェース"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from po_helper import __version__
from po_helper.config import Config, get_config
from po_helper.core.constants import ENTRY_STATE_ORDER, EntryState
from po_helper.core.entry_filter import EntryStateFilter
from po_helper.core.gettext_json import DEFAULT_SNIPPET_LENGTH
from po_helper.core.select import (
    compare_to_json,
    compare_to_po,
    load_catalog,
    msg_cat,
    msg_select,
)
from po_helper.core.stats import count_report_stats
from po_helper.types import InputData

logger = logging.getLogger(__name__)

console = Console()


def _read_input(path: str) -> bytes:
    """ファイル（``-`` は標準入力）の内容を読み込む"""
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _write_output(text: str, output: Optional[str]) -> None:
    """出力先（省略時と ``-`` は標準出力）に書き込む"""
    data = text.encode("utf-8", errors="surrogateescape")
    if output is None or output == "-":
        sys.stdout.flush()
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    Path(output).write_bytes(data)
    logger.info("出力しました: %s", output)


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("状態フィルタ")
    group.add_argument("--translated", action="store_true", help="翻訳済みエントリを選択")
    group.add_argument("--untranslated", action="store_true", help="未翻訳エントリを選択")
    group.add_argument("--fuzzy", action="store_true", help="ファジーエントリを選択")
    group.add_argument(
        "--with-obsolete", action="store_true", help="廃止エントリを含める（デフォルト）"
    )
    group.add_argument("--no-obsolete", action="store_true", help="廃止エントリを除外")
    group.add_argument(
        "--only-same", action="store_true", help="訳文が原文と同じエントリのみ"
    )
    group.add_argument("--only-obsolete", action="store_true", help="廃止エントリのみ")

    fuzzy_group = parser.add_mutually_exclusive_group()
    fuzzy_group.add_argument(
        "--unset-fuzzy",
        action="store_true",
        help="fuzzyフラグを外す（訳文は保持）",
    )
    fuzzy_group.add_argument(
        "--clear-fuzzy",
        action="store_true",
        help="fuzzyエントリの訳文を空にしてfuzzyフラグを外す",
    )


def _build_filter(args: argparse.Namespace, config: Config) -> EntryStateFilter:
    """コマンドライン引数から状態フィルタを作成する"""
    with_obsolete = args.with_obsolete or bool(config.get("filter.with_obsolete", True))
    return EntryStateFilter(
        translated=args.translated,
        untranslated=args.untranslated,
        fuzzy=args.fuzzy,
        with_obsolete=with_obsolete,
        no_obsolete=args.no_obsolete,
        only_same=args.only_same,
        only_obsolete=args.only_obsolete,
    )


def _json_indent(config: Config) -> Optional[int]:
    indent = config.get("output.json_indent")
    return indent if isinstance(indent, int) else None


def _snippet_length(config: Config) -> int:
    length = config.get("json.snippet_length", DEFAULT_SNIPPET_LENGTH)
    return length if isinstance(length, int) else DEFAULT_SNIPPET_LENGTH


def cmd_msg_select(args: argparse.Namespace, config: Config) -> int:
    data = _read_input(args.file)
    trailing_newline = config.get("output.trailing_newline")
    text = msg_select(
        data,
        args.range,
        entry_filter=_build_filter(args, config),
        output_json=args.json,
        no_header=args.no_header,
        unset_fuzzy=args.unset_fuzzy,
        clear_fuzzy=args.clear_fuzzy,
        trailing_newline=trailing_newline if isinstance(trailing_newline, bool) else None,
        json_indent=_json_indent(config),
        path=args.file,
        snippet_length=_snippet_length(config),
    )
    _write_output(text, args.output)
    return 0


def cmd_msg_cat(args: argparse.Namespace, config: Config) -> int:
    sources = [(path, _read_input(path)) for path in args.files]
    text = msg_cat(
        sources,
        entry_filter=_build_filter(args, config),
        output_json=args.json,
        unset_fuzzy=args.unset_fuzzy,
        clear_fuzzy=args.clear_fuzzy,
        json_indent=_json_indent(config),
        snippet_length=_snippet_length(config),
    )
    _write_output(text, args.output)
    return 0


def cmd_compare(args: argparse.Namespace, config: Config) -> int:
    old_data = _read_input(args.old)
    new_data = _read_input(args.new)
    if args.json:
        stat, text = compare_to_json(
            old_data,
            new_data,
            args.old,
            args.new,
            _snippet_length(config),
            json_indent=_json_indent(config),
        )
    else:
        stat, text = compare_to_po(
            old_data, new_data, args.old, args.new, _snippet_length(config)
        )

    if stat.is_empty():
        print(stat.summary(), file=sys.stderr)
    else:
        print(stat.summary())

    if args.output:
        _write_output(text, args.output)
    return 0


# 状態ごとの列の表示スタイル
_STATE_STYLES = {
    EntryState.TRANSLATED: "green",
    EntryState.FUZZY: "yellow",
    EntryState.UNTRANSLATED: "red",
}


def cmd_stat(args: argparse.Namespace, config: Config) -> int:
    results = []
    for path in args.files:
        data: InputData = _read_input(path)
        catalog = load_catalog(data, path, _snippet_length(config))
        results.append((path, count_report_stats(catalog)))

    if args.msgfmt or args.oneline:
        for path, stats in results:
            line = stats.format_msgfmt() if args.msgfmt else stats.format_line()
            if len(results) > 1:
                line = f"{path}: {line}"
            print(line)
        return 0

    table = Table(title="翻訳統計")
    table.add_column("ファイル", style="cyan")
    for state in ENTRY_STATE_ORDER:
        table.add_column(state.value, justify="right", style=_STATE_STYLES.get(state))
    table.add_column("進捗率", justify="right")
    for path, stats in results:
        table.add_row(
            path,
            *(str(stats[state.value]) for state in ENTRY_STATE_ORDER),
            f"{stats.progress:.1f}%",
        )
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成する"""
    parser = argparse.ArgumentParser(
        prog="po-helper", description="PO / gettext JSON カタログの操作ツール"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="デバッグログを出力")
    parser.add_argument("--config", help="設定ファイルのパス")
    subparsers = parser.add_subparsers(dest="command", required=True)

    select_parser = subparsers.add_parser(
        "msg-select", help="状態と範囲でエントリを選択して出力"
    )
    select_parser.add_argument("file", help="入力ファイル（PO / POT / JSON、- は標準入力）")
    select_parser.add_argument(
        "--range", default="", help='範囲指定（例: "3,5,9-13", "-5", "50-"）'
    )
    select_parser.add_argument("-o", "--output", help="出力ファイル（省略時は標準出力）")
    select_parser.add_argument("--json", action="store_true", help="gettext JSON で出力")
    select_parser.add_argument("--no-header", action="store_true", help="ヘッダーを出力しない")
    _add_filter_arguments(select_parser)
    select_parser.set_defaults(func=cmd_msg_select)

    cat_parser = subparsers.add_parser("msg-cat", help="複数のファイルをまとめて出力")
    cat_parser.add_argument("files", nargs="+", help="入力ファイル（先に指定したものを優先）")
    cat_parser.add_argument("-o", "--output", help="出力ファイル（省略時は標準出力）")
    cat_parser.add_argument("--json", action="store_true", help="gettext JSON で出力")
    _add_filter_arguments(cat_parser)
    cat_parser.set_defaults(func=cmd_msg_cat)

    compare_parser = subparsers.add_parser("compare", help="2つのファイルの差分を表示")
    compare_parser.add_argument("old", help="古いファイル")
    compare_parser.add_argument("new", help="新しいファイル")
    compare_parser.add_argument(
        "-o", "--output", help="追加・変更されたエントリの出力先"
    )
    compare_parser.add_argument(
        "--json", action="store_true", help="レビュー用出力を gettext JSON にする"
    )
    compare_parser.set_defaults(func=cmd_compare)

    stat_parser = subparsers.add_parser("stat", help="状態ごとのエントリ数を表示")
    stat_parser.add_argument("files", nargs="+", help="入力ファイル")
    output_group = stat_parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--oneline", action="store_true", help="1行の要約で表示"
    )
    output_group.add_argument(
        "--msgfmt", action="store_true", help="msgfmt --statistics と同じ形式で表示"
    )
    stat_parser.set_defaults(func=cmd_stat)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """コマンドラインインターフェースのエントリポイント"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = get_config(args.config)
    try:
        return args.func(args, config)
    except (ValueError, OSError) as e:
        print(f"エラー: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
