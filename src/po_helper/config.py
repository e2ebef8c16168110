"""設定モジュール

このモジュールは、po-helper の設定を管理します。
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# デフォルト設定
DEFAULT_CONFIG: Dict[str, Any] = {
    # 出力の設定
    "output": {
        # PO 入力を PO で出力する際、最後のエントリの後に空行を付けるか
        # （null の場合は入力形式から判定）
        "trailing_newline": None,
        # JSON 出力のインデント（null は1行）
        "json_indent": None,
    },
    # gettext JSON の設定
    "json": {
        # 解析エラー時に表示する内容の最大バイト数
        "snippet_length": 800,
    },
    # フィルタの設定
    "filter": {
        # 廃止エントリをデフォルトで含めるか
        "with_obsolete": True,
    },
}

CONFIG_ENV_VAR = "PO_HELPER_CONFIG"


class Config:
    """設定クラス"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """初期化

        Args:
            config_path: 設定ファイルのパス。省略時は環境変数またはユーザー設定ディレクトリ
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._config_path = Path(config_path) if config_path else self._get_config_path()
        self._load_config()

    @property
    def path(self) -> Path:
        return self._config_path

    def _get_config_path(self) -> Path:
        """設定ファイルのパスを取得"""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)

        home_dir = Path.home()

        # プラットフォームに応じた設定ディレクトリ
        if os.name == "nt":  # Windows
            config_dir = home_dir / "AppData" / "Roaming" / "po_helper"
        else:  # macOS, Linux
            config_dir = home_dir / ".config" / "po_helper"

        return config_dir / "config.json"

    def _load_config(self) -> None:
        """設定ファイルを読み込む"""
        if not self._config_path.exists():
            logger.debug(
                "設定ファイルが見つかりません。デフォルト設定を使用します: %s",
                self._config_path,
            )
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("設定ファイルの読み込みに失敗しました: %s", e)
            return

        if not isinstance(loaded_config, dict):
            logger.error("設定ファイルの形式が不正です: %s", self._config_path)
            return

        # 読み込んだ設定をデフォルト設定にマージ
        self._merge_config(self._config, loaded_config)
        logger.info("設定ファイルを読み込みました: %s", self._config_path)

    def save(self) -> None:
        """設定ファイルを保存する"""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=4, ensure_ascii=False)
            logger.info("設定ファイルを保存しました: %s", self._config_path)
        except OSError as e:
            logger.error("設定ファイルの保存に失敗しました: %s", e)

    def _merge_config(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        """設定を再帰的にマージする

        Args:
            target: マージ先の辞書
            source: マージ元の辞書
        """
        for key, value in source.items():
            if (
                key in target
                and isinstance(target[key], dict)
                and isinstance(value, dict)
            ):
                # 両方が辞書の場合は再帰的にマージ
                self._merge_config(target[key], value)
            else:
                target[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得する

        Args:
            key: 設定キー（ドット区切りで階層指定可能）
            default: デフォルト値

        Returns:
            設定値
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """設定値を設定する

        Args:
            key: 設定キー（ドット区切りで階層指定可能）
            value: 設定値
            save: Trueの場合はファイルに保存する
        """
        keys = key.split(".")
        target = self._config

        for k in keys[:-1]:
            if not isinstance(target.get(k), dict):
                target[k] = {}
            target = target[k]

        target[keys[-1]] = value

        if save:
            self.save()

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)


# シングルトンインスタンス
_config_instance: Optional[Config] = None


def get_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """設定インスタンスを取得する

    Args:
        config_path: 設定ファイルのパス。指定した場合はインスタンスを作り直す

    Returns:
        Config: 設定インスタンス
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        _config_instance = Config(config_path)

    return _config_instance


def reset_config() -> None:
    """シングルトンインスタンスを破棄する（主にテスト用）"""
    global _config_instance
    _config_instance = None
