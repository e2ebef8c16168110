"""PO / gettext テキストエンジンのコアモジュール"""
