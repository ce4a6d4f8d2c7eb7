"""Spreadsheet export read path."""

from .client import SpreadsheetExportClient

__all__ = ["SpreadsheetExportClient"]
