"""
Capture Module

Front-end facing helpers: barcode polling and OCR text cleanup.
"""

from bookish.capture.scanner import BarcodeScanner, BarcodeSource
from bookish.capture.ocr_text import (
    TextQuery,
    clean_ocr_line,
    clean_author_line,
    find_isbn,
)

__all__ = [
    "BarcodeScanner",
    "BarcodeSource",
    "TextQuery",
    "clean_ocr_line",
    "clean_author_line",
    "find_isbn",
]
