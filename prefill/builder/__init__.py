"""
Builder Module

Turns imported spreadsheet values into generated artifacts:
- ValueListNormalizer: delimiter splitting, broadcast and padding
- CombinationAssembler: index-wise (or row-wise) combination assembly
- LinkBuilder: pre-filled form URLs
- PayloadBuilder: letter parameter maps
- ExportTableBuilder: results table projection
"""

from .value_lists import ValueListNormalizer, split_values, DEFAULT_VALUES_DELIMITER
from .combinations import CombinationAssembler
from .link_builder import LinkBuilder, url_encode
from .payload_builder import PayloadBuilder
from .export_table import ExportTableBuilder

__all__ = [
    "ValueListNormalizer",
    "CombinationAssembler",
    "LinkBuilder",
    "PayloadBuilder",
    "ExportTableBuilder",
    "split_values",
    "url_encode",
    "DEFAULT_VALUES_DELIMITER",
]
