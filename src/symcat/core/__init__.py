"""
Core primitives shared by every layer: errors, results, logging, settings.
"""

from symcat.core.errors import CatalogError, ErrorCategory, ErrorContext
from symcat.core.result import Err, Ok, Result, partition_results, try_result

__all__ = [
    "CatalogError",
    "ErrorCategory",
    "ErrorContext",
    "Ok",
    "Err",
    "Result",
    "try_result",
    "partition_results",
]
