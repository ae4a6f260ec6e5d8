"""Domain models for the packing tracker.

This package contains the domain model classes used throughout the
application: orders, import results, error records and configuration.
"""

from .config_models import HeaderRules, TrackerConfig
from .error_record import ImportErrorRecord
from .import_result import ImportReport, SourceResult, SourceStatus
from .order import STATUS_LABELS, Header, Order, OrderStatus

__all__ = [
    # Configuration models
    "HeaderRules",
    "TrackerConfig",
    # Order models
    "Header",
    "Order",
    "OrderStatus",
    "STATUS_LABELS",
    # Import models
    "ImportErrorRecord",
    "ImportReport",
    "SourceResult",
    "SourceStatus",
]
