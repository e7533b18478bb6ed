"""Domain models for the Excel -> vCard converter.

This package contains the domain model classes shared by the classifier,
extractor, serializer and orchestrator.
"""

from .config_models import ConvertConfig, SheetConfig
from .contact_record import ContactRecord, PhoneEntry
from .conversion_result import ConversionResult, SheetStat
from .field_slot import PHONE_SLOTS, ColumnMapping, FieldSlot, PhoneLabel
from .sheet import Sheet

__all__ = [
    # Configuration models
    "ConvertConfig",
    "SheetConfig",
    # Core models
    "ColumnMapping",
    "ContactRecord",
    "FieldSlot",
    "PHONE_SLOTS",
    "PhoneEntry",
    "PhoneLabel",
    "Sheet",
    # Result models
    "ConversionResult",
    "SheetStat",
]
