"""
Models package - CV document, section kinds, template catalog and entitlements
"""
from cvstudio.models.cv_document import (
    CVData,
    CVDocument,
    PersonalInfo,
    StyleSettings,
    SECTION_MODELS,
    new_section_item,
)
from cvstudio.models.catalog import Template, Purchase, Entitlement
from cvstudio.models.enums import (
    SectionKind,
    TemplateCategory,
    PurchaseStatus,
    SaveState,
    ExportStatus,
)

__all__ = [
    # Document models
    'CVData',
    'CVDocument',
    'PersonalInfo',
    'StyleSettings',
    'SECTION_MODELS',
    'new_section_item',
    # Catalog models
    'Template',
    'Purchase',
    'Entitlement',
    # Enums
    'SectionKind',
    'TemplateCategory',
    'PurchaseStatus',
    'SaveState',
    'ExportStatus',
]
