"""
Enums and constants for data models
"""
from enum import Enum


class SectionKind(Enum):
    """Independently addressable ordered sections of a CV"""
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    LANGUAGES = "languages"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    VOLUNTEERING = "volunteering"
    COURSES = "courses"
    MILITARY = "military"
    REFERENCES = "references"
    HOBBIES = "hobbies"
    LINKS = "links"
    GDPR = "gdpr"


class TemplateCategory(Enum):
    """Template catalog category"""
    FREE = "Free"
    BASIC = "Basic"
    PRO = "Pro"
    PREMIUM = "Premium"


class PurchaseStatus(Enum):
    """Purchase record status"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class SaveState(Enum):
    """Autosave state machine"""
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"


class ExportStatus(Enum):
    """Result of a user-initiated export"""
    DOWNLOADED = "downloaded"
    CHECKOUT = "checkout"
