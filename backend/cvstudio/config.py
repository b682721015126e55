"""
Application configuration - all constants, environment variables, and config dictionaries
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ========================================
# Collaborator API
# ========================================
CV_API_BASE_URL = os.getenv("CV_API_BASE_URL", "http://localhost:5000/api")
CV_API_TOKEN = os.getenv("CV_API_TOKEN")
CV_API_TIMEOUT = float(os.getenv("CV_API_TIMEOUT", "30"))
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
FLASK_SECRET = os.getenv("FLASK_SECRET", "dev")

# Comma separated; the client URL is always allowed
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

# ========================================
# Logging
# ========================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_VALUE_MAX_LENGTH = int(os.getenv("LOG_VALUE_MAX_LENGTH", "200"))

# ========================================
# Editor Behaviour
# ========================================
AUTOSAVE_DELAY_SECONDS = float(os.getenv("AUTOSAVE_DELAY_SECONDS", "3.0"))

# A4 at 96 DPI, same unit system as the rendered preview
PAGE_WIDTH_PX = int(os.getenv("PAGE_WIDTH_PX", "794"))
PAGE_HEIGHT_PX = int(os.getenv("PAGE_HEIGHT_PX", "1123"))
PAGE_PROBE_OFFSET_PX = int(os.getenv("PAGE_PROBE_OFFSET_PX", "100"))
THUMBNAIL_SCALE = float(os.getenv("THUMBNAIL_SCALE", "0.25"))

_config_dir = os.path.dirname(os.path.abspath(__file__))  # backend/cvstudio/
_backend_dir = os.path.dirname(_config_dir)  # backend/
_project_root = os.path.dirname(_backend_dir)  # project root/
AI_CACHE_PATH = os.getenv("AI_CACHE_PATH", os.path.join(_project_root, "jt_ai_cache.json"))
DOWNLOAD_DIR = os.getenv("DOWNLOAD_DIR", os.path.join(_project_root, "downloads"))

# ========================================
# Render Service Rate Limits
# ========================================
RENDER_RATE_LIMIT = os.getenv("RENDER_RATE_LIMIT", "30 per minute")
DEFAULT_RATE_LIMITS = ["200 per day", "50 per hour"]

# ========================================
# Document Defaults
# ========================================
DEFAULT_TITLE = "Untitled CV"
NEW_DOCUMENT_TITLE = "New CV"
DEFAULT_TEMPLATE_KEY = "modern"
DEFAULT_THEME_COLOR = "#2563eb"

DEFAULT_SETTINGS = {
    'themeColor': DEFAULT_THEME_COLOR,
    'font': 'Inter',
    'lineSpacing': 100,
    'fontSize': 100,
}

PRESET_COLORS = [
    '#2563eb', '#dc2626', '#16aec0', '#7c3aed', '#db2777', '#f59e0b', '#10b981', '#1f2937'
]

GDPR_CONSENT_TEXT = (
    "I hereby give consent for my personal data included in the application to be processed "
    "for the purposes of the recruitment process in accordance with Art. 6 paragraph 1 letter a "
    "of the Regulation of the European Parliament and of the Council (EU) 2016/679 of 27 April 2016 "
    "on the protection of natural persons with regard to the processing of personal data and on the "
    "free movement of such data, and repealing Directive 95/46/EC (General Data Protection Regulation)."
)

# ========================================
# Template Catalog
# ========================================
# Categories that require an entitlement before export
RESTRICTED_CATEGORIES = {'Pro', 'Premium'}

# Days a one-time Pro purchase stays downloadable
PRO_PURCHASE_WINDOW_DAYS = 7

TEMPLATE_CONFIGS = {
    'modern': {
        'name': 'Modern ATS-Friendly',
        'accent_color': '#2563eb',
        'font': 'Helvetica',
    },
    'classic': {
        'name': 'Classic Professional',
        'accent_color': '#2563eb',
        'font': 'Times-Roman',
    },
    'professional_blue': {
        'name': 'Creative Executive',
        'accent_color': '#2563eb',
        'font': 'Helvetica',
    },
    'elegant': {
        'name': 'Elegant',
        'accent_color': '#475569',
        'font': 'Helvetica',
    },
    'executive': {
        'name': 'Executive',
        'accent_color': '#eab37a',
        'font': 'Helvetica',
    },
    'timeline': {
        'name': 'Timeline',
        'accent_color': '#2563eb',
        'font': 'Helvetica',
    },
}

TEMPLATE_ALIASES = {
    'minimalist': 'modern',
    'creative': 'professional_blue',
    'professional': 'professional_blue',
    'professional-blue': 'professional_blue',
    'professional blue': 'professional_blue',
}
