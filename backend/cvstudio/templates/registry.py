"""
Template registry - canonical keys, aliases and per-template defaults
"""
from typing import Dict, List

from cvstudio.config import DEFAULT_TEMPLATE_KEY, TEMPLATE_ALIASES, TEMPLATE_CONFIGS


def resolve_template_key(template_key: str) -> str:
    """Map catalog keys and legacy names onto a layout; unknown keys use the default layout"""
    key = (template_key or DEFAULT_TEMPLATE_KEY).strip().lower()
    key = TEMPLATE_ALIASES.get(key, key)
    if key not in TEMPLATE_CONFIGS:
        return DEFAULT_TEMPLATE_KEY
    return key


def default_accent_color(template_key: str) -> str:
    return TEMPLATE_CONFIGS[resolve_template_key(template_key)]['accent_color']


def default_font(template_key: str) -> str:
    return TEMPLATE_CONFIGS[resolve_template_key(template_key)]['font']


def list_templates() -> List[Dict[str, str]]:
    return [
        {
            'key': key,
            'name': config['name'],
            'accentColor': config['accent_color'],
        }
        for key, config in TEMPLATE_CONFIGS.items()
    ]
