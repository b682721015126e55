from cvstudio.templates.registry import list_templates, resolve_template_key, default_accent_color
from cvstudio.templates.renderer import build_pdf, measure_content_height, render_template

__all__ = [
    'build_pdf',
    'default_accent_color',
    'list_templates',
    'measure_content_height',
    'render_template',
    'resolve_template_key',
]
