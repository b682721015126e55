"""
Nested state updater - apply a single field-path edit to a CV document

Documents are never mutated in place: every effective edit returns a new
CVDocument that shares untouched branches with the previous one, and edits
that do not change the normalized value return the previous document itself.
"""
import html
import re
from functools import lru_cache
from typing import Any, List, NamedTuple, Optional, Union, get_args

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from cvstudio.models.cv_document import CVDocument, new_section_item
from cvstudio.models.enums import SectionKind
from cvstudio.templates.registry import default_accent_color, resolve_template_key
from cvstudio.utils.dates import compose_month_year
from cvstudio.utils.exceptions import InvalidPathError, ValidationError

_TAG_RE = re.compile(r'<[^>]*>')

MONTH_YEAR_FIELDS = ('startDate', 'endDate', 'date')


class UpdateResult(NamedTuple):
    document: CVDocument
    changed: bool


def strip_markup(text: str) -> str:
    """Visible text of a rich-text value; '<p><br></p>' becomes ''"""
    text = _TAG_RE.sub('', text or '')
    return html.unescape(text).replace('\xa0', ' ').strip()


def _normalized(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, BaseModel):
        return _normalized(value.model_dump())
    if isinstance(value, str):
        # Only blank values collapse; formatting and spacing are real edits
        return value if strip_markup(value) else ""
    if isinstance(value, dict):
        return {k: _normalized(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalized(v) for v in value]
    return value


def values_equal(current: Any, candidate: Any) -> bool:
    """Compare two field values; None, blank text and empty markup are all equal"""
    return _normalized(current) == _normalized(candidate)


def _split(path: str) -> List[str]:
    keys = (path or '').split('.')
    if not path or any(k == '' for k in keys):
        raise InvalidPathError(path, "empty path segment")
    return keys


def _index(key: str, items: list, path: str) -> int:
    try:
        idx = int(key)
    except ValueError:
        raise InvalidPathError(path, f"'{key}' is not a list index")
    if idx < 0 or idx >= len(items):
        raise InvalidPathError(path, f"index {idx} out of range")
    return idx


@lru_cache(maxsize=128)
def _adapter(annotation) -> TypeAdapter:
    return TypeAdapter(annotation)


def _coerce(annotation, value: Any, path: str) -> Any:
    if annotation is Any:
        return value
    if annotation is str:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    try:
        return _adapter(annotation).validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError(e.errors()[0].get('msg', 'invalid value'), field=path)


def get_path(document: CVDocument, path: str) -> Any:
    """Read the value at a dot-separated path (list indices are numeric segments)"""
    node: Any = document
    for key in _split(path):
        if isinstance(node, BaseModel):
            if key not in type(node).model_fields:
                raise InvalidPathError(path, f"unknown field '{key}'")
            node = getattr(node, key)
        elif isinstance(node, list):
            node = node[_index(key, node, path)]
        else:
            raise InvalidPathError(path, f"'{key}' is not addressable")
    return node


def _assign(node: Any, keys: List[str], value: Any, annotation, path: str) -> Any:
    key, rest = keys[0], keys[1:]

    if isinstance(node, BaseModel):
        fields = type(node).model_fields
        if key not in fields:
            raise InvalidPathError(path, f"unknown field '{key}'")
        child_annotation = fields[key].annotation
        if rest:
            new_child = _assign(getattr(node, key), rest, value, child_annotation, path)
        else:
            new_child = _coerce(child_annotation, value, path)
        return node.model_copy(update={key: new_child})

    if isinstance(node, list):
        idx = _index(key, node, path)
        args = get_args(annotation)
        item_annotation = args[0] if args else Any
        if rest:
            new_item = _assign(node[idx], rest, value, item_annotation, path)
        else:
            new_item = _coerce(item_annotation, value, path)
        new_list = list(node)
        new_list[idx] = new_item
        return new_list

    raise InvalidPathError(path, f"'{key}' is not addressable")


def apply_update(document: CVDocument, path: str, value: Any) -> UpdateResult:
    """
    Replace the value at `path`.

    Returns the untouched document with changed=False when the current and
    candidate values are equal (blank text and empty markup count as equal),
    so re-renders that re-apply the same value never mark the document dirty.
    """
    keys = _split(path)
    current = get_path(document, path)
    updated = _assign(document, keys, value, CVDocument, path)
    if values_equal(current, get_path(updated, path)):
        return UpdateResult(document, False)
    return UpdateResult(updated, True)


# ========================================
# Section helpers
# ========================================

def _section_path(section: Union[SectionKind, str]) -> str:
    return f"data.{SectionKind(section).value}"


def add_item(document: CVDocument, section: Union[SectionKind, str]) -> UpdateResult:
    """Append the section's default entry"""
    path = _section_path(section)
    items = get_path(document, path)
    return apply_update(document, path, [*items, new_section_item(section)])


def update_item(document: CVDocument, section: Union[SectionKind, str], index: int,
                field: Optional[str], value: Any) -> UpdateResult:
    """Edit one entry; field=None replaces the entry itself (e.g. a skill string)"""
    path = f"{_section_path(section)}.{index}"
    if field is not None:
        path = f"{path}.{field}"
    return apply_update(document, path, value)


def set_month_year(document: CVDocument, section: Union[SectionKind, str], index: int, field: str,
                   year: Optional[Union[int, str]], month: Optional[Union[int, str]] = None) -> UpdateResult:
    """Store a month/year picker value; a month chosen without a year raises ValidationError"""
    if field not in MONTH_YEAR_FIELDS:
        raise InvalidPathError(f"{_section_path(section)}.{index}.{field}", "not a month/year field")
    return update_item(document, section, index, field, compose_month_year(year, month))


def remove_item(document: CVDocument, section: Union[SectionKind, str], index: int) -> UpdateResult:
    path = _section_path(section)
    items = get_path(document, path)
    _index(str(index), items, f"{path}.{index}")
    return UpdateResult(
        _assign(document, _split(path), [item for i, item in enumerate(items) if i != index], CVDocument, path),
        True,
    )


def move_item(document: CVDocument, section: Union[SectionKind, str], index: int, offset: int) -> UpdateResult:
    """Move an entry up (offset < 0) or down (offset > 0); out-of-range moves are no-ops"""
    path = _section_path(section)
    items = list(get_path(document, path))
    _index(str(index), items, f"{path}.{index}")
    target = index + offset
    if offset == 0 or target < 0 or target >= len(items):
        return UpdateResult(document, False)
    items.insert(target, items.pop(index))
    return UpdateResult(_assign(document, _split(path), items, CVDocument, path), True)


def select_template(document: CVDocument, template_key: str,
                    template_id: Optional[str] = None) -> UpdateResult:
    """
    Point the document at another template.

    Only templateKey, templateId and the template's own default accent colour
    change; content sections keep their identity.
    """
    accent = default_accent_color(template_key)
    if template_id is None and resolve_template_key(template_key) == resolve_template_key(document.templateKey):
        template_id = document.templateId

    if (document.templateKey == template_key
            and document.templateId == template_id
            and document.settings.themeColor == accent):
        return UpdateResult(document, False)

    updated = document.model_copy(update={
        'templateKey': template_key,
        'templateId': template_id,
        'settings': document.settings.model_copy(update={'themeColor': accent}),
    })
    return UpdateResult(updated, True)
