"""
Logging configuration for CV Studio.

Editor events are logged as dotted names with an extra= payload, e.g.
``autosave.save.complete | cv_id=cv-1``. The formatter puts the document id
first so one CV can be followed across the editor, the autosave timer
threads and the render service.
"""
import logging
import sys

from cvstudio.config import LOG_LEVEL, LOG_VALUE_MAX_LENGTH

# Fields first on every line when present
LEADING_FIELDS = ('cv_id', 'template', 'template_key')

# Never written out, whatever logger passes them
REDACTED_FIELDS = {'token', 'authorization', 'password', 'secret'}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends extra fields to log messages."""

    STANDARD_FIELDS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime', 'taskName'}

    def __init__(self, *args, max_value_length: int = LOG_VALUE_MAX_LENGTH, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_value_length = max_value_length

    def _value(self, key, value) -> str:
        if key.lower() in REDACTED_FIELDS:
            return '***'
        text = str(value)
        if len(text) > self.max_value_length:
            text = text[:self.max_value_length] + '...'
        return text

    def extra_fields(self, record: logging.LogRecord) -> dict:
        return {k: v for k, v in record.__dict__.items() if k not in self.STANDARD_FIELDS}

    def format(self, record):
        base_message = super().format(record)

        extra = self.extra_fields(record)
        if not extra:
            return base_message

        keys = [k for k in LEADING_FIELDS if k in extra]
        keys += sorted(k for k in extra if k not in LEADING_FIELDS)
        return base_message + ' | ' + ' '.join(f'{k}={self._value(k, extra[k])}' for k in keys)


class _EditorHandler(logging.StreamHandler):
    """Marks the handler installed here so reconfiguring replaces only it"""


def configure_logging(level: str = None):
    """
    Configure root logging for the editor and the render service.

    Safe to call once per app created: the previously installed handler is
    swapped out, handlers added by others (e.g. pytest's caplog) are kept.
    """
    formatter = ExtraFieldsFormatter(
        fmt='[%(levelname)s] %(asctime)s %(threadName)s %(name)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handler = _EditorHandler(sys.stdout)
    handler.setFormatter(formatter)

    level_name = (level or LOG_LEVEL).upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    for existing in [h for h in root_logger.handlers if isinstance(h, _EditorHandler)]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('reportlab').setLevel(logging.WARNING)
    return handler
