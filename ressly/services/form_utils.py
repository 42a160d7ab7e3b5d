from typing import Optional, Union

from ressly.core.errors import ValidationError

_TRUE_VALUES = {'true', '1'}
_FALSE_VALUES = {'false', '0'}


def parse_flag(value: Union[str, bool, None], field: str, default: bool = False) -> bool:
    """Convert a form flag to ``bool``.

    Multipart bodies deliver booleans as text, so this is the one place where
    that text is interpreted:

    * ``True``/``False`` pass through unchanged.
    * ``None`` or a blank string yields ``default``.
    * ``"true"``/``"1"`` and ``"false"``/``"0"`` (case-insensitive, surrounding
      whitespace ignored) map to ``True`` and ``False``.

    Anything else raises ``ValidationError`` with kind ``invalid_flag``.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if not text:
        return default
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValidationError(f"{field} must be 'true' or 'false'", kind='invalid_flag')


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
