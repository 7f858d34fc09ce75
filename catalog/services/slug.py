"""
Генерация URL-friendly идентификаторов.
"""

import re
from typing import Optional, Union

_NON_WORD_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SPACES_RE = re.compile(r"\s+", re.ASCII)
_HYPHENS_RE = re.compile(r"-+")


def slugify(
    text: str,
    suffix: Optional[Union[int, str]] = None,
    max_length: Optional[int] = None,
) -> str:
    """
    Строит slug из произвольной строки.

    Строка приводится к нижнему регистру, символы кроме латинских букв,
    цифр, "_", "-" и пробелов удаляются, пробелы заменяются дефисом,
    повторяющиеся дефисы схлопываются. Суффикс (обычно ID записи)
    добавляется через дефис и делает slug уникальным. При max_length
    обрезается основа, суффикс сохраняется целиком.

    Args:
        text: Исходная строка (название товара или коллекции)
        suffix: Необязательный суффикс
        max_length: Максимальная длина результата (длина колонки)

    Returns:
        str: Slug, например "red-t-shirt-42"

    Example:
        >>> slugify("Red T-Shirt!!", 42)
        'red-t-shirt-42'
    """
    base = _NON_WORD_RE.sub("", (text or "").lower())
    base = _SPACES_RE.sub("-", base.strip())
    base = _HYPHENS_RE.sub("-", base).strip("-")
    tail = "" if suffix is None else str(suffix)
    if max_length is not None:
        room = max_length - len(tail) - (1 if tail else 0)
        base = base[: max(room, 0)].rstrip("-")
    if not tail:
        return base
    return f"{base}-{tail}" if base else tail
