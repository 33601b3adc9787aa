"""Filename cleaning for object storage paths."""

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^a-zA-Z0-9._-]")


def clean_file_name(file_name: str) -> str:
    """Return file_name reduced to ASCII letters, digits, '.', '_' and '-'.

    Accents are stripped (NFD decomposition, combining marks dropped),
    whitespace runs become '_', anything else outside the allowlist is
    removed.

    Examples:
        >>> clean_file_name("Certidão de Casamento.pdf")
        'Certidao_de_Casamento.pdf'
    """
    decomposed = unicodedata.normalize("NFD", file_name)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _UNSAFE.sub("", _WHITESPACE.sub("_", without_marks))
