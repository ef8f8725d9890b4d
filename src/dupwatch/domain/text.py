"""Normalização do texto das mensagens.

Apenas trim, colapso de espaços e case-folding; nenhuma normalização
linguística além disso.
"""

from __future__ import annotations


def split_words(text: str) -> list[str]:
    """Divide por qualquer sequência de whitespace (ignora bordas)."""
    return text.split()


def normalize_text(text: str) -> str:
    """Trim + colapso de espaços internos."""
    return " ".join(split_words(text))


def history_key(text: str) -> str:
    """Chave do histórico: texto normalizado em case-fold."""
    return normalize_text(text).casefold()


def is_qualifying(text: str, max_words: int) -> bool:
    """True se o texto tem entre 1 e `max_words` palavras."""
    return 0 < len(split_words(text)) <= max_words
