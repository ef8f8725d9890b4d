"""Leitura do atributo `data-pre-plain-text` do WhatsApp Web.

Formato típico: "[21:07, 10/1/2024] Nome: ". A ordem da data (D/M ou M/D)
varia com o locale do navegador. Quando a data existe, vale a leitura mais
recente que não esteja no futuro; sem data legível, usa-se a data de
"agora" no fuso configurado.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time, timedelta, tzinfo

_PRE_PLAIN_PATTERN = re.compile(
    r"^\s*\[\s*(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::\d{2})?\s*(?P<ampm>[AaPp]\.?\s?[Mm]\.?)?"
    r"(?:\s*,\s*(?P<first>\d{1,2})[./-](?P<second>\d{1,2})[./-](?P<year>\d{4}|\d{2}))?"
)

# Relógio do navegador e do processo podem divergir um pouco
_FUTURE_TOLERANCE = timedelta(minutes=5)


def _date_candidates(first: int, second: int, year: int) -> list[date]:
    """Datas possíveis para D/M e M/D (inválidas são descartadas)."""
    candidates: list[date] = []
    for day, month in ((first, second), (second, first)):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


def parse_pre_plain_text(attr: str | None, now: datetime, tz: tzinfo) -> datetime | None:
    """Converte o atributo em instante UTC.

    Com data presente, escolhe a interpretação (D/M ou M/D) mais recente
    que não caia no futuro. Sem data, usa a data local de `now`; se HH:MM
    cair no futuro (mensagem das 23:59 lida depois da meia-noite), usa o
    dia anterior.

    Returns:
        Instante UTC, ou None se o atributo não tiver horário legível
    """
    if not attr:
        return None
    match = _PRE_PLAIN_PATTERN.match(attr)
    if match is None:
        return None

    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    ampm = match.group("ampm")
    if ampm:
        is_pm = ampm.strip().lower().startswith("p")
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if is_pm else 0)
    if hour > 23 or minute > 59:
        return None

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    now = now.astimezone(UTC)
    local_now = now.astimezone(tz)
    wall = time(hour, minute)

    if match.group("year"):
        year = int(match.group("year"))
        if year < 100:
            year += 2000
        dated = [
            datetime.combine(d, wall, tzinfo=tz)
            for d in _date_candidates(int(match.group("first")), int(match.group("second")), year)
        ]
        past = [c for c in dated if c - now <= _FUTURE_TOLERANCE]
        if past:
            return max(past).astimezone(UTC)

    candidate = datetime.combine(local_now.date(), wall, tzinfo=tz)
    if candidate - now > _FUTURE_TOLERANCE:
        candidate = datetime.combine(local_now.date() - timedelta(days=1), wall, tzinfo=tz)
    return candidate.astimezone(UTC)
