"""Formatação da resposta de repetição: funções puras, sem I/O."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import TYPE_CHECKING

from dupwatch.domain.models import DuplicateReply

if TYPE_CHECKING:
    from dupwatch.config.settings import Settings


@dataclass(slots=True, frozen=True)
class ReplyFormat:
    """Parâmetros de formatação.

    `order` e `time_label` são configuráveis porque as versões anteriores
    do bot divergiam (ascendente/descendente, "(ILT)"/"(ET)"/sem rótulo).
    """

    tz: tzinfo
    template: str
    separator: str = ", "
    order: str = "asc"  # asc | desc
    time_label: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> ReplyFormat:
        return cls(
            tz=settings.tzinfo,
            template=settings.reply_template,
            separator=settings.reply_separator,
            order=settings.reply_order.lower(),
            time_label=settings.reply_time_label.strip(),
        )


def format_times(times: Iterable[datetime], fmt: ReplyFormat) -> str:
    """Ordena e renderiza cada instante como HH:MM no fuso configurado."""
    ordered = sorted(
        (t if t.tzinfo is not None else t.replace(tzinfo=UTC) for t in times),
        reverse=fmt.order == "desc",
    )
    rendered = fmt.separator.join(t.astimezone(fmt.tz).strftime("%H:%M") for t in ordered)
    if fmt.time_label:
        rendered = f"{rendered} {fmt.time_label}"
    return rendered


def build_reply(original_text: str, prior: Iterable[datetime], fmt: ReplyFormat) -> DuplicateReply:
    """Monta a resposta a partir das ocorrências anteriores (sem a atual)."""
    prior_tuple = tuple(prior)
    formatted = format_times(prior_tuple, fmt)
    reply_text = fmt.template.format(text=original_text, times=formatted)
    return DuplicateReply(
        original_text=original_text,
        formatted_times=formatted,
        reply_text=reply_text,
        prior=prior_tuple,
    )
