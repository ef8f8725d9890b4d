"""Adapters da fronteira com o WhatsApp Web."""

from dupwatch.adapters.whatsapp.models import InboundChatEvent
from dupwatch.adapters.whatsapp.pre_plain_text import parse_pre_plain_text

__all__ = ["InboundChatEvent", "parse_pre_plain_text"]
