"""
Cleaning Digest
Builds the Markdown messages sent to the cleaning team chat.

Two digests exist:
- warning: equipment due tomorrow
- overdue: equipment past its cleaning date (or with no usable date)

An empty bucket produces no message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List, Optional

from checklist.buisness.equipment.status_engine import (
    EquipmentStatus,
    days_until_next_cleaning,
    equipment_status,
)
from checklist.utils.dates import local_today

WARNING_HEADER = "⚠️ *WARNING - Cleaning due soon!* ⚠️"
OVERDUE_HEADER = "\U0001f6a8 *ATTENTION - Cleaning overdue!* \U0001f6a8"

# Characters Telegram's legacy Markdown treats as entity delimiters
_MARKDOWN_SPECIALS = ('_', '*', '`', '[')


def escape_markdown(text: Any) -> str:
    value = str(text or '')
    for char in _MARKDOWN_SPECIALS:
        value = value.replace(char, '\\' + char)
    return value


@dataclass
class CleaningDigest:
    warning: List[Any] = field(default_factory=list)
    overdue: List[Any] = field(default_factory=list)
    today: Optional[date] = None

    @classmethod
    def collect(cls, records: Iterable[Any], today: Optional[date] = None) -> 'CleaningDigest':
        today = today or local_today()
        digest = cls(today=today)
        for record in records:
            status = equipment_status(record, today)
            if status is EquipmentStatus.WARNING:
                digest.warning.append(record)
            elif status is EquipmentStatus.OVERDUE:
                digest.overdue.append(record)
        return digest

    @property
    def is_empty(self) -> bool:
        return not self.warning and not self.overdue

    def warning_message(self) -> Optional[str]:
        if not self.warning:
            return None
        lines = [
            f"- *{escape_markdown(record.name)}* ({escape_markdown(record.sector)})\n"
            f"  - Responsible: {escape_markdown(record.responsible)}\n"
            f"  - Next cleaning in: 1 day\n"
            for record in self.warning
        ]
        return f"{WARNING_HEADER}\n\n" + "\n".join(lines)

    def overdue_message(self) -> Optional[str]:
        if not self.overdue:
            return None
        lines = []
        for record in self.overdue:
            days = days_until_next_cleaning(record, self.today)
            late = f"{abs(days)} day(s)" if days is not None else "unknown (no valid last cleaning date)"
            lines.append(
                f"- *{escape_markdown(record.name)}* ({escape_markdown(record.sector)})\n"
                f"  - Responsible: {escape_markdown(record.responsible)}\n"
                f"  - Overdue by: {late}\n"
            )
        return f"{OVERDUE_HEADER}\n\n" + "\n".join(lines)

    def messages(self) -> List[str]:
        """Non-empty messages, warning digest first."""
        return [message for message in (self.warning_message(), self.overdue_message()) if message]
