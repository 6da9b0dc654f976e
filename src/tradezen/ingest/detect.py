"""Export format detection from the CSV header line."""

from __future__ import annotations

from tradezen.core.enums import CsvFormat


def detect_csv_format(content: str) -> CsvFormat:
    """Classify an export by its first line.

    Balance history headers mention "balance" (or the French
    "Pertes et profits"); order logs have ``Heure,Texte``.
    """
    stripped = content.strip()
    if not stripped:
        return CsvFormat.UNKNOWN
    first_line = stripped.split("\n", 1)[0].lower()

    if "balance" in first_line or "pertes et profits" in first_line:
        return CsvFormat.BALANCE_HISTORY
    if "heure" in first_line and "texte" in first_line:
        return CsvFormat.ORDER_LOGS
    return CsvFormat.UNKNOWN
