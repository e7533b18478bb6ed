from __future__ import annotations

from ..models.conversion_result import ConversionResult

"""Summary line rendering service.

Format:
SUMMARY sheets={converted}/{total} contacts={n} skipped_rows={n}
skipped_sheets={n} elapsed_sec={elapsed} file={file_name}
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ConversionResult) -> str:
    """Render the SUMMARY line for a conversion run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ConversionResult(
        ...     text="", file_name="contacts_2024-01-01.vcf", records=(),
        ...     total_sheets=2, skipped_sheets=2, start_time=t, end_time=t,
        ...     elapsed_seconds=0.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY sheets=0/2 contacts=0 skipped_rows=0 skipped_sheets=2 elapsed_sec=0 file=contacts_2024-01-01.vcf'
    """
    return (
        f"SUMMARY sheets={result.converted_sheets}/{result.total_sheets} "
        f"contacts={result.total_contacts} "
        f"skipped_rows={result.skipped_rows} "
        f"skipped_sheets={result.skipped_sheets} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)} "
        f"file={result.file_name}"
    )
