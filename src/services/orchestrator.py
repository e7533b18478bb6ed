from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime
from typing import Any

from ..contacts.header_classifier import classify, normalize_header
from ..contacts.record_extractor import data_rows, extract
from ..logging.init import get_logger
from ..models.config_models import ConvertConfig, MappingTarget, SheetConfig
from ..models.contact_record import ContactRecord
from ..models.conversion_result import ConversionResult, SheetStat
from ..models.field_slot import ColumnMapping, FieldSlot
from ..models.sheet import Sheet
from ..vcard.serializer import serialize
from .progress import ProgressTracker

"""Conversion orchestration.

For each selected sheet: resolve the column mapping (detected on the chosen
header row, then per-slot overrides), extract the contact records, and
concatenate them in sheet order. The concatenated records are serialized
once and returned with a suggested file name; writing the file is left to
the caller.
"""

logger = get_logger("orchestrator")

FILE_NAME_PREFIX = "contacts"
FILE_NAME_SUFFIX = ".vcf"


class ConversionError(Exception):
    """Raised when a conversion run cannot start (e.g. no sheet selected)."""


def suggested_file_name(today: date | None = None) -> str:
    """``contacts_YYYY-MM-DD.vcf`` for the given (default: current UTC) date."""
    day = today or datetime.now(UTC).date()
    return f"{FILE_NAME_PREFIX}_{day.isoformat()}{FILE_NAME_SUFFIX}"


def _parse_mapping_section(sheet_name: str, raw: Mapping[str, Any]) -> dict[FieldSlot, MappingTarget]:
    overrides: dict[FieldSlot, MappingTarget] = {}
    for key, target in raw.items():
        try:
            slot = FieldSlot(key)
        except ValueError as e:
            raise ConversionError(f"sheet '{sheet_name}': unknown field '{key}'") from e
        # -1 = "non mappé"
        if isinstance(target, int) and not isinstance(target, bool) and target < 0:
            target = None
        overrides[slot] = target
    return overrides


def default_sheet_config(config: ConvertConfig, header_row_index: int = 0) -> SheetConfig:
    """SheetConfig applied to sheets without their own config section."""
    return SheetConfig(
        include=True,
        header_row_index=header_row_index,
        mapping_override=None,
        tag_with_sheet_name=config.tag_with_sheet_name,
    )


def build_sheet_configs(
    config: ConvertConfig, default: SheetConfig | None = None
) -> dict[str, SheetConfig]:
    """Convert the raw ``sheets`` sections of a ConvertConfig into SheetConfigs.

    Keys missing from a section fall back to ``default``.
    """
    base = default or default_sheet_config(config)
    configs: dict[str, SheetConfig] = {}
    for sheet_name, section in config.sheets.items():
        name = str(sheet_name)
        if not isinstance(section, Mapping):
            raise ConversionError(
                f"Invalid config for sheet '{name}': expected a mapping, got {type(section).__name__}"
            )
        mapping_raw = section.get("mapping")
        # header_row は 1 始まり (表示上の行番号)
        header_row = section.get("header_row")
        configs[name] = SheetConfig(
            include=section.get("include", base.include),
            header_row_index=header_row - 1 if header_row is not None else base.header_row_index,
            mapping_override=_parse_mapping_section(name, mapping_raw) if mapping_raw else None,
            tag_with_sheet_name=section.get("tag_with_sheet_name", base.tag_with_sheet_name),
        )
    return configs


def _find_header_column(header: Sequence[Any], label: str) -> int | None:
    wanted = normalize_header(label)
    for index, cell in enumerate(header):
        if normalize_header(cell) == wanted:
            return index
    return None


def resolve_mapping(sheet: Sheet, config: SheetConfig) -> ColumnMapping:
    """Detected mapping for the configured header row, with overrides applied.

    Override targets may be a column index, a header label of the chosen
    header row, or None (slot unmapped). Labels that match no header cell
    are ignored with a warning and the detected binding is kept.
    """
    header = sheet.row(config.header_row_index)
    detected = classify(header)
    if not config.mapping_override:
        return detected

    overrides: dict[FieldSlot, int | None] = {}
    for slot, target in config.mapping_override.items():
        if target is None or isinstance(target, int):
            overrides[slot] = target
            continue
        index = _find_header_column(header, target)
        if index is None:
            logger.warning(
                f"sheet '{sheet.name}': header '{target}' not found for {slot.value}, keeping detected column"
            )
            continue
        overrides[slot] = index
    return detected.with_overrides(overrides)


def _convert_single_sheet(sheet: Sheet, config: SheetConfig) -> tuple[SheetStat, list[ContactRecord]]:
    if not 0 <= config.header_row_index < sheet.total_rows:
        logger.warning(
            f"sheet '{sheet.name}': header row {config.header_row_index + 1} out of range "
            f"(rows={sheet.total_rows}), no data rows"
        )
    mapping = resolve_mapping(sheet, config)
    category = sheet.name if config.tag_with_sheet_name else None
    records = extract(sheet, config.header_row_index, mapping, category)
    stat = SheetStat(
        sheet_name=sheet.name,
        header_row_index=config.header_row_index,
        data_rows=len(data_rows(sheet, config.header_row_index)),
        contacts=len(records),
        mapping=mapping,
    )
    logger.debug(f"sheet '{sheet.name}': mapping={mapping.to_dict()}")
    if not mapping:
        logger.warning(f"sheet '{sheet.name}': no column recognized on header row {config.header_row_index + 1}")
    logger.info(
        f"sheet '{sheet.name}': contacts={stat.contacts} skipped_rows={stat.skipped_rows}"
    )
    return stat, records


def convert_workbook(
    sheets: Sequence[Sheet],
    sheet_configs: Mapping[str, SheetConfig] | None = None,
    *,
    default_config: SheetConfig | None = None,
    sheet_order: Sequence[str] | None = None,
    escape: bool = False,
    today: date | None = None,
) -> ConversionResult:
    """Convert the selected sheets of a workbook into vCard text.

    Args:
        sheets: Workbook sheets, in workbook order
        sheet_configs: Per-sheet configuration keyed by sheet name
        default_config: Configuration for sheets absent from ``sheet_configs``
        sheet_order: Explicit sheet selection/order; sheets not listed are skipped
        escape: Escape vCard reserved characters in values
        today: Date used for the suggested file name

    Returns:
        ConversionResult with records concatenated in sheet order

    Raises:
        ConversionError: If no sheet is selected
    """
    start_time = datetime.now(UTC)
    configs = dict(sheet_configs or {})
    default = default_config or SheetConfig()
    by_name = {sheet.name: sheet for sheet in sheets}

    for name in configs:
        if name not in by_name:
            logger.warning(f"configured sheet not found in workbook: '{name}'")

    if sheet_order is not None:
        for name in sheet_order:
            if name not in by_name:
                logger.warning(f"requested sheet not found in workbook: '{name}'")
        ordered = [by_name[name] for name in dict.fromkeys(sheet_order) if name in by_name]
    else:
        ordered = list(sheets)

    selected = [sheet for sheet in ordered if configs.get(sheet.name, default).include]
    if not selected:
        raise ConversionError("no sheet selected")

    records: list[ContactRecord] = []
    sheet_stats: list[SheetStat] = []
    with ProgressTracker(len(selected)) as progress:
        for sheet in selected:
            progress.start_sheet(sheet.name)
            stat, sheet_records = _convert_single_sheet(sheet, configs.get(sheet.name, default))
            records.extend(sheet_records)
            sheet_stats.append(stat)
            progress.finish_sheet(contacts=len(records))

    text = serialize(records, escape=escape)
    end_time = datetime.now(UTC)
    return ConversionResult(
        text=text,
        file_name=suggested_file_name(today),
        records=tuple(records),
        total_sheets=len(sheets),
        skipped_sheets=len(sheets) - len(selected),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        sheet_stats=sheet_stats,
    )
