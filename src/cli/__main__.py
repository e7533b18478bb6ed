from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from src.excel.reader import WorkbookReadError, preview_header_rows, read_workbook
from src.logging.init import log_summary, setup_logging
from src.models.config_models import ConvertConfig, SheetConfig
from src.models.sheet import Sheet
from src.services.orchestrator import (
    ConversionError,
    build_sheet_configs,
    convert_workbook,
    default_sheet_config,
    resolve_mapping,
)
from src.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (optional unless given explicitly)
- Read the workbook given on the command line (or config source_file)
- Convert the selected sheets and write the .vcf file
- Print one SUMMARY line; exit code reflects the outcome
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_NO_CONTACTS = 2

ENV_CONFIG_PATH = "XLSX_VCARD_CONFIG"
ENV_OUTPUT_DIR = "XLSX_VCARD_OUTPUT_DIR"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Excel contact sheets -> vCard 3.0 converter")
    p.add_argument("workbook", nargs="?", help="Excel workbook (.xlsx/.xls); defaults to config source_file")
    p.add_argument("--config", help=f"YAML config path (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--output", help="Output .vcf path (default: <output_directory>/contacts_<date>.vcf)")
    p.add_argument("--sheet", action="append", dest="sheets", metavar="NAME",
                   help="Convert only this sheet (repeatable, order kept)")
    p.add_argument("--header-row", type=int, metavar="N",
                   help="1-based header row for sheets without their own setting")
    p.add_argument("--no-tags", action="store_true", help="Do not add the sheet name as CATEGORIES")
    p.add_argument("--escape", action="store_true", help="Escape , ; \\ and newlines in values")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true",
                   help="Print header row candidates & detected mappings then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace, logger: logging.Logger) -> ConvertConfig:
    explicit = args.config or os.getenv(ENV_CONFIG_PATH)
    config_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH
    if explicit or config_path.exists():
        cfg = load_config(config_path)
        logger.debug(f"config loaded: {config_path}")
    else:
        cfg = ConvertConfig()
    # CLI > 環境変数 > config
    output_dir = os.getenv(ENV_OUTPUT_DIR)
    if output_dir:
        cfg = dataclasses.replace(cfg, output_directory=output_dir)
    if args.no_tags:
        cfg = dataclasses.replace(cfg, tag_with_sheet_name=False)
    if args.escape:
        cfg = dataclasses.replace(cfg, escape_values=True)
    return cfg


def _inspect_data(
    sheets: list[Sheet], sheet_configs: dict[str, SheetConfig], default: SheetConfig
) -> int:
    for sheet in sheets:
        config = sheet_configs.get(sheet.name, default)
        print(f"SHEET: {sheet.name} rows={sheet.total_rows}")
        for line in preview_header_rows(sheet):
            print(f"  {line}")
        # 実行時と同じマッピング (ヘッダ行指定・上書きを反映)
        mapping = resolve_mapping(sheet, config)
        print(f"  detected(row {config.header_row_index + 1})={mapping.to_dict()}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] はそのまま使う)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    if args.header_row is not None and args.header_row < 1:
        logger.error(f"invalid --header-row: {args.header_row} (rows start at 1)")
        return EXIT_FATAL

    try:
        cfg = _resolve_config(args, logger)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source = args.workbook or cfg.source_file
    if not source:
        logger.error("no workbook given (argument or config source_file)")
        return EXIT_FATAL
    workbook = Path(source)
    if not workbook.exists():
        logger.error(f"workbook not found: {workbook}")
        return EXIT_FATAL

    logger.info(f"Reading workbook: {workbook}")
    try:
        sheets = read_workbook(workbook)
    except WorkbookReadError as e:
        logger.error(f"read: {e}")
        return EXIT_FATAL

    header_row_index = args.header_row - 1 if args.header_row is not None else 0
    default = default_sheet_config(cfg, header_row_index=header_row_index)
    try:
        sheet_configs = build_sheet_configs(cfg, default)
        if args.inspect_data:
            return _inspect_data(sheets, sheet_configs, default)
        result = convert_workbook(
            sheets,
            sheet_configs,
            default_config=default,
            sheet_order=args.sheets,
            escape=cfg.escape_values,
        )
    except ConversionError as e:
        logger.error(f"conversion: {e}")
        return EXIT_FATAL

    output = Path(args.output) if args.output else Path(cfg.output_directory) / result.file_name
    if result.total_contacts:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            # 改行は常に LF (OS の改行変換を無効化)
            output.write_text(result.text, encoding="utf-8", newline="")
        except OSError as e:
            logger.error(f"write: {e}")
            return EXIT_FATAL
        logger.info(f"wrote {result.total_contacts} contacts to {output}")
    else:
        logger.warning("no contact found, nothing written")

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_SUCCESS if result.total_contacts else EXIT_NO_CONTACTS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
