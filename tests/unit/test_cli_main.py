from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from src.cli import main as cli_main


def _written(temp_workdir: Path) -> list[Path]:
    return sorted((temp_workdir / "out").glob("contacts_*.vcf"))


def test_cli_converts_config_source_file(write_config, sample_workbook, temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    (vcf,) = _written(temp_workdir)
    text = vcf.read_text(encoding="utf-8")
    assert text.count("BEGIN:VCARD") == 4
    assert "CATEGORIES:Clients\n" in text
    assert "CATEGORIES:Archives" not in text
    assert "SUMMARY sheets=2/3 contacts=4 skipped_rows=2 skipped_sheets=1" in out
    assert f"file={vcf.name}" in out


def test_cli_no_tags(write_config, sample_workbook, temp_workdir: Path):
    assert cli_main(["--no-tags"]) == 0
    (vcf,) = _written(temp_workdir)
    assert "CATEGORIES:" not in vcf.read_text(encoding="utf-8")


def test_cli_sheet_selection_and_output_path(write_config, sample_workbook, temp_workdir: Path):
    target = temp_workdir / "export" / "fournisseurs.vcf"
    assert cli_main(["--sheet", "Fournisseurs", "--output", str(target)]) == 0
    text = target.read_text(encoding="utf-8")
    assert text == (
        "BEGIN:VCARD\n"
        "VERSION:3.0\n"
        "FN:Acme Contact\n"
        "N:Acme Contact;;;;\n"
        "TEL;TYPE=CELL:0102030405\n"
        "ORG:Acme SA\n"
        "CATEGORIES:Fournisseurs\n"
        "END:VCARD\n"
        "\n"
    )


def test_cli_without_config_uses_defaults(sample_workbook, temp_workdir: Path, capsys):
    # no config file: every sheet, header on row 1
    code = cli_main([str(sample_workbook), "--header-row", "2", "--sheet", "Clients"])
    assert code == 0
    assert "contacts=3" in capsys.readouterr().out
    (vcf,) = sorted(temp_workdir.glob("contacts_*.vcf"))
    assert "FN:Jean Dupont\n" in vcf.read_text(encoding="utf-8")


def test_cli_workbook_missing(temp_workdir: Path, capsys):
    code = cli_main(["data/nope.xlsx"])
    assert code == 1
    assert "ERROR workbook not found:" in capsys.readouterr().out


def test_cli_no_workbook_given(temp_workdir: Path, capsys):
    assert cli_main([]) == 1
    assert "ERROR no workbook given" in capsys.readouterr().out


def test_cli_invalid_config(write_config, temp_workdir: Path, capsys):
    write_config.write_text("unknown_key: 1\n", encoding="utf-8")
    assert cli_main([]) == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_explicit_config_must_exist(temp_workdir: Path, capsys):
    assert cli_main(["--config", "config/other.yml"]) == 1
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_cli_unreadable_workbook(temp_workdir: Path, capsys):
    broken = temp_workdir / "data" / "broken.xlsx"
    broken.write_bytes(b"garbage")
    assert cli_main([str(broken)]) == 1
    assert "ERROR read:" in capsys.readouterr().out


def test_cli_invalid_header_row(temp_workdir: Path, capsys):
    assert cli_main(["x.xlsx", "--header-row", "0"]) == 1
    assert "ERROR invalid --header-row" in capsys.readouterr().out


def test_cli_no_contacts_exit_code(temp_workdir: Path, excel_factory, capsys):
    book = excel_factory(temp_workdir / "data" / "empty.xlsx", {"S": [["foo", "bar"], ["1", "2"]]})
    assert cli_main([str(book)]) == 2
    out = capsys.readouterr().out
    assert "WARN no contact found, nothing written" in out
    assert "SUMMARY sheets=1/1 contacts=0" in out
    assert list(temp_workdir.glob("*.vcf")) == []


def test_cli_no_sheet_selected(sample_workbook, temp_workdir: Path, capsys):
    assert cli_main([str(sample_workbook), "--sheet", "Inconnue"]) == 1
    assert "ERROR conversion: no sheet selected" in capsys.readouterr().out


def test_cli_inspect_data(sample_workbook, temp_workdir: Path, capsys):
    assert cli_main([str(sample_workbook), "--inspect-data"]) == 0
    out = capsys.readouterr().out
    assert "SHEET: Clients rows=6" in out
    assert "Ligne 2: Prénom, Nom, Mobile..." in out
    assert "detected(row 1)={'fullName': 0, 'phone1': 1, 'organization': 2}" in out
    assert list(temp_workdir.rglob("*.vcf")) == []


def test_cli_debug_mode_logs_mapping(write_config, sample_workbook, capsys):
    assert cli_main(["--debug"]) == 0
    out = capsys.readouterr().out
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG sheet 'Clients': mapping={'firstName': 0, 'lastName': 1, 'phone1': 2, 'email': 3}" in out


def test_cli_output_dir_from_dotenv(write_config, sample_workbook, temp_workdir: Path, monkeypatch):
    # registered so monkeypatch removes the variable that .env loading sets
    monkeypatch.setenv("XLSX_VCARD_OUTPUT_DIR", "placeholder")
    (temp_workdir / ".env").write_text("XLSX_VCARD_OUTPUT_DIR=./from_env\n", encoding="utf-8")
    assert cli_main([]) == 0
    assert len(list((temp_workdir / "from_env").glob("contacts_*.vcf"))) == 1
    assert _written(temp_workdir) == []


def test_cli_inspect_data_uses_configured_header_row(write_config, sample_workbook, capsys):
    assert cli_main(["--inspect-data"]) == 0
    out = capsys.readouterr().out
    assert "detected(row 2)={'firstName': 0, 'lastName': 1, 'phone1': 2, 'email': 3}" in out
    assert "detected(row 1)={'fullName': 0, 'phone1': 1, 'organization': 2}" in out


def test_cli_inspect_data_uses_header_row_flag(sample_workbook, capsys):
    assert cli_main([str(sample_workbook), "--inspect-data", "--header-row", "2"]) == 0
    out = capsys.readouterr().out
    assert "detected(row 2)={'firstName': 0, 'lastName': 1, 'phone1': 2, 'email': 3}" in out
    assert "detected(row 1)=" not in out


def test_cli_inspect_data_reports_mapping_overrides(write_config, sample_workbook, capsys):
    write_config.write_text(
        "sheets:\n  Clients:\n    header_row: 2\n    mapping:\n      email: -1\n      title: Mobile\n",
        encoding="utf-8",
    )
    assert cli_main([str(sample_workbook), "--inspect-data"]) == 0
    out = capsys.readouterr().out
    assert "detected(row 2)={'firstName': 0, 'lastName': 1, 'phone1': 2, 'title': 2}" in out


def test_cli_writes_lf_line_endings(write_config, sample_workbook, temp_workdir: Path):
    original_write_text = Path.write_text
    with patch.object(Path, "write_text", autospec=True, side_effect=original_write_text) as mock_write:
        assert cli_main([]) == 0
    assert mock_write.call_args.kwargs["newline"] == ""
    (vcf,) = _written(temp_workdir)
    data = vcf.read_bytes()
    assert b"\r\n" not in data
    assert data.endswith(b"END:VCARD\n\n")
