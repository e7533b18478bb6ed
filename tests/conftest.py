# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from src.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "out").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_file: ./data/contacts.xlsx
output_directory: ./out
tag_with_sheet_name: true
sheets:
  Clients:
    header_row: 2
  Archives:
    include: false
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "convert.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows (no pandas header/index) to an .xlsx workbook."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def sample_workbook(temp_workdir: Path) -> Path:
    # Clients: title row then header on row 2 / Fournisseurs: header on row 1
    return make_excel(
        temp_workdir / "data" / "contacts.xlsx",
        {
            "Clients": [
                ["Liste clients 2024", None, None, None],
                ["Prénom", "Nom", "Mobile", "Email"],
                ["Jean", "Dupont", "0601020304", "jean@x.com"],
                [None, None, None, None],
                ["Marie", "Curie", None, "marie@x.com"],
                [None, None, None, "orphan@x.com"],
            ],
            "Fournisseurs": [
                ["Nom complet", "Téléphone", "Société"],
                ["Acme Contact", "0102030405", "Acme SA"],
                [None, None, "Sans contact SA"],
            ],
            "Archives": [
                ["Nom", "Email"],
                ["Ancien", "old@x.com"],
            ],
        },
    )


@pytest.fixture()
def excel_factory():
    return make_excel
