#!/usr/bin/env python3
"""Sample workbook generation script.

Generates a synthetic contact workbook for manual testing of the converter.
Each sheet has the layout commonly found in exported address lists:
- Row 1: Title row (so the header row has to be chosen explicitly)
- Row 2: Header row (French or English labels)
- Row 3+: Contact rows, with some blank rows and partially filled rows
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

FIRST_NAMES = ["Jean", "Marie", "Luc", "Claire", "Paul", "Sophie", "Hugo", "Emma", "Alice", "Noah"]
LAST_NAMES = ["Dupont", "Martin", "Bernard", "Petit", "Durand", "Leroy", "Moreau", "Simon"]
COMPANIES = ["Acme SA", "Globex", "Initech", "Umbrella", "Soylent"]
TITLES = ["Directeur", "Comptable", "Développeur", "Commercial", "Assistant"]
CITIES = ["Paris", "Lyon", "Marseille", "Lille", "Nantes"]

HEADERS = {
    "fr": ["Prénom", "Nom", "Mobile", "Téléphone bureau", "Email", "Société", "Poste", "Adresse"],
    "en": ["First Name", "Last Name", "Mobile", "Work Phone", "Email", "Company", "Job Title", "Address"],
}


def _phone(rng: np.random.Generator) -> str:
    return "06" + "".join(str(d) for d in rng.integers(0, 10, 8))


def generate_contacts(rows: int, rng: np.random.Generator, blank_ratio: float = 0.05) -> list[list[Any]]:
    """Generate contact rows; roughly ``blank_ratio`` of them are left empty."""
    data: list[list[Any]] = []
    for i in range(rows):
        if rng.random() < blank_ratio:
            data.append([None] * 8)
            continue
        first = str(rng.choice(FIRST_NAMES))
        last = str(rng.choice(LAST_NAMES))
        data.append([
            first,
            last,
            _phone(rng),
            _phone(rng) if rng.random() < 0.5 else None,
            f"{first}.{last}{i}@example.com".lower() if rng.random() < 0.8 else None,
            str(rng.choice(COMPANIES)) if rng.random() < 0.6 else None,
            str(rng.choice(TITLES)) if rng.random() < 0.4 else None,
            f"{rng.integers(1, 200)} rue de la Paix, {rng.choice(CITIES)}" if rng.random() < 0.3 else None,
        ])
    return data


def create_workbook(output_path: Path, rows: int, sheets: list[str], lang: str = "fr", seed: int = 42) -> None:
    rng = np.random.default_rng(seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for sheet_name in sheets:
            sheet_data: list[list[Any]] = [[f"Contacts {sheet_name}"] + [None] * 7, HEADERS[lang]]
            sheet_data.extend(generate_contacts(rows, rng))
            pd.DataFrame(sheet_data).to_excel(writer, sheet_name=sheet_name, header=False, index=False)

    print(f"Created Excel file: {output_path}")
    print(f"  Sheets: {len(sheets)} ({', '.join(sheets)})")
    print(f"  Rows per sheet: {rows} (+ title and header rows)")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic contact workbook")
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--rows", type=int, default=100, help="Contact rows per sheet (default: 100)")
    parser.add_argument("--sheets", nargs="+", default=["Clients", "Fournisseurs"], help="Sheet names")
    parser.add_argument("--lang", choices=sorted(HEADERS), default="fr", help="Header language")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    if args.rows < 1:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    create_workbook(args.output, args.rows, args.sheets, args.lang, args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
