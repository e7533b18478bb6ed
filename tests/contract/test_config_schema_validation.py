from __future__ import annotations

import json

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from src.config.loader import SCHEMA_PATH

"""Config schema contract test."""


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_valid_example():
    config = {
        "source_file": "./data/contacts.xlsx",
        "output_directory": "./out",
        "tag_with_sheet_name": True,
        "escape_values": False,
        "sheets": {
            "Clients": {
                "include": True,
                "header_row": 2,
                "tag_with_sheet_name": False,
                "mapping": {"fullName": 0, "phone2": "Téléphone bureau", "title": None, "email": -1},
            },
            "Archives": {"include": False},
        },
    }
    jsonschema.validate(config, _schema())


def test_config_schema_empty_is_valid():
    jsonschema.validate({}, _schema())


@pytest.mark.parametrize(
    "config",
    [
        {"unknown": 1},
        {"sheets": {"Clients": {"table": "x"}}},
        {"sheets": {"Clients": {"header_row": 0}}},
        {"sheets": {"Clients": {"mapping": {"fax": 1}}}},
        {"sheets": {"Clients": {"mapping": {"email": -2}}}},
        {"sheets": {"Clients": {"mapping": {"email": ""}}}},
        {"tag_with_sheet_name": "yes"},
        {"output_directory": ""},
    ],
)
def test_config_schema_rejects_invalid(config):
    with pytest.raises(ValidationError):
        jsonschema.validate(config, _schema())
