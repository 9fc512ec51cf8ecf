"""
parameter-validation — unit tests for the YAML settings catalog

File: tests/unit/validation/test_catalog.py

Purpose
- Validate loading, typed values, validation, and normalized dumps of setting catalogs.
"""

from __future__ import annotations

import http
from datetime import timedelta
from pathlib import Path

import pytest
import yaml

from parameter_validation.domain.data_types import ParameterDataType as DT
from parameter_validation.domain.errors import (
    ConstraintParserError,
    ErrorCode,
    ParameterConversionError,
)
from parameter_validation.validation import ParameterCatalog, ParameterSetting

CATALOG_YAML = """\
- name: port
  display_name: Listen port
  data_type: Int32
  constraints: "[MinValue(1)][MaxValue(65535)]"
  value: 70000
- name: host
  data_type: String
  constraints: "[Host][Null]"
  value: null
- name: mode
  data_type: Enum
  constraints: "[Values(Int32,Enabled=1,Disabled=0)]"
  value: Enabled
- name: status
  data_type: Enum
  constraints: "[Type(http:HTTPStatus)]"
  value: NOT_FOUND
- name: verbose
  data_type: Bool
  value: true
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_reads_settings_in_order(tmp_path: Path) -> None:
    catalog = ParameterCatalog.load(_write(tmp_path, CATALOG_YAML))
    assert [item.name for item in catalog] == ["port", "host", "mode", "status", "verbose"]
    assert len(catalog) == 5
    assert "port" in catalog
    assert catalog.source_path == tmp_path / "settings.yaml"

    port = catalog.require("port")
    assert port.data_type is DT.INT32
    assert port.value == "70000"
    assert port.effective_display_name == "Listen port"
    assert catalog.require("verbose").value == "true"
    assert catalog.get("missing") is None
    with pytest.raises(KeyError, match="unknown setting"):
        catalog.require("missing")


def test_native_values_use_constraint_type_information(tmp_path: Path) -> None:
    catalog = ParameterCatalog.load(_write(tmp_path, CATALOG_YAML))
    assert catalog.require("port").native_value() == 70000
    assert catalog.require("host").native_value() is None
    assert catalog.require("mode").native_value() == 1
    assert catalog.require("status").native_value() is http.HTTPStatus.NOT_FOUND
    assert catalog.require("verbose").native_value() is True


def test_validate_reports_only_failing_settings(tmp_path: Path) -> None:
    catalog = ParameterCatalog.load(_write(tmp_path, CATALOG_YAML))
    failures = catalog.validate()
    assert list(failures) == ["port"]
    (result,) = failures["port"]
    assert result.code is ErrorCode.VALUE_TOO_LARGE
    assert result.message == "Listen port must be less than or equal to 65535"

    fixed = catalog.replace(catalog.require("port").with_value(8080))
    assert fixed.validate() == {}
    assert fixed.require("port").value == "8080"
    assert catalog.require("port").value == "70000"


def test_with_value_serializes_invariant_forms() -> None:
    status = ParameterSetting("status", DT.ENUM, "[Type(http:HTTPStatus)]")
    assert status.with_value(http.HTTPStatus.OK).value == "OK"

    mode = ParameterSetting(
        "mode", "Enum", "[Values(Int32,Enabled=1,Disabled=0)]"  # type: ignore[arg-type]
    )
    assert mode.data_type is DT.ENUM
    assert mode.with_value(0).value == "0"
    assert mode.with_value(0).native_value() == 0
    assert mode.with_value(None).value is None
    with pytest.raises(ParameterConversionError):
        mode.with_value("Enabled")

    timeout = ParameterSetting("timeout", DT.TIME_SPAN, "[MaxValue(PT1H)]")
    assert timeout.with_value(timedelta(minutes=5)).value == "PT5M"


def test_enum_values_lookup_rejects_unknown_names() -> None:
    mode = ParameterSetting("mode", DT.ENUM, "[Values(Int32,Enabled=1)]", value="Sometimes")
    with pytest.raises(ParameterConversionError, match="neither a value name nor an integer"):
        mode.native_value()
    assert ParameterSetting(
        "mode", DT.ENUM, "[Values(Int32,Enabled=1)]", value="7"
    ).validate()[0].code is ErrorCode.ENUM_VALUE_NOT_DEFINED


def test_malformed_constraints_fail_on_use() -> None:
    setting = ParameterSetting("name", DT.STRING, "[MaxLength(3)", value="abc")
    with pytest.raises(ConstraintParserError):
        setting.validate()


def test_dump_normalizes_constraint_order(tmp_path: Path) -> None:
    catalog = ParameterCatalog(
        [
            ParameterSetting("host", DT.STRING, "[Host] [Null]", display_name="Host name"),
            ParameterSetting("port", DT.INT32, "[MinValue(1)]", value="80"),
        ]
    )
    destination = catalog.dump(tmp_path / "out" / "catalog.yaml")
    records = yaml.safe_load(destination.read_text(encoding="utf-8"))
    assert records == [
        {
            "name": "host",
            "display_name": "Host name",
            "data_type": "String",
            "constraints": "[Null][Host]",
            "value": None,
        },
        {"name": "port", "data_type": "Int32", "constraints": "[MinValue(1)]", "value": "80"},
    ]
    reloaded = ParameterCatalog.load(destination)
    assert [item.constraints for item in reloaded] == ["[Null][Host]", "[MinValue(1)]"]
    assert reloaded.require("host").display_name == "Host name"


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("name: port\n", "expected top-level YAML sequence"),
        ("- [1, 2]\n", r"settings.yaml\[0\]: ParameterSetting: expected object"),
        ("- name: port\n", r"settings.yaml\[0\]: ParameterSetting: missing required fields"),
        (
            "- {name: port, data_type: Int32, colour: red}\n",
            "unexpected fields",
        ),
        ("- {name: port, data_type: Integer}\n", "unknown data type 'Integer'"),
        ("- {name: port, data_type: None}\n", "data_type: must not be None"),
        ("- {name: ' ', data_type: Int32}\n", "name: must not be empty"),
        ("- {name: port, data_type: Int32, value: 1.5}\n", "expected string or integer"),
        (
            "- {name: port, data_type: Int32}\n- {name: port, data_type: Int32}\n",
            "duplicate setting name",
        ),
        ("- {name: port\n", "invalid YAML"),
    ],
)
def test_load_rejects_malformed_catalogs(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ParameterCatalog.load(_write(tmp_path, text))


def test_empty_file_loads_an_empty_catalog(tmp_path: Path) -> None:
    assert len(ParameterCatalog.load(_write(tmp_path, ""))) == 0


def test_catalog_rejects_foreign_items() -> None:
    with pytest.raises(TypeError, match="expected ParameterSetting"):
        ParameterCatalog([{"name": "port"}])  # type: ignore[list-item]
    with pytest.raises(KeyError):
        ParameterCatalog().replace(ParameterSetting("port", DT.INT32))
