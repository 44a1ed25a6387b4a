import json

import pytest

from guionbd.config import DEFAULT_CONFIG, config_from_dict, load_config
from guionbd.segmentar import DelimiterStyle


def test_defaults():
    assert DEFAULT_CONFIG.delimiter_style is DelimiterStyle.AUTO
    assert DEFAULT_CONFIG.drop_invalid is False
    assert DEFAULT_CONFIG.default_status == "active"
    assert "DE" in DEFAULT_CONFIG.stopwords
    assert DEFAULT_CONFIG.month_names["SETIEMBRE"] == 9


def test_with_overrides_ignores_none_and_coerces():
    cfg = DEFAULT_CONFIG.with_overrides(delimiter_style=">>>", drop_invalid=None, default_status="inactive")
    assert cfg.delimiter_style is DelimiterStyle.MARKER
    assert cfg.drop_invalid is False
    assert cfg.default_status == "inactive"
    assert DEFAULT_CONFIG.default_status == "active"


def test_with_overrides_rejects_bad_values():
    with pytest.raises(ValueError):
        DEFAULT_CONFIG.with_overrides(default_status="borrador")
    with pytest.raises(ValueError):
        DEFAULT_CONFIG.with_overrides(delimiter_style="***")


def test_config_from_dict():
    cfg = config_from_dict({
        "delimiter_style": "underscore",
        "drop_invalid": True,
        "stopwords": ["según", "acerca"],
        "month_names": {"Ener": 1},
        "program_aliases": {"AMDC": "MÚSICA DESDE MI CIUDAD"},
    })
    assert cfg.delimiter_style is DelimiterStyle.UNDERSCORE
    assert cfg.drop_invalid is True
    assert cfg.stopwords == frozenset({"SEGUN", "ACERCA"})
    assert cfg.month_names["ENER"] == 1
    assert cfg.month_names["MARZO"] == 3
    assert cfg.program_aliases["AMDC"] == "MÚSICA DESDE MI CIUDAD"
    assert cfg.program_aliases["BDB"] == "BUENOS DÍAS BAYAMO"


def test_config_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="separador"):
        config_from_dict({"separador": ">>>"})


def test_load_config(tmp_path):
    path = tmp_path / "guionbd.json"
    path.write_text(json.dumps({"max_tags": 2}), encoding="utf-8")
    assert load_config(str(path)).max_tags == 2

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))
