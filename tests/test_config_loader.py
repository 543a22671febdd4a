from pathlib import Path

from payload_masking.config import DEFAULT_FIELDS, MaskingConfig, build_allowlist, create_engine
from payload_masking.config_loader import resolve_config_path
from payload_masking.core.strategies import (
    AccountNumberMaskingStrategy,
    EmailMaskingStrategy,
    NameMaskingStrategy,
    PatternMaskingStrategy,
    PhoneNumberMaskingStrategy,
)

REPO_CONFIG = Path(__file__).resolve().parent.parent / "masking_config.yaml"


def _write_cfg(tmp_path, content: str) -> str:
    path = tmp_path / "cfg.yaml"
    path.write_text(content)
    return str(path)


def test_load_default_config(monkeypatch):
    monkeypatch.delenv("MASKING_ENABLED", raising=False)
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg = MaskingConfig.from_yaml(str(REPO_CONFIG))
    assert cfg.enabled is True
    assert cfg.fields == DEFAULT_FIELDS
    assert [type(s) for s in cfg.registry] == [
        NameMaskingStrategy,
        EmailMaskingStrategy,
        PhoneNumberMaskingStrategy,
    ]
    assert cfg.fail_closed is False


def test_no_file_uses_builtin_defaults(monkeypatch):
    monkeypatch.delenv("MASKING_ENABLED", raising=False)
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg = MaskingConfig.from_yaml(None)
    assert cfg.enabled is True
    assert cfg.fields == DEFAULT_FIELDS
    assert len(cfg.registry) == 3


def test_ignores_unknown_fields(tmp_path, monkeypatch):
    monkeypatch.delenv("MASKING_ENABLED", raising=False)
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg_path = _write_cfg(
        tmp_path,
        """
masking:
  enabled: true
unknown:
  foo: bar
""",
    )
    cfg = MaskingConfig.from_yaml(cfg_path)
    assert cfg.enabled is True
    assert cfg.fields == DEFAULT_FIELDS


def test_custom_fields_replace_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg_path = _write_cfg(tmp_path, "masking:\n  fields: ' Name , EMAIL '\n")
    cfg = MaskingConfig.from_yaml(cfg_path)
    assert cfg.fields == frozenset({"name", "email"})


def test_fields_as_yaml_list(tmp_path, monkeypatch):
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg_path = _write_cfg(tmp_path, "masking:\n  fields: [phone, Mobile_Phone]\n")
    cfg = MaskingConfig.from_yaml(cfg_path)
    assert cfg.fields == frozenset({"phone", "mobile_phone"})


def test_build_allowlist_falls_back_to_defaults():
    assert build_allowlist(None) == DEFAULT_FIELDS
    assert build_allowlist("") == DEFAULT_FIELDS
    assert build_allowlist(" , ,") == DEFAULT_FIELDS
    assert build_allowlist([]) == DEFAULT_FIELDS
    assert build_allowlist("name,custom") == frozenset({"name", "custom"})


def test_strategy_order_and_custom_rules(tmp_path, monkeypatch):
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg_path = _write_cfg(
        tmp_path,
        """
masking:
  fields: "name,card_number,ssn"
  mask_char: "#"
  strategies: [account, name]
  custom_rules:
    - key: "^ssn$"
      keep_last: 2
""",
    )
    cfg = MaskingConfig.from_yaml(cfg_path)
    strategies = list(cfg.registry)
    assert isinstance(strategies[0], AccountNumberMaskingStrategy)
    assert isinstance(strategies[1], NameMaskingStrategy)
    assert isinstance(strategies[2], PatternMaskingStrategy)
    assert all(s.mask_char == "#" for s in strategies)
    assert cfg.registry.find("ssn").apply("123-45-6789") == "###-##-##89"


def test_create_engine(tmp_path, monkeypatch):
    monkeypatch.delenv("MASKING_ENABLED", raising=False)
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg_path = _write_cfg(tmp_path, "masking:\n  fields: name\n")
    engine = create_engine(cfg_path)
    assert engine.mask_document('{"name": "John Smith", "email": "a@b.c"}') == (
        '{"name":"J*** S****","email":"a@b.c"}'
    )


def test_empty_yaml_list_items_are_skipped(tmp_path, monkeypatch):
    monkeypatch.delenv("MASKING_FIELDS", raising=False)
    cfg_path = _write_cfg(tmp_path, "masking:\n  fields:\n    - name\n    -\n    - email\n")
    cfg = MaskingConfig.from_yaml(cfg_path)
    assert cfg.fields == frozenset({"name", "email"})
    assert build_allowlist([None, " "]) == DEFAULT_FIELDS


def test_resolve_config_path(tmp_path, monkeypatch):
    missing = str(tmp_path / "missing.yaml")
    assert resolve_config_path(missing) == missing

    monkeypatch.setenv("MASKING_CONFIG_PATH", "from-env.yaml")
    assert resolve_config_path() == "from-env.yaml"

    monkeypatch.delenv("MASKING_CONFIG_PATH")
    monkeypatch.chdir(tmp_path)
    assert resolve_config_path() is None
    (tmp_path / "masking_config.yaml").write_text("masking: {}\n")
    assert resolve_config_path() == "masking_config.yaml"
