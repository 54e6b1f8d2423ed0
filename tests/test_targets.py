"""
Tests for EngineTargets construction, merging and feature gating.

Verifies:
1. Lenient pair merge keeps per-engine minima and drops unknown entries.
2. Strict config conversion rejects unknown keys and bad versions.
3. `should_enable` only compares engines present on both sides.
"""

import logging

import pytest

from compat_targets.enums import Engine
from compat_targets.errors import ConfigConversionError, QueryResolutionError
from compat_targets.resolver import StaticQueryResolver
from compat_targets.targets import EngineTargets
from compat_targets.version import Version


def targets(**floors):
  """Builds EngineTargets from canonical-name keyword arguments."""
  return EngineTargets({Engine.parse(name): Version.parse(v) for name, v in floors.items()})


# --- from_pairs ---


def test_from_pairs_keeps_minimum():
  result = EngineTargets.from_pairs([("chrome", "90.0.0"), ("chrome", "80.0.0")])
  assert result.to_dict() == {"chrome": "80.0.0"}


def test_from_pairs_minimum_is_order_independent():
  result = EngineTargets.from_pairs([("chrome", "80.0.0"), ("chrome", "90.0.0")])
  assert result.get(Engine.CHROME) == Version(80)


def test_from_pairs_drops_unknown_engine():
  result = EngineTargets.from_pairs([("bogus", "1.0.0"), ("node", "18.0.0")])
  assert result == targets(node="18.0.0")
  assert len(result) == 1


def test_from_pairs_drops_unparsable_version():
  result = EngineTargets.from_pairs([("safari", "TP"), ("safari", "17.1"), ("op_mini", "all")])
  assert result.to_dict() == {"safari": "17.1.0"}


def test_from_pairs_merges_aliases_into_one_engine():
  result = EngineTargets.from_pairs([("and_chr", "120"), ("chrome", "119"), ("ios_saf", "16.6-16.7")])
  assert result.get(Engine.CHROME) == Version(119)
  assert result.get(Engine.IOS) == Version(16, 6)


def test_from_pairs_logs_dropped_entries_at_debug(caplog):
  with caplog.at_level(logging.DEBUG, logger="compat_targets"):
    EngineTargets.from_pairs([("bogus", "1"), ("safari", "TP")])
  messages = [r.getMessage() for r in caplog.records]
  assert any("bogus" in m for m in messages)
  assert any("TP" in m for m in messages)
  assert all(r.levelno == logging.DEBUG for r in caplog.records)


def test_from_pairs_idempotent_merge():
  pairs = [("chrome", "90"), ("chrome", "80"), ("node", "18"), ("and_ff", "100")]
  result = EngineTargets.from_pairs(pairs)
  before = result.copy()
  for name, version in pairs:
    result.merge_floor(Engine.resolve_alias(name), Version.parse(version))
  assert result == before
  assert result.merge(EngineTargets.from_pairs(pairs)) == before


def test_is_any_target():
  assert EngineTargets.from_pairs([]).is_any_target()
  assert EngineTargets().is_any_target()
  assert EngineTargets.from_config({}).is_any_target()
  assert not EngineTargets.from_pairs([("node", "18")]).is_any_target()
  assert not targets(chrome="1").is_any_target()


def test_all_unknown_pairs_is_any_target():
  assert EngineTargets.from_pairs([("bogus", "1"), ("op_mini", "all")]).is_any_target()


# --- narrow interface ---


def test_merge_floor_only_lowers():
  t = targets(chrome="80")
  assert t.merge_floor(Engine.CHROME, Version(90)) is False
  assert t.get(Engine.CHROME) == Version(80)
  assert t.merge_floor(Engine.CHROME, Version(70)) is True
  assert t.get(Engine.CHROME) == Version(70)


def test_set_floor_overrides_and_remove():
  t = targets(chrome="80")
  t.set_floor(Engine.CHROME, Version(90))
  assert t.get(Engine.CHROME) == Version(90)
  assert t.remove(Engine.CHROME) == Version(90)
  assert Engine.CHROME not in t
  assert t.remove(Engine.CHROME) is None


def test_copy_is_independent():
  original = targets(chrome="80")
  clone = original.copy()
  clone.merge_floor(Engine.NODE, Version(18))
  assert Engine.NODE not in original
  assert clone != original


def test_iteration_and_str():
  t = targets(node="18", chrome="80")
  assert set(t) == {Engine.NODE, Engine.CHROME}
  assert dict(t.items()) == {Engine.NODE: Version(18), Engine.CHROME: Version(80)}
  assert str(t) == "chrome 80.0.0, node 18.0.0"
  assert str(EngineTargets()) == "any target"


def test_not_hashable():
  with pytest.raises(TypeError):
    hash(EngineTargets())


# --- should_enable ---


def test_should_enable_when_floor_below_requirement():
  assert targets(chrome="80.0.0").should_enable(targets(chrome="90.0.0"))


def test_should_not_enable_when_floor_above_requirement():
  assert not targets(chrome="90.0.0").should_enable(targets(chrome="80.0.0"))


def test_should_not_enable_when_equal():
  assert not targets(chrome="90").should_enable(targets(chrome="90"))


def test_any_target_never_enables():
  assert not EngineTargets().should_enable(targets(chrome="1.0.0"))


def test_engine_absent_from_self_is_skipped():
  assert not targets(firefox="10.0.0").should_enable(targets(chrome="1.0.0"))


def test_any_engine_below_triggers():
  ambient = targets(chrome="100", safari="13")
  required = targets(chrome="91", safari="13.1")
  assert ambient.should_enable(required)


def test_empty_requirement_never_enables():
  assert not targets(chrome="1").should_enable(EngineTargets())


# --- from_config ---


def test_from_config_mapping():
  result = EngineTargets.from_config({"chrome": "58", "ie": 11, "safari": 10.1})
  assert result.to_dict() == {"chrome": "58.0.0", "ie": "11.0.0", "safari": "10.1.0"}


def test_from_config_none_is_any_target():
  assert EngineTargets.from_config(None).is_any_target()


def test_from_config_unknown_key():
  with pytest.raises(ConfigConversionError) as exc:
    EngineTargets.from_config({"chrome": "58", "netscape": "4"})
  assert exc.value.key == "netscape"
  assert exc.value.__cause__ is not None


def test_from_config_rejects_alias_keys():
  with pytest.raises(ConfigConversionError):
    EngineTargets.from_config({"and_chr": "58"})


@pytest.mark.parametrize("value", ["TP", "", True, None, ["58"]])
def test_from_config_bad_version(value):
  with pytest.raises(ConfigConversionError) as exc:
    EngineTargets.from_config({"chrome": value})
  assert exc.value.key == "chrome"


def test_from_config_rejects_other_shapes():
  with pytest.raises(ConfigConversionError):
    EngineTargets.from_config(42)


def test_from_config_esmodules_ignored(caplog):
  with caplog.at_level(logging.WARNING, logger="compat_targets"):
    result = EngineTargets.from_config({"esmodules": True, "node": "14"})
  assert result.to_dict() == {"node": "14.0.0"}
  assert any("esmodules" in r.getMessage() for r in caplog.records)


def test_from_config_esmodules_must_be_bool():
  with pytest.raises(ConfigConversionError):
    EngineTargets.from_config({"esmodules": "yes"})


def test_from_config_query_string(static_resolver):
  result = EngineTargets.from_config("node 18", resolver=static_resolver)
  assert result.to_dict() == {"node": "18.0.0"}


def test_from_config_query_list(static_resolver):
  static_resolver.add("node 18, ie 11", [("node", "18"), ("ie", "11")])
  result = EngineTargets.from_config(["node 18", "ie 11"], resolver=static_resolver)
  assert result.to_dict() == {"ie": "11.0.0", "node": "18.0.0"}


def test_from_config_browsers_then_explicit_override(static_resolver):
  result = EngineTargets.from_config({"browsers": "defaults", "chrome": "100", "node": "16"}, resolver=static_resolver)
  assert result.get(Engine.CHROME) == Version(100)
  assert result.get(Engine.NODE) == Version(16)
  assert result.get(Engine.IOS) == Version(16, 6)


def test_from_config_browsers_must_be_query(static_resolver):
  with pytest.raises(ConfigConversionError):
    EngineTargets.from_config({"browsers": 5}, resolver=static_resolver)
  with pytest.raises(ConfigConversionError):
    EngineTargets.from_config({"browsers": ["defaults", 5]}, resolver=static_resolver)


def test_from_config_propagates_resolution_error(static_resolver):
  with pytest.raises(QueryResolutionError):
    EngineTargets.from_config({"browsers": "not a real query"}, resolver=static_resolver)


# --- from_query ---


def test_from_query_merges_leniently(static_resolver):
  result = EngineTargets.from_query("defaults", resolver=static_resolver)
  assert result.to_dict() == {
    "chrome": "118.0.0",
    "edge": "119.0.0",
    "firefox": "119.0.0",
    "ios": "16.6.0",
    "safari": "17.1.0",
    "samsung": "23.0.0",
  }


def test_from_query_uses_default_resolver(default_static_resolver):
  assert EngineTargets.from_query("ie 11").to_dict() == {"ie": "11.0.0"}


def test_from_query_propagates_error():
  resolver = StaticQueryResolver()
  with pytest.raises(QueryResolutionError) as exc:
    EngineTargets.from_query("last 2 versions", resolver=resolver)
  assert exc.value.query == "last 2 versions"


# --- from_target_list ---


def test_from_target_list_string():
  result = EngineTargets.from_target_list("chrome58, node12.1,opera_mobile46")
  assert result.to_dict() == {"chrome": "58.0.0", "node": "12.1.0", "opera_mobile": "46.0.0"}


def test_from_target_list_min_merges_duplicates():
  assert EngineTargets.from_target_list(["Chrome90", "chrome80"]).to_dict() == {"chrome": "80.0.0"}


@pytest.mark.parametrize("token", ["chrome", "58", "netscape4", "chrome1.2.3.4"])
def test_from_target_list_rejects(token):
  with pytest.raises(ConfigConversionError):
    EngineTargets.from_target_list(token)


def test_from_pairs_tolerates_non_string_engine_names():
  result = EngineTargets.from_pairs([(["chrome"], "1"), (None, "2"), ("node", "18")])
  assert result.to_dict() == {"node": "18.0.0"}
