from __future__ import annotations

import pytest

from liscaf.errors import ConfigurationError
from liscaf.naming import CaseStyle, derive_variants
from liscaf.substitution import SubstitutionPlan, SubstitutionRule, build_plan

EVERY_FORM = (
    "AcmeApp acme_app ACME_APP acme-app acmeApp\n"
    "Acme App | acme app | Acme_App | acmeapp | ACMEAPP\n"
)


@pytest.fixture()
def plan() -> SubstitutionPlan:
    return build_plan("acme-app", "my-cool-app")


def test_plan_pairs_styles(plan: SubstitutionPlan):
    assert {rule.pattern: rule.replacement for rule in plan} == {
        "acme-app": "my-cool-app",
        "acme_app": "my_cool_app",
        "ACME_APP": "MY_COOL_APP",
        "Acme App": "My Cool App",
        "acme app": "my cool app",
        "Acme_App": "My_Cool_App",
        "AcmeApp": "MyCoolApp",
        "acmeApp": "myCoolApp",
        "acmeapp": "mycoolapp",
        "ACMEAPP": "MYCOOLAPP",
    }
    assert not plan.degraded


def test_plan_orders_longest_first_then_by_priority(plan: SubstitutionPlan):
    assert [rule.style for rule in plan] == [
        CaseStyle.KEBAB,
        CaseStyle.SNAKE,
        CaseStyle.CONSTANT,
        CaseStyle.TITLE,
        CaseStyle.SPACED,
        CaseStyle.PASCAL_SNAKE,
        CaseStyle.PASCAL,
        CaseStyle.CAMEL,
        CaseStyle.FLAT,
        CaseStyle.FLAT_UPPER,
    ]


def test_plan_is_reproducible():
    assert build_plan("acme-app", "my-cool-app") == build_plan("acme-app", "my-cool-app")


def test_apply_rewrites_every_style(plan: SubstitutionPlan):
    assert plan.apply(EVERY_FORM) == (
        "MyCoolApp my_cool_app MY_COOL_APP my-cool-app myCoolApp\n"
        "My Cool App | my cool app | My_Cool_App | mycoolapp | MYCOOLAPP\n"
    )


def test_apply_without_occurrences_is_identity(plan: SubstitutionPlan):
    text = "nothing to see here: acme, app, Acme-ish\n"
    assert plan.apply(text) == text
    assert plan.apply_bytes(text.encode("utf-8")) == text.encode("utf-8")


NAME_PAIRS = [
    pytest.param("acme", "widget", id="single-word"),
    pytest.param("acme-app", "my-cool-app", id="two-to-three-words"),
    pytest.param("acme-data-app", "my-cool-app", id="three-words"),
    pytest.param("HTTPServer", "api-gateway", id="acronym"),
    pytest.param("v2-api", "web3-kit", id="digits"),
]


def _every_form(name: str) -> str:
    variants = derive_variants(name)
    del variants[CaseStyle.RAW]
    return " | ".join(dict.fromkeys(variants.values()))


@pytest.mark.parametrize("old_name, new_name", NAME_PAIRS)
def test_apply_is_idempotent_for_shipped_styles(old_name, new_name):
    plan = build_plan(old_name, new_name)
    once = plan.apply(_every_form(old_name))
    assert once == _every_form(new_name)
    assert plan.apply(once) == once
    assert plan.collisions() == []


@pytest.mark.parametrize("old_name, new_name", NAME_PAIRS)
def test_reverse_plan_recovers_original(old_name, new_name):
    text = _every_form(old_name)
    forwards = build_plan(old_name, new_name)
    backwards = build_plan(new_name, old_name)
    assert backwards.apply(forwards.apply(text)) == text


def test_reverse_plan_recovers_mixed_text(plan: SubstitutionPlan):
    backwards = build_plan("my-cool-app", "acme-app")
    assert backwards.apply(plan.apply(EVERY_FORM)) == EVERY_FORM


def test_no_op_pairs_are_dropped():
    assert not build_plan("acme-app", "acme-app")
    assert len(build_plan("acme-app", "AcmeApp")) == 0


def test_single_word_template_uses_highest_priority_style():
    plan = build_plan("acme", "my-app")
    assert {rule.pattern: rule.replacement for rule in plan} == {
        "acme": "my-app",
        "ACME": "MY_APP",
        "Acme": "MyApp",
    }


def test_collisions_reported_when_replacement_contains_pattern():
    plan = build_plan("app", "my-app")
    produced = {(first.replacement, second.pattern) for first, second in plan.collisions()}
    assert ("my-app", "app") in produced


def test_scan_never_rescans_replacements():
    plan = SubstitutionPlan(
        (
            SubstitutionRule("ab", "b", CaseStyle.KEBAB),
            SubstitutionRule("b", "c", CaseStyle.SNAKE),
        )
    )
    # independent passes would give "cc"
    assert plan.apply("abb") == "bc"


def test_scan_claims_positions_left_to_right():
    plan = SubstitutionPlan(
        (
            SubstitutionRule("ab", "1", CaseStyle.KEBAB),
            SubstitutionRule("bc", "2", CaseStyle.SNAKE),
        )
    )
    assert plan.apply("abc") == "1c"
    assert plan.apply("bcab") == "21"


def test_plan_rejects_duplicate_patterns():
    with pytest.raises(ValueError):
        SubstitutionPlan(
            (
                SubstitutionRule("acme", "one", CaseStyle.KEBAB),
                SubstitutionRule("acme", "two", CaseStyle.SNAKE),
            )
        )


def test_undecomposable_name_degrades_to_raw_form():
    plan = build_plan("acme-app", "c++-tools")
    assert plan.degraded
    assert plan.rules == (SubstitutionRule("acme-app", "c++-tools", CaseStyle.RAW),)
    assert plan.apply("AcmeApp acme-app") == "AcmeApp c++-tools"


@pytest.mark.parametrize("new_name", ["my/app", "my\\app"])
def test_replacement_with_path_separator_is_rejected(new_name):
    with pytest.raises(ConfigurationError):
        build_plan("acme-app", new_name)


@pytest.mark.parametrize("old_name, new_name", [("", "my-app"), ("acme-app", "   ")])
def test_empty_names_are_configuration_errors(old_name, new_name):
    with pytest.raises(ConfigurationError):
        build_plan(old_name, new_name)


def test_apply_bytes_keeps_surrounding_unicode(plan: SubstitutionPlan):
    data = "café acme-app ☕".encode("utf-8")
    assert plan.apply_bytes(data) == "café my-cool-app ☕".encode("utf-8")
