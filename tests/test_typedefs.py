import pytest

from interopscan.inheritance import Access
from interopscan.named_decls import NamedDecl
from interopscan.typedefs import TypedefAnalysis, TypedefDecl, TypedefResult

NS = NamedDecl("ns")
OUTER = NamedDecl("class ns::Outer")
TAG = NamedDecl("class ns::Foo<int>")


def _lookup(table):
    return table.get


def make(**overrides):
    values = dict(name="FooInt", underlying=TAG, context=NS)
    values.update(overrides)
    return TypedefDecl(**values)


def test_str_format_and_empty():
    result = TypedefResult()
    assert str(result) == "[]"
    result.insert(NS, "FooInt")
    assert str(result) == "[ns,, FooInt]"


def test_round_trip_with_several_pairs():
    result = TypedefResult([(NS, "FooInt"), (OUTER, "Alias"), (NS, "Other")])
    table = {"ns": NS, "class ns::Outer": OUTER}
    parsed = TypedefResult.parse(str(result), _lookup(table))
    assert parsed == result
    assert len(parsed) == 3


def test_parse_empty_list():
    assert len(TypedefResult.parse("[]", _lookup({}))) == 0


@pytest.mark.parametrize("data", ["ns,, FooInt", "[ns,, FooInt", "[ns]", "[a,, b,, c]"])
def test_parse_rejects_malformed(data):
    with pytest.raises(ValueError):
        TypedefResult.parse(data, _lookup({"ns": NS, "a": NS, "c": NS}))


def test_parse_rejects_unknown_declaration():
    with pytest.raises(ValueError):
        TypedefResult.parse("[missing,, FooInt]", _lookup({"ns": NS}))


def test_insert_deduplicates():
    result = TypedefResult()
    result.insert(NS, "FooInt")
    result.insert(NS, "FooInt")
    assert result.spellings == frozenset({(NS, "FooInt")})


def test_is_subset_compares_declarations_only():
    small = TypedefResult([(NS, "A")])
    big = TypedefResult([(NS, "B"), (OUTER, "C")])
    assert small.is_subset(big) is True
    assert big.is_subset(small) is False
    assert TypedefResult().is_subset(small) is True


def test_compares_equal_uses_subset():
    analysis = TypedefAnalysis()
    expected = TypedefResult([(OUTER, "X")])
    assert analysis.compares_equal(expected, TypedefResult([(OUTER, "Y"), (NS, "Z")])) is True
    assert analysis.compares_equal(expected, TypedefResult([(NS, "Z")])) is False


def test_visit_records_qualifying_typedef():
    analysis = TypedefAnalysis()
    result = analysis.visit_typedef(make())
    assert result is analysis.data[TAG]
    analysis.visit_typedef(make(name="FooAlias", context=OUTER, context_kind="record"))
    assert analysis.data[TAG].spellings == frozenset({(NS, "FooInt"), (OUTER, "FooAlias")})


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_from_usd": False},
        {"in_public_header": False},
        {"access": Access.PRIVATE},
        {"access": Access.PROTECTED},
        {"name": ""},
        {"underlying": None},
        {"underlying_contains_usd_types": False},
        {"underlying_in_public_header": False},
        {"context": None},
        {"context_kind": "function"},
        {"context_kind": "classTemplate"},
        {"context_kind": "classTemplateSpecialization"},
    ],
)
def test_visit_skips_unqualified_typedefs(overrides):
    analysis = TypedefAnalysis()
    assert analysis.visit_typedef(make(**overrides)) is None
    assert analysis.data == {}


def test_public_access_is_accepted():
    analysis = TypedefAnalysis()
    analysis.visit_typedef(make(access=Access.PUBLIC, context=OUTER, context_kind="record"))
    assert analysis.data[TAG].spellings == frozenset({(OUTER, "FooInt")})


def test_visit_all_groups_by_tag():
    other_tag = NamedDecl("class ns::Bar")
    analysis = TypedefAnalysis()
    analysis.visit_all([make(), make(name="BarT", underlying=other_tag)])
    assert set(analysis.data) == {TAG, other_tag}
    assert analysis.data[other_tag].spellings == frozenset({(NS, "BarT")})


def test_allowable_context():
    assert make().in_allowable_context() is True
    assert make(context=None).in_allowable_context() is False
    assert make(context_kind="value").in_allowable_context() is False