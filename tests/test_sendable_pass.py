import pytest

from interopscan.sendable import (
    Dependency,
    DependenciesResult,
    DependencyKind,
    SendableKind,
    SendableResult,
)
from interopscan.sendable_pass import SendableAnalysis, strongly_connected_components
from interopscan.type_model import TypeKind, TypeRef, UnsupportedTypeError

INT = TypeRef(TypeKind.BUILTIN_INTEGER, spelling="int")
INT_PTR = TypeRef(TypeKind.POINTER, inner=INT)
FUNC = TypeRef(TypeKind.FUNCTION_PROTO, spelling="void ()")


def record(name):
    return TypeRef(TypeKind.RECORD, tag=name)


def deps(*pairs):
    result = DependenciesResult()
    for name, type_ in pairs:
        result.add_field_dependency(name, type_)
    return result


def test_scc_groups_cycle_and_orders_sinks_first():
    components = strongly_connected_components({1: [2], 2: [1], 3: [1]})
    assert components == [frozenset({1, 2}), frozenset({3})]


def test_scc_includes_target_only_nodes():
    components = strongly_connected_components({"a": ["b"]})
    assert components == [frozenset({"b"}), frozenset({"a"})]


def test_scc_every_node_in_exactly_one_component():
    graph = {1: [2, 3], 2: [3], 3: [1, 4], 4: [5], 5: [4], 6: []}
    components = strongly_connected_components(graph)
    members = [node for comp in components for node in comp]
    assert sorted(members) == [1, 2, 3, 4, 5, 6]
    assert frozenset({1, 2, 3}) in components
    assert frozenset({4, 5}) in components
    assert components.index(frozenset({4, 5})) < components.index(frozenset({1, 2, 3}))


def test_builtin_field_is_sendable():
    analysis = SendableAnalysis({"A": deps(("x", INT))})
    results = analysis.run()
    assert results["A"].kind is SendableKind.AVAILABLE


def test_pointer_field_blocks_sendability():
    analysis = SendableAnalysis({"A": deps(("p", INT_PTR))})
    result = analysis.run()["A"]
    assert result.kind is SendableKind.UNAVAILABLE
    assert result.unavailable_dependencies.dependencies == [
        Dependency(DependencyKind.FIELD, "p", INT_PTR)
    ]


def test_unavailability_spreads_to_dependents():
    analysis = SendableAnalysis(
        {"A": deps(("p", INT_PTR)), "B": deps(("a", record("A")), ("x", INT))}
    )
    results = analysis.run()
    assert results["B"].kind is SendableKind.UNAVAILABLE
    assert results["B"].unavailable_dependencies.dependencies == [
        Dependency(DependencyKind.FIELD, "a", record("A"))
    ]


def test_cycle_of_sendable_types_is_sendable():
    analysis = SendableAnalysis(
        {"A": deps(("b", record("B")), ("x", INT)), "B": deps(("a", record("A")))}
    )
    results = analysis.run()
    assert results["A"].is_available()
    assert results["B"].is_available()


def test_cycle_shares_blocking_reason():
    analysis = SendableAnalysis(
        {"A": deps(("b", record("B")), ("p", INT_PTR)), "B": deps(("a", record("A")))}
    )
    results = analysis.run()
    expected = [Dependency(DependencyKind.FIELD, "p", INT_PTR)]
    assert results["A"].unavailable_dependencies.dependencies == expected
    assert results["B"].unavailable_dependencies.dependencies == expected
    assert results["B"].kind is SendableKind.UNAVAILABLE


def test_special_available_overrides_fields():
    special = DependenciesResult([Dependency(DependencyKind.SPECIAL_AVAILABLE)])
    special.add_field_dependency("p", INT_PTR)
    results = SendableAnalysis({"A": special}).run()
    assert results["A"].kind is SendableKind.AVAILABLE


def test_special_reference_is_unavailable_with_all_dependencies():
    special = DependenciesResult(
        [Dependency(DependencyKind.SPECIAL_IMPORTED_AS_REFERENCE)]
    )
    results = SendableAnalysis({"A": special}).run()
    assert results["A"].kind is SendableKind.UNAVAILABLE
    assert results["A"].unavailable_dependencies == special


def test_reference_type_blocks_dependents():
    special = DependenciesResult(
        [Dependency(DependencyKind.SPECIAL_IMPORTED_AS_REFERENCE)]
    )
    analysis = SendableAnalysis({"R": special, "B": deps(("r", record("R")))})
    results = analysis.run()
    assert results["B"].kind is SendableKind.UNAVAILABLE


def test_unknown_tag_is_not_sendable():
    analysis = SendableAnalysis()
    assert analysis.is_sendable("Missing") is False
    assert analysis.is_sendable(record("Missing")) is False
    assert analysis.is_sendable(None) is False


def test_is_sendable_on_plain_types():
    analysis = SendableAnalysis()
    assert analysis.is_sendable(INT) is True
    assert analysis.is_sendable(INT_PTR) is False


def test_unsupported_field_type_raises():
    analysis = SendableAnalysis({"A": deps(("f", FUNC))})
    with pytest.raises(UnsupportedTypeError):
        analysis.run()


def test_compares_equal_on_kind_and_dependencies():
    analysis = SendableAnalysis()
    blocked = Dependency(DependencyKind.FIELD, "p", INT_PTR)
    other = Dependency(DependencyKind.FIELD, "x", INT)
    expected = SendableResult(SendableKind.UNAVAILABLE, DependenciesResult([blocked]))
    actual = SendableResult(
        SendableKind.UNAVAILABLE, DependenciesResult([other, blocked])
    )
    assert analysis.compares_equal(expected, actual) is True
    assert analysis.compares_equal(actual, expected) is False
    assert analysis.compares_equal(
        SendableResult(SendableKind.AVAILABLE), expected
    ) is False


def test_compares_equal_needs_distinct_matches():
    analysis = SendableAnalysis()
    blocked = Dependency(DependencyKind.FIELD, "p", INT_PTR)
    expected = SendableResult(
        SendableKind.UNAVAILABLE, DependenciesResult([blocked, blocked])
    )
    actual = SendableResult(SendableKind.UNAVAILABLE, DependenciesResult([blocked]))
    assert analysis.compares_equal(expected, actual) is False