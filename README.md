# interopscan

`interopscan` holds the results and passes that decide how C++ types are seen
from Swift. It covers Sendable analysis over a dependency graph, public
inheritance and subtypes, typedef spellings of tag types, enum cases, and the
members of the value type names table. Most results have a text form that can
be written out and read back with `parse`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Text forms

Structured results serialize as a bracketed list whose items are separated by
`",, "`. `parse` raises `ValueError` when the text is malformed.

```python
from interopscan.enums import EnumResult

result = EnumResult(is_scoped=True)
result.add_case("Red", 0)
result.add_case("Green", 1)
str(result)                       # "[scoped,, Red,, 0,, Green,, 1]"
EnumResult.parse(str(result))     # an equal EnumResult
```

Adding a case again with the same value does nothing. Adding it with a
different value raises `EnumCaseConflictError`.

`ValueTypeNamesMembersResult` (in `interopscan.value_type_names`) is a list of
member names. `collect_value_type_names` takes `(name, type spelling)` pairs and
keeps the names whose type is spelled `SdfValueTypeName`:

```python
from interopscan.value_type_names import collect_value_type_names

names = collect_value_type_names([("Bool", "SdfValueTypeName"), ("count", "int")])
str(names)                        # "[Bool]"
```

`FindNamedDeclsResult` and `SchemasResult` are in `interopscan.named_decls`, and
`NoticeSubclassesResult` is in `interopscan.notices`. The two markers print as
`"."`, and their `parse` always returns a fresh value.

## Types and sendability

`interopscan.type_model` describes C++ types as `TypeRef` values, each with a
`TypeKind`. `TypeRef.canonical()` strips sugar such as typedefs, elaborated
names and `using` aliases, along with top-level `const`. `is_type_sendable`
walks through sugar, arrays, atomics and vectors. Integers, floating types,
`nullptr` and member pointers count as Sendable. Pointers, references, block
pointers and Objective-C objects do not. Enum and record types are passed to a
callback, and any other kind raises `UnsupportedTypeError`.

`interopscan.sendable` holds `Dependency`, `DependenciesResult` and
`SendableResult`. `SendableAnalysis` (in `interopscan.sendable_pass`) takes a
`DependenciesResult` for each tag and builds a graph from them. It splits the
graph with `strongly_connected_components`, which returns the components in
reverse topological order. It then marks a component unavailable when the
component depends on a type that is not Sendable, and records the blocking
dependencies.

```python
from interopscan.sendable import DependenciesResult
from interopscan.sendable_pass import SendableAnalysis
from interopscan.type_model import TypeKind, TypeRef

int_type = TypeRef(TypeKind.BUILTIN_INTEGER, "int")
counter = DependenciesResult()
counter.add_field_dependency("count", int_type)
node = DependenciesResult()
node.add_field_dependency("next", TypeRef(TypeKind.POINTER, inner=int_type))

results = SendableAnalysis({"Counter": counter, "Node": node}).run()
str(results["Counter"])           # "available"
str(results["Node"])              # "unavailable [int * next]"
```

## Other passes

- `PublicInheritanceAnalysis` (in `interopscan.inheritance`) records the public
  bases of each defining `Record` it visits. A base written without an access
  specifier counts as public only when the derived type is a struct. After
  `finish()`, `public_subtypes(base)` returns the base together with every
  record derived from it publicly, at any depth. Calling it before `finish()`
  raises `RuntimeError`.
- `TypedefAnalysis` (in `interopscan.typedefs`) collects the `TypedefDecl`
  values that are public, come from public headers and name a tag. It stores
  them in a `TypedefResult` for each tag, as pairs of the enclosing declaration
  and the spelling. A typedef whose context is a template, a function, a
  variable and the like is skipped.

## What the package does not do

The package does not read C++ source or headers. Callers must build the
`Record`, `TypedefDecl`, `TypeRef` and `DependenciesResult` values themselves.
It provides no command-line tool and writes no files. Saving and loading result
text is left to the caller.