"""A small model of C++ types and the rule deciding whether one is Sendable."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class TypeKind(Enum):
    """The kinds of C++ type the sendability rule distinguishes."""

    ADJUSTED = "adjusted"
    DECAYED = "decayed"
    CONSTANT_ARRAY = "constantArray"
    ARRAY_PARAMETER = "arrayParameter"
    DEPENDENT_SIZED_ARRAY = "dependentSizedArray"
    INCOMPLETE_ARRAY = "incompleteArray"
    VARIABLE_ARRAY = "variableArray"
    ATOMIC = "atomic"
    ATTRIBUTED = "attributed"
    BTF_TAG_ATTRIBUTED = "btfTagAttributed"
    BIT_INT = "bitInt"
    BLOCK_POINTER = "blockPointer"
    COUNT_ATTRIBUTED = "countAttributed"
    BUILTIN_INTEGER = "builtinInteger"
    BUILTIN_FLOATING = "builtinFloating"
    BUILTIN_NULLPTR = "builtinNullptr"
    BUILTIN_OBJC_ID = "builtinObjCId"
    BUILTIN_OTHER = "builtinOther"
    COMPLEX = "complex"
    DECLTYPE = "decltype"
    AUTO = "auto"
    DEDUCED_TEMPLATE_SPECIALIZATION = "deducedTemplateSpecialization"
    DEPENDENT_ADDRESS_SPACE = "dependentAddressSpace"
    DEPENDENT_BIT_INT = "dependentBitInt"
    DEPENDENT_SIZED_EXT_VECTOR = "dependentSizedExtVector"
    DEPENDENT_VECTOR = "dependentVector"
    FUNCTION_NO_PROTO = "functionNoProto"
    FUNCTION_PROTO = "functionProto"
    INJECTED_CLASS_NAME = "injectedClassName"
    MACRO_QUALIFIED = "macroQualified"
    CONSTANT_MATRIX = "constantMatrix"
    DEPENDENT_SIZED_MATRIX = "dependentSizedMatrix"
    MEMBER_POINTER = "memberPointer"
    OBJC_OBJECT_POINTER = "objcObjectPointer"
    OBJC_ID_OBJECT = "objcIdObject"
    OBJC_INTERFACE = "objcInterface"
    OBJC_TYPE_PARAM = "objcTypeParam"
    PACK_EXPANSION = "packExpansion"
    PACK_INDEXING = "packIndexing"
    PAREN = "paren"
    PIPE = "pipe"
    POINTER = "pointer"
    LVALUE_REFERENCE = "lvalueReference"
    RVALUE_REFERENCE = "rvalueReference"
    SUBST_TEMPLATE_TYPE_PARM_PACK = "substTemplateTypeParmPack"
    SUBST_TEMPLATE_TYPE_PARM = "substTemplateTypeParm"
    ENUM = "enum"
    RECORD = "record"
    TEMPLATE_SPECIALIZATION = "templateSpecialization"
    TEMPLATE_TYPE_PARM = "templateTypeParm"
    TYPE_OF_EXPR = "typeOfExpr"
    TYPE_OF = "typeOf"
    DEPENDENT_NAME = "dependentName"
    DEPENDENT_TEMPLATE_SPECIALIZATION = "dependentTemplateSpecialization"
    ELABORATED = "elaborated"
    TYPEDEF = "typedef"
    UNARY_TRANSFORM = "unaryTransform"
    UNRESOLVED_USING = "unresolvedUsing"
    USING = "using"
    VECTOR = "vector"
    EXT_VECTOR = "extVector"


# Sugar: kinds that only name or wrap another type without changing it.
_SUGAR = frozenset(
    {
        TypeKind.ATTRIBUTED,
        TypeKind.DECLTYPE,
        TypeKind.AUTO,
        TypeKind.SUBST_TEMPLATE_TYPE_PARM,
        TypeKind.TEMPLATE_SPECIALIZATION,
        TypeKind.ELABORATED,
        TypeKind.TYPEDEF,
        TypeKind.UNARY_TRANSFORM,
        TypeKind.USING,
        TypeKind.PAREN,
        TypeKind.MACRO_QUALIFIED,
    }
)

_ELEMENT_WRAPPERS = frozenset(
    {
        TypeKind.CONSTANT_ARRAY,
        TypeKind.INCOMPLETE_ARRAY,
        TypeKind.ATOMIC,
        TypeKind.VECTOR,
        TypeKind.EXT_VECTOR,
    }
)

_NEEDS_INNER = _SUGAR | _ELEMENT_WRAPPERS
_TAGS = frozenset({TypeKind.ENUM, TypeKind.RECORD})

_ARRAYS = frozenset(
    {
        TypeKind.CONSTANT_ARRAY,
        TypeKind.ARRAY_PARAMETER,
        TypeKind.DEPENDENT_SIZED_ARRAY,
        TypeKind.INCOMPLETE_ARRAY,
        TypeKind.VARIABLE_ARRAY,
    }
)

_ALWAYS_SENDABLE = frozenset(
    {
        TypeKind.BUILTIN_INTEGER,
        TypeKind.BUILTIN_FLOATING,
        TypeKind.BUILTIN_NULLPTR,
        TypeKind.MEMBER_POINTER,
    }
)

_NEVER_SENDABLE = frozenset(
    {
        TypeKind.BLOCK_POINTER,
        TypeKind.BUILTIN_OBJC_ID,
        TypeKind.OBJC_OBJECT_POINTER,
        TypeKind.OBJC_ID_OBJECT,
        TypeKind.POINTER,
        TypeKind.LVALUE_REFERENCE,
        TypeKind.RVALUE_REFERENCE,
    }
)


class UnsupportedTypeError(ValueError):
    """Raised when a type has no defined sendability."""

    def __init__(self, type_: TypeRef) -> None:
        super().__init__(f"cannot decide sendability of {type_.kind.value} type {type_}")
        self.type_ = type_


@dataclass(frozen=True)
class TypeRef:
    """A C++ type: its kind, an optional spelling, wrapped type and tag name."""

    kind: TypeKind
    spelling: str = ""
    inner: Optional[TypeRef] = None
    tag: Optional[str] = None
    is_const: bool = False

    def __post_init__(self) -> None:
        if self.kind in _NEEDS_INNER and self.inner is None:
            raise ValueError(f"a {self.kind.value} type needs an inner type")
        if self.kind in _TAGS and not self.tag:
            raise ValueError(f"a {self.kind.value} type needs a tag name")

    def _canonical_qualified(self) -> TypeRef:
        node = self
        is_const = self.is_const
        while node.kind in _SUGAR:
            node = node.inner
            is_const = is_const or node.is_const
        if node.inner is None:
            return replace(node, is_const=is_const)
        return replace(
            node,
            inner=node.inner._canonical_qualified(),
            is_const=is_const,
            spelling="",
        )

    def canonical(self) -> TypeRef:
        """Return the type with all sugar removed and no top-level qualifiers."""
        return replace(self._canonical_qualified(), is_const=False)

    def _base_spelling(self) -> str:
        if self.spelling:
            return self.spelling
        if self.tag:
            return self.tag
        if self.inner is not None:
            if self.kind is TypeKind.POINTER:
                return f"{self.inner} *"
            if self.kind is TypeKind.LVALUE_REFERENCE:
                return f"{self.inner} &"
            if self.kind is TypeKind.RVALUE_REFERENCE:
                return f"{self.inner} &&"
            if self.kind in _ARRAYS:
                return f"{self.inner}[]"
            return str(self.inner)
        return self.kind.value

    def __str__(self) -> str:
        base = self._base_spelling()
        if not self.is_const:
            return base
        if self.kind in (
            TypeKind.POINTER,
            TypeKind.LVALUE_REFERENCE,
            TypeKind.RVALUE_REFERENCE,
        ):
            return f"{base} const"
        return f"const {base}"


def is_type_sendable(
    type_: Optional[TypeRef], is_tag_sendable: Callable[[str], bool]
) -> bool:
    """Decide whether ``type_`` is Sendable.

    Enum and record types are decided by ``is_tag_sendable``, called with the
    tag name. A missing type is not Sendable. Kinds with no defined answer
    raise UnsupportedTypeError.
    """
    if type_ is None:
        return False
    node = type_
    while True:
        kind = node.kind
        if kind in _SUGAR and kind not in (TypeKind.PAREN, TypeKind.MACRO_QUALIFIED):
            node = node.inner
        elif kind in _ELEMENT_WRAPPERS:
            node = node.inner
        elif kind in _ALWAYS_SENDABLE:
            return True
        elif kind in _NEVER_SENDABLE:
            return False
        elif kind in _TAGS:
            return is_tag_sendable(node.tag)
        else:
            raise UnsupportedTypeError(node)