"""
Borrow analysis for generated Rust types.

Decides, per schema type, whether its Rust rendering holds a reference
into the input buffer and therefore needs a lifetime parameter.

Supertypes form a possibly cyclic graph. Evaluation is a depth-first
search with an in-progress stack: re-entering a supertype that is still
being evaluated contributes a provisional ``False`` for that edge. A
``True`` answer is always final. A ``False`` answer is only cached once
every supertype it was assumed about has resolved ``False`` too, which
yields the least fixed point of the recursive definition.
"""

from typing import Dict, Iterable, List, Tuple

from ....logging_config import get_logger
from ...core.generator import GeneratorError
from ...core.schema import Arg, Constructor, Schema, TlType, TypeKind

logger = get_logger(__name__)

_BORROWING_KINDS = {TypeKind.STRING, TypeKind.BYTES}
_OWNED_KINDS = {
    TypeKind.BOOL,
    TypeKind.INT32,
    TypeKind.INT53,
    TypeKind.INT64,
    TypeKind.DOUBLE,
}

# Sentinel "depends on nothing still in progress"
_NO_DEPENDENCY = float("inf")


class LifetimeAnalyzer:
    """Memoized ``needs_borrow`` queries over one schema."""

    def __init__(self, schema: Schema):
        self.schema = schema
        self._cache: Dict[str, bool] = {}

        # Per-query search state
        self._stack: List[str] = []
        self._depth: Dict[str, int] = {}
        # Supertypes that resolved False under an assumption, with the
        # stack depth of the shallowest in-progress supertype they rely on
        self._provisional: Dict[str, float] = {}
        self._provisional_order: List[str] = []

    def needs_borrow(self, tl_type: TlType) -> bool:
        """Whether the rendering of ``tl_type`` borrows from the input."""
        value, _ = self._visit_type(tl_type)
        return value

    def supertype_needs_borrow(self, name: str) -> bool:
        """Whether any constructor of supertype ``name`` borrows."""
        value, _ = self._visit_supertype(name)
        return value

    def args_need_borrow(self, args: Iterable[Arg]) -> bool:
        """Whether a record with these fields needs a lifetime parameter."""
        return any(self.needs_borrow(arg.type) for arg in args)

    def members_need_borrow(self, members: Iterable[Constructor]) -> bool:
        """Whether a union over these members needs a lifetime parameter."""
        return any(self.args_need_borrow(member.args) for member in members)

    # Search

    def _visit_type(self, tl_type: TlType) -> Tuple[bool, float]:
        kind = tl_type.kind
        if kind in _BORROWING_KINDS:
            return True, _NO_DEPENDENCY
        if kind in _OWNED_KINDS:
            return False, _NO_DEPENDENCY
        if kind == TypeKind.VECTOR:
            return self._visit_type(tl_type.element)
        if kind == TypeKind.SUPERTYPE:
            return self._visit_supertype(tl_type.supertype)
        raise GeneratorError(f"Unsupported type kind in borrow analysis: {kind!r}")

    def _visit_supertype(self, name: str) -> Tuple[bool, float]:
        if name in self._cache:
            return self._cache[name], _NO_DEPENDENCY

        if name in self._depth:
            # Re-entered while still in progress
            return False, self._depth[name]

        if name in self._provisional:
            return False, self._provisional[name]

        supertype = self.schema.get_supertype(name)
        depth = len(self._stack)
        self._stack.append(name)
        self._depth[name] = depth
        mark = len(self._provisional_order)

        value = False
        low = _NO_DEPENDENCY
        try:
            for constructor in supertype.constructors:
                for arg in constructor.args:
                    arg_value, arg_low = self._visit_type(arg.type)
                    low = min(low, arg_low)
                    if arg_value:
                        value = True
                        break
                if value:
                    break
        except Exception:
            # Abandon the whole query, partial assumptions are meaningless
            self._provisional.clear()
            del self._provisional_order[:]
            raise
        finally:
            self._stack.pop()
            del self._depth[name]

        pending = self._provisional_order[mark:]
        del self._provisional_order[mark:]

        if value:
            # Anything decided below under a False assumption may be wrong
            for other in pending:
                self._provisional.pop(other, None)
            self._cache[name] = True
            return True, _NO_DEPENDENCY

        if low >= depth:
            # Every assumption made below was about this supertype or a
            # descendant of it, and all of them came out False
            for other in pending:
                self._provisional.pop(other, None)
                self._cache[other] = False
            self._cache[name] = False
            logger.debug("Supertype %s resolved without lifetime", name)
            return False, _NO_DEPENDENCY

        # Still depends on a shallower in-progress supertype
        for other in pending:
            if self._provisional.get(other, low) >= depth:
                self._provisional[other] = low
        self._provisional[name] = low
        self._provisional_order.extend(pending)
        self._provisional_order.append(name)
        return False, low

    def borrowing_supertypes(self) -> List[str]:
        """Names of all supertypes that need a lifetime, in schema order."""
        return [
            name for name in self.schema.supertypes if self.supertype_needs_borrow(name)
        ]


def create_analyzer(schema: Schema, warm: bool = False) -> LifetimeAnalyzer:
    """Create an analyzer, optionally resolving every supertype up front."""
    analyzer = LifetimeAnalyzer(schema)
    if warm:
        for name in schema.supertypes:
            analyzer.supertype_needs_borrow(name)
    return analyzer
