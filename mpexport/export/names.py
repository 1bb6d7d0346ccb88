"""
Name resolution and MPS format selection.

LP and MPS readers only accept a restricted alphabet for row and column
names. resolve_names() turns the model's raw names into one unique, legal
name per entity:

- a name starting with one of "$.0123456789" gets a "_" prefix,
- every other forbidden character is replaced by "_",
- a name equal to a keyword of the target grammar, in any case, is
  treated as taken,
- a missing name, or one still too long after sanitization, is replaced by
  the obfuscated form prefix + (index + 1),
- collisions are resolved by appending "_<n>" with the smallest n >= 1 that
  makes the name unique among every name resolved so far.

So a name "$20<=40" becomes "_$20__40", or "_$20__40_1" if that is taken.

can_use_fixed_mps_format() then decides whether the resolved names fit the
8-character fields of the fixed MPS layout.
"""

import logging
from typing import AbstractSet, Dict, Iterable, List, NamedTuple, Optional, Protocol, Sequence

from mpexport.export.context import ExportContext

logger = logging.getLogger(__name__)


FORBIDDEN_FIRST_CHARS = frozenset("$.0123456789")
FORBIDDEN_CHARS = frozenset(" +-*/<>=:\\")


class NamedEntity(Protocol):
    """Anything with an optional name: Variable, Constraint, ..."""

    @property
    def name(self) -> Optional[str]: ...


class ResolvedNames(NamedTuple):
    """Names produced by resolve_names() and the length of the longest one."""
    names: List[str]
    max_length: int


class UniqueNamer:
    """
    Hands out names that are unique within one entity kind.

    The next suffix to try is remembered per base name, so a long run of
    identical names costs O(n) rather than O(n^2).

    Example:
        >>> namer = UniqueNamer()
        >>> namer.make_unique("x"), namer.make_unique("x"), namer.make_unique("x")
        ('x', 'x_1', 'x_2')
    """

    def __init__(self, reserved: Iterable[str] = (), keywords: Iterable[str] = ()):
        self._names = set(reserved)
        self._keywords = frozenset(k.lower() for k in keywords)
        self._next_suffix: Dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._names or name.lower() in self._keywords

    def make_unique(self, name: str) -> str:
        result = name
        n = self._next_suffix.get(name, 1)
        while result in self:
            result = f"{name}_{n}"
            n += 1
        self._next_suffix[name] = n
        self._names.add(result)
        return result


def make_exportable_name(
    name: str,
    forbidden_chars: AbstractSet[str] = FORBIDDEN_CHARS,
) -> str:
    """
    Apply the character rules to one name.

    Args:
        name: A non-empty raw name
        forbidden_chars: Characters replaced by "_" (control and whitespace
            characters always are)

    Returns:
        The sanitized name (possibly unchanged)
    """
    if name[0] in FORBIDDEN_FIRST_CHARS:
        name = "_" + name
    return "".join(
        "_" if c in forbidden_chars or not c.isprintable() or c.isspace() else c
        for c in name
    )


def obfuscated_name(prefix: str, index: int) -> str:
    """Name of the entity at 0-based `index` in obfuscated mode."""
    return f"{prefix}{index + 1}"


def resolve_names(
    entities: Sequence[NamedEntity],
    prefix: str,
    obfuscate: bool,
    max_length: int,
    reserved: Iterable[str] = (),
    log_invalid_names: bool = False,
    forbidden_chars: AbstractSet[str] = FORBIDDEN_CHARS,
    keywords: Iterable[str] = (),
) -> ResolvedNames:
    """
    Produce one legal, unique name per entity.

    Args:
        entities: Ordered entities exposing `.name`
        prefix: "V" for variables, "C" for constraints
        obfuscate: Ignore the given names and use prefix + (index + 1)
        max_length: Sanitized names longer than this fall back to the
            obfuscated name
        reserved: Labels the writer uses itself (e.g. the objective row),
            which no resolved name may take
        log_invalid_names: Log a warning for each rewritten or generated name
        forbidden_chars: Characters the target format does not allow in names
        keywords: Words of the target grammar no name may equal, compared
            case-insensitively

    Returns:
        ResolvedNames with names index-aligned with `entities`
    """
    if obfuscate:
        names = [obfuscated_name(prefix, i) for i in range(len(entities))]
        longest = len(names[-1]) if names else 0
        return ResolvedNames(names, longest)

    namer = UniqueNamer(reserved, keywords)
    names = []
    longest = 0
    for i, entity in enumerate(entities):
        raw = entity.name
        if not raw:
            result = namer.make_unique(obfuscated_name(prefix, i))
            if log_invalid_names:
                logger.warning("Empty name detected, created new name: %s", result)
        else:
            exportable = make_exportable_name(raw, forbidden_chars)
            if len(exportable) > max_length:
                result = namer.make_unique(obfuscated_name(prefix, i))
                if log_invalid_names:
                    logger.warning("Name is too long: %s exported as: %s", raw, result)
            else:
                result = namer.make_unique(exportable)
                if log_invalid_names and result != raw:
                    logger.warning("Invalid name %r changed to %s", raw, result)
        names.append(result)
        longest = max(longest, len(result))

    return ResolvedNames(names, longest)


def can_use_fixed_mps_format(ctx: ExportContext) -> bool:
    """
    Return True when every resolved name fits a fixed MPS name field.

    With obfuscated names the prefix takes one of the 8 characters, so the
    largest 1-based index must have at most 7 digits.
    """
    limit = ctx.options.fixed_mps_name_length
    if ctx.use_obfuscated_names:
        largest_index = max(ctx.model.num_variables, ctx.model.num_constraints)
        return largest_index <= 10 ** (limit - 1) - 1
    return ctx.max_name_length_seen <= limit
