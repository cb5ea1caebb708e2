"""Constraint tables — the static {record type, field} -> [constraint] declaration.

Request types declare their constraints next to their fields:

    @constrained(
        title="required,min=3,max=100",
        company_id="omitempty,uuid,same_company",
    )
    class CreateJobRequest(BaseModel):
        title: Optional[str] = None
        company_id: Optional[str] = None

Tags are parsed once, when the decorated class is defined. Unknown rule names
are kept and fail at validation time with a generic message; anything else
wrong with a declaration raises immediately.
"""

import dataclasses
from typing import Optional

import structlog

from jobboard.validators.models import Constraint, RuleKind
from jobboard.validators.registry import PARAM_PARSERS, lookup

logger = structlog.get_logger()

_FLOW_RULES = {RuleKind.OMITEMPTY, RuleKind.EACH}


class ConstraintDeclarationError(Exception):
    """A constraint table that cannot be built. Raised at import time."""


def parse_constraint(token: str, record_name: str = "", field: str = "") -> Constraint:
    token = token.strip()
    name, sep, raw_param = token.partition("=")
    name = name.strip()
    kind = lookup(name)

    if kind == RuleKind.UNKNOWN:
        logger.warning("unknown_rule_declared", record=record_name, field=field, rule=name)
        return Constraint(kind=kind, name=name, param=raw_param or None)

    if kind == RuleKind.EACH:
        if not raw_param:
            raise ConstraintDeclarationError(f"{record_name}.{field}: 'each' needs an inner rule")
        inner = parse_constraint(raw_param, record_name, field)
        if inner.kind in _FLOW_RULES:
            raise ConstraintDeclarationError(f"{record_name}.{field}: 'each' cannot wrap '{inner.name}'")
        return Constraint(kind=kind, name=name, param=inner)

    parser = PARAM_PARSERS.get(kind)
    if parser is None:
        if sep:
            raise ConstraintDeclarationError(f"{record_name}.{field}: rule '{name}' takes no parameter")
        return Constraint(kind=kind, name=name)

    if not raw_param:
        raise ConstraintDeclarationError(f"{record_name}.{field}: rule '{name}' needs a parameter")
    try:
        param = parser(raw_param.strip())
    except ValueError as e:
        raise ConstraintDeclarationError(
            f"{record_name}.{field}: bad parameter for '{name}': {raw_param!r}"
        ) from e
    return Constraint(kind=kind, name=name, param=param)


def parse_tag(tag: str, record_name: str = "", field: str = "") -> tuple[Constraint, ...]:
    """'required,min=3,max=100' -> three constraints, in order."""
    return tuple(
        parse_constraint(token, record_name, field)
        for token in tag.split(",")
        if token.strip()
    )


def declared_fields(record_type: type) -> list[str]:
    """Field names in declaration order."""
    model_fields = getattr(record_type, "model_fields", None)
    if model_fields is not None:
        return list(model_fields)
    if dataclasses.is_dataclass(record_type):
        return [f.name for f in dataclasses.fields(record_type)]
    names: list[str] = []
    for klass in reversed(record_type.__mro__):
        for name in getattr(klass, "__annotations__", {}):
            if name not in names:
                names.append(name)
    return names


class ConstraintTable:
    """Ordered field -> constraints mapping for one record type."""

    def __init__(self, record_type: type, entries: list[tuple[str, tuple[Constraint, ...]]]):
        self.record_type = record_type
        self.entries = tuple(entries)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def constraints_for(self, field: str) -> tuple[Constraint, ...]:
        for name, constraints in self.entries:
            if name == field:
                return constraints
        return ()

    def rule_names(self) -> dict[str, list[str]]:
        """Readable dump of the table, for audits and debugging."""
        return {name: [str(c) for c in constraints] for name, constraints in self.entries}

    @classmethod
    def build(cls, record_type: type, tags: dict[str, str]) -> "ConstraintTable":
        record_name = record_type.__name__
        fields = declared_fields(record_type)
        unknown_fields = [name for name in tags if name not in fields]
        if unknown_fields:
            raise ConstraintDeclarationError(
                f"{record_name} declares constraints for unknown fields: {unknown_fields}"
            )
        entries = [
            (name, parse_tag(tags[name], record_name, name))
            for name in fields
            if name in tags
        ]
        return cls(record_type, entries)


_TABLES: dict[type, ConstraintTable] = {}


def constrained(**tags: str):
    """Class decorator attaching a constraint table to a record type."""

    def decorate(record_type: type) -> type:
        _TABLES[record_type] = ConstraintTable.build(record_type, tags)
        return record_type

    return decorate


def table_for(record_type: type) -> Optional[ConstraintTable]:
    """The table declared on the type or its nearest declared ancestor."""
    for klass in record_type.__mro__:
        table = _TABLES.get(klass)
        if table is not None:
            return table
    return None
