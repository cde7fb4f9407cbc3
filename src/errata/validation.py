"""Tag driven validation of msgspec structs and dataclasses.

Fields opt in to validation by naming validators in their annotation::

    class Signup(msgspec.Struct):
        email: Annotated[str, Validate("required,email")]
        age: Annotated[int, Validate("positive")] = 0
        address: Annotated[Address, Validate("struct")] = Address()

Validators are looked up by name in a caller supplied :class:`ValidatorTable`.
A validator receives the field value and returns ``None`` when it is valid,
or an error (any object, usually an exception or a message) when it is not.
Raising :class:`ValueError` is treated the same as returning the exception.

The reserved name ``"struct"`` validates the field value itself with the same
table, so nested records reuse one set of validators. Nesting is bounded by
:attr:`ErrataConfig.max_validation_depth`.
"""

from __future__ import annotations

import dataclasses
import logging
from functools import lru_cache
from typing import Annotated, Any, Callable, Iterable, TypeVar, get_args, get_origin, get_type_hints

import msgspec
from msgspec import Struct

from .config import DEFAULT_CONFIG, ErrataConfig
from .exceptions import VALIDATION_ERROR_CODE, VALIDATION_ERROR_TYPE

logger = logging.getLogger(__name__)

VALIDATE_KEY = "validate"
ALIAS_KEY = "json"
STRUCT_TAG = "struct"

ValidatorFunc = Callable[[Any], object]
F = TypeVar("F", bound=ValidatorFunc)


class Validate:
    """Annotation marker naming the validators that apply to a field."""

    __slots__ = ("names",)

    def __init__(self, *names: str) -> None:
        self.names = tuple(split_tag(",".join(names)))

    def __repr__(self) -> str:
        return f"Validate({','.join(self.names)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Validate) and other.names == self.names

    def __hash__(self) -> int:
        return hash(self.names)


class FieldViolation(Struct, frozen=True):
    """A single failed validator for a single field."""

    field: str
    description: str
    error_name: str = VALIDATION_ERROR_TYPE
    error_code: int = VALIDATION_ERROR_CODE

    def __str__(self) -> str:
        return f"field {self.field} is invalid: {self.description}"


class FieldSchema(Struct, frozen=True):
    name: str
    alias: str
    validators: tuple[str, ...]

    @property
    def nested(self) -> bool:
        return STRUCT_TAG in self.validators


class StructSchema(Struct, frozen=True):
    type_name: str
    fields: tuple[FieldSchema, ...]


def split_tag(tag: str) -> list[str]:
    """Split ``"required, numeric"`` into ``["required", "numeric"]``.

    Empty entries are kept so that a stray comma surfaces as an undefined
    validator rather than being silently ignored.
    """

    return [name.strip() for name in tag.split(",")]


def _tag_from_hint(hint: Any) -> tuple[str, ...]:
    if get_origin(hint) is not Annotated:
        return ()
    names: list[str] = []
    for meta in get_args(hint)[1:]:
        if isinstance(meta, Validate):
            names.extend(meta.names)
        elif isinstance(meta, msgspec.Meta) and meta.extra:
            tag = meta.extra.get(VALIDATE_KEY)
            if isinstance(tag, str) and tag:
                names.extend(split_tag(tag))
    return tuple(names)


def _resolve_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        logger.warning("Could not resolve annotations of %s; validation tags ignored", cls.__qualname__)
        return {}


def _struct_fields(cls: type[Struct], hints: dict[str, Any]) -> Iterable[FieldSchema]:
    encode_names = getattr(cls, "__struct_encode_fields__", cls.__struct_fields__)
    for name, alias in zip(cls.__struct_fields__, encode_names):
        yield FieldSchema(name=name, alias=alias or name, validators=_tag_from_hint(hints.get(name)))


def _dataclass_fields(cls: type, hints: dict[str, Any]) -> Iterable[FieldSchema]:
    for info in dataclasses.fields(cls):
        validators = _tag_from_hint(hints.get(info.name))
        tag = info.metadata.get(VALIDATE_KEY)
        if isinstance(tag, str) and tag:
            validators += tuple(split_tag(tag))
        alias = info.name
        override = info.metadata.get(ALIAS_KEY)
        if isinstance(override, str):
            alias = override.split(",")[0] or info.name
        yield FieldSchema(name=info.name, alias=alias, validators=validators)


@lru_cache(maxsize=None)
def schema_for(cls: type) -> StructSchema | None:
    """Return the cached validation schema for ``cls``.

    ``None`` means ``cls`` is not struct shaped and has nothing to validate.
    Private (underscore prefixed) and untagged fields are left out.
    """

    if isinstance(cls, type) and issubclass(cls, Struct):
        fields = _struct_fields(cls, _resolve_hints(cls))
    elif isinstance(cls, type) and dataclasses.is_dataclass(cls):
        fields = _dataclass_fields(cls, _resolve_hints(cls))
    else:
        return None
    tagged = tuple(field for field in fields if field.validators and not field.name.startswith("_"))
    return StructSchema(type_name=cls.__qualname__, fields=tagged)


class ValidatorTable(dict[str, ValidatorFunc]):
    """Mapping of validator names to validator callables.

    ``"struct"`` is reserved for nested validation and rejected on every
    insertion path.
    """

    def __init__(self, *args: Any, **kwargs: ValidatorFunc) -> None:
        super().__init__()
        self.update(*args, **kwargs)

    def __setitem__(self, name: str, func: ValidatorFunc) -> None:
        if name == STRUCT_TAG:
            raise ValueError(f"{STRUCT_TAG!r} is reserved for nested validation")
        super().__setitem__(name, func)

    def update(self, *args: Any, **kwargs: ValidatorFunc) -> None:
        for name, func in dict(*args, **kwargs).items():
            self[name] = func

    def setdefault(self, name: str, default: ValidatorFunc | None = None) -> ValidatorFunc | None:  # type: ignore[override]
        if name not in self:
            self[name] = default  # type: ignore[assignment]
        return self[name]

    def __ior__(self, other: Any) -> "ValidatorTable":  # type: ignore[override]
        self.update(other)
        return self

    def register(self, name: str) -> Callable[[F], F]:
        """Decorator registering the wrapped function under ``name``."""

        def decorator(func: F) -> F:
            self[name] = func
            return func

        return decorator

    def validate(self, value: Any, *, config: ErrataConfig | None = None) -> list[FieldViolation]:
        return Validator(self, config).validate(value)


class Validator:
    """Walk struct shaped values and collect :class:`FieldViolation` records."""

    __slots__ = ("config", "table")

    def __init__(self, table: dict[str, ValidatorFunc], config: ErrataConfig | None = None) -> None:
        self.table = table
        self.config = config or DEFAULT_CONFIG

    def validate(self, value: Any) -> list[FieldViolation]:
        """Return every violation found in ``value``, in field order.

        Values that are not structs (``None`` included) have nothing to
        validate and produce an empty list.
        """

        violations: list[FieldViolation] = []
        self._walk(value, 0, violations)
        return violations

    def _violation(self, field: str, description: str) -> FieldViolation:
        return FieldViolation(
            field=field,
            description=description,
            error_name=self.config.validation_error_name,
            error_code=self.config.validation_error_code,
        )

    def _walk(self, value: Any, depth: int, out: list[FieldViolation]) -> None:
        schema = schema_for(type(value))
        if schema is None:
            return
        for field in schema.fields:
            try:
                current = getattr(value, field.name)
            except AttributeError:
                continue
            for name in field.validators:
                if name == STRUCT_TAG:
                    if schema_for(type(current)) is None:
                        continue
                    if depth >= self.config.max_validation_depth:
                        logger.warning(
                            "Validation of %s.%s stopped at depth %d",
                            schema.type_name,
                            field.name,
                            depth,
                        )
                        out.append(
                            self._violation(
                                field.alias,
                                f"maximum validation depth of {self.config.max_validation_depth} exceeded",
                            )
                        )
                        continue
                    self._walk(current, depth + 1, out)
                    continue
                check = self.table.get(name)
                if check is None:
                    out.append(self._violation(field.name, f'undefined validator: "{name}"'))
                    continue
                problem = _run(check, current)
                if problem is not None:
                    out.append(self._violation(field.alias, str(problem)))


def _run(check: ValidatorFunc, value: Any) -> object:
    try:
        return check(value)
    except ValueError as exc:
        return exc


def validate(
    table: dict[str, ValidatorFunc],
    value: Any,
    *,
    config: ErrataConfig | None = None,
) -> list[FieldViolation]:
    """Validate ``value`` against ``table``; see :class:`Validator`."""

    return Validator(table, config).validate(value)


__all__ = [
    "STRUCT_TAG",
    "FieldSchema",
    "FieldViolation",
    "StructSchema",
    "Validate",
    "Validator",
    "ValidatorTable",
    "schema_for",
    "split_tag",
    "validate",
]
