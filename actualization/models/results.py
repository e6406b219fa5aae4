"""Three-way result used wherever some parts of a product may be ready."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

OkT = TypeVar("OkT")
ErrT = TypeVar("ErrT")
NewErrT = TypeVar("NewErrT")


@dataclass(frozen=True)
class FullSuccess(Generic[OkT]):
    value: OkT


@dataclass(frozen=True)
class PartialSuccess(Generic[OkT, ErrT]):
    value: OkT
    errors: list[ErrT] = field(default_factory=list)


@dataclass(frozen=True)
class NoSuccess(Generic[ErrT]):
    id: str
    errors: list[ErrT] = field(default_factory=list)


PartialResult = FullSuccess[OkT] | PartialSuccess[OkT, ErrT] | NoSuccess[ErrT]


def map_error(
    func: Callable[[ErrT], NewErrT], result: PartialResult
) -> PartialResult:
    """Transform every error of ``result``, leaving the success value alone."""

    match result:
        case FullSuccess():
            return result
        case PartialSuccess(value=value, errors=errors):
            return PartialSuccess(value, [func(e) for e in errors])
        case NoSuccess(id=id_, errors=errors):
            return NoSuccess(id_, [func(e) for e in errors])
    raise TypeError(f"Unexpected result type: {type(result)!r}")


def append_errors(errors: Sequence[ErrT], result: PartialResult) -> PartialResult:
    """Attach extra errors, downgrading a full success to a partial one."""

    if not errors:
        return result
    match result:
        case FullSuccess(value=value):
            return PartialSuccess(value, list(errors))
        case PartialSuccess(value=value, errors=existing):
            return PartialSuccess(value, [*existing, *errors])
        case NoSuccess(id=id_, errors=existing):
            return NoSuccess(id_, [*existing, *errors])
    raise TypeError(f"Unexpected result type: {type(result)!r}")
