"""Result type returned by operations and workflows.

Operations never raise for expected failures. They return either Ok(value)
or Err(error), and callers pattern match:

    match create_vault(ctx, spec):
        case Ok(vault):
            ...
        case Err(error):
            ...
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome."""

    error: E


type Result[T, E] = Ok[T] | Err[E]


def is_ok(result: Result[T, E]) -> bool:
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> bool:
    return isinstance(result, Err)


def map_ok(result: Result[T, E], f: Callable[[T], U]) -> Result[U, E]:
    """Transform the Ok value, pass an Err through untouched."""
    match result:
        case Ok(value):
            return Ok(f(value))
        case Err() as e:
            return e


def flat_map(result: Result[T, E], f: Callable[[T], Result[U, E]]) -> Result[U, E]:
    """Chain a step that itself returns a Result (a.k.a. `and_then`)."""
    match result:
        case Ok(value):
            return f(value)
        case Err() as e:
            return e


def unwrap_or(result: Result[T, E], default: T) -> T:
    """Value of an Ok, or `default` for an Err."""
    match result:
        case Ok(value):
            return value
        case Err():
            return default


def unwrap(result: Result[T, E]) -> T:
    """Value of an Ok. Raises ValueError on Err - tests and scripts only."""
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise ValueError(f"Called unwrap on Err: {error}")


def collect(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
    """Turn a sequence of Results into one: all values, or the first Err."""
    values: list[T] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err() as e:
                return e
    return Ok(values)
