from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def gather_in_chunks(
    items: Sequence[T],
    size: int,
    fetch: Callable[[list[T]], Awaitable[Iterable[R]]],
) -> set[R]:
    """Run `fetch` over `items` in chunks of at most `size` and union the results.

    For store APIs that cap how many keys one call may take (e.g. IN lists).
    Chunks run one after another; each result set is independent of the others.
    """
    merged: set[R] = set()
    for group in chunked(items, size):
        merged.update(await fetch(group))
    return merged
