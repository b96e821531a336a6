"""
Async unfold, fold and map that work on sibling subtrees in parallel.

Independent subtrees share no state, so each child is expanded or reduced in
its own task and joined by the parent. Results are always delivered in
declaration order, never completion order. Generators, combiners and
transforms may be plain functions or coroutine functions, which makes this
useful when producing or combining a node is expensive I/O, e.g. an LLM call.

Usage:
    from treefold import parallel

    tree = await parallel.unfold(fetch_children, root_id, max_concurrency=8)
    summary = await parallel.fold(tree, summarise)
"""

from __future__ import annotations
from typing import TypeVar, Callable, Awaitable, Iterable, Union, Any
import asyncio
import inspect
import logging

from .tree import Tree, expand

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")
S = TypeVar("S")

# sync or async callables
GenerateFunc = Callable[[S], Union[tuple[A, Iterable[S]], Awaitable[tuple[A, Iterable[S]]]]]
CombineFunc = Callable[[A, list[R]], Union[R, Awaitable[R]]]


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _limiter(max_concurrency: int | None) -> asyncio.Semaphore | None:
    if max_concurrency is None:
        return None
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
    return asyncio.Semaphore(max_concurrency)


async def _guarded(limit: asyncio.Semaphore | None, fn: Callable[..., Any], *args: Any) -> Any:
    if limit is None:
        return await _call(fn, *args)
    async with limit:
        return await _call(fn, *args)


async def _gather(coros: Iterable[Awaitable[Any]]) -> list[Any]:
    """Await siblings in order; on the first failure cancel the rest and wait for them."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def unfold(
    generator: GenerateFunc[S, A],
    seed: S,
    max_concurrency: int | None = None,
) -> Tree[A]:
    """
    Build a tree from a seed, expanding sibling seeds concurrently.

    Args:
        generator: Sync or async function returning (value, child_seeds).
        seed: Seed of the root node.
        max_concurrency: Upper bound on generator calls in flight at once.
                         None means unbounded.
    """
    limit = _limiter(max_concurrency)
    logger.debug("parallel unfold from seed %r (max_concurrency=%s)", seed, max_concurrency)

    async def go(s: S) -> Tree[A]:
        result = await _guarded(limit, generator, s)
        value, seeds = expand(lambda _: result, s)
        children = await _gather(go(c) for c in seeds)
        return Tree(value, children)

    return await go(seed)


async def fold(
    tree: Tree[A],
    combiner: CombineFunc[A, R],
    max_concurrency: int | None = None,
) -> R:
    """
    Reduce a tree bottom-up, folding sibling subtrees concurrently.

    Args:
        tree: Tree to reduce.
        combiner: Sync or async function taking the node value and the list
                  of child results in declaration order.
        max_concurrency: Upper bound on combiner calls in flight at once.
                         None means unbounded.
    """
    limit = _limiter(max_concurrency)
    logger.debug("parallel fold (max_concurrency=%s)", max_concurrency)

    async def go(node: Tree[A]) -> R:
        results = await _gather(go(child) for child in node.children)
        return await _guarded(limit, combiner, node.value, results)

    return await go(tree)


async def map(
    tree: Tree[A],
    transform: Callable[[A], B | Awaitable[B]],
    max_concurrency: int | None = None,
) -> Tree[B]:
    """Apply a sync or async transform to every value, keeping the shape."""

    async def combine(value: A, children: list[Tree[B]]) -> Tree[B]:
        return Tree(await _call(transform, value), children)

    return await fold(tree, combine, max_concurrency=max_concurrency)
