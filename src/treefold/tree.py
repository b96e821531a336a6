"""
Immutable rose tree with unfold (anamorphism) and fold (catamorphism).

The tree supplies structure; callers supply behaviour. A generator turns a
seed into a node value plus child seeds, a combiner turns a node value plus
its children's results into a result.
"""

from __future__ import annotations
from typing import TypeVar, Generic, Callable, Iterable, Any
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")
S = TypeVar("S")


class MalformedNodeError(TypeError):
    """Generator returned something that is not a (value, child_seeds) pair."""

    def __init__(self, seed: Any, result: Any):
        super().__init__(
            f"generator must return (value, child_seeds) for seed {seed!r}, got {result!r}"
        )
        self.seed = seed
        self.result = result


def expand(generator: Callable[[S], Any], seed: S) -> tuple[Any, list[S]]:
    """Apply generator to seed and check the shape of what comes back."""
    result = generator(seed)
    try:
        value, seeds = result
        pending = iter(seeds)
    except (TypeError, ValueError) as e:
        logger.debug("malformed generator result for seed %r: %r", seed, result)
        raise MalformedNodeError(seed, result) from e
    # errors raised while producing lazy child seeds belong to the caller
    return value, list(pending)


@dataclass(frozen=True)
class Tree(Generic[A]):
    """
    Ordered, immutable tree node.

    Children may be given as any iterable and are stored as a tuple, so a
    tree never changes after construction.

    Example:
        tree = Tree.unfold(lambda x: (x, [2 * x, 2 * x + 1] if x < 8 else []), 1)
        preorder = tree.fold(lambda x, acc: ",".join([str(x), *acc]))
        doubled = tree.map(lambda x: 2 * x)
    """
    value: A | None = None
    children: tuple[Tree[A], ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    @classmethod
    def unfold(cls, generator: Callable[[S], tuple[A, Iterable[S]]], seed: S) -> Tree[A]:
        """
        Build a tree from a seed.

        Args:
            generator: Called once per node with that node's seed; returns the
                       node value and the seeds of its children, in order.
                       Must eventually return no child seeds on every path.
            seed: Seed of the root node.
        """
        value, seeds = expand(generator, seed)
        return cls(value, [cls.unfold(generator, s) for s in seeds])

    def fold(self, combiner: Callable[[A, list[R]], R]) -> R:
        """
        Reduce the tree bottom-up.

        Args:
            combiner: Called once per node with the node value and the list of
                      its children's results in declaration order. A leaf
                      receives an empty list.
        """
        return combiner(self.value, [child.fold(combiner) for child in self.children])

    def map(self, transform: Callable[[A], B]) -> Tree[B]:
        """Apply transform to every value, keeping the shape."""
        return self.fold(lambda value, children: Tree(transform(value), children))

    @classmethod
    def unfold_iterative(
        cls, generator: Callable[[S], tuple[A, Iterable[S]]], seed: S
    ) -> Tree[A]:
        """
        Same as unfold but with an explicit stack instead of recursion.

        The generator sees seeds in the same (pre-order) sequence as unfold.
        """
        value, seeds = expand(generator, seed)
        # frame: [value, pending child seeds, built children]
        stack = [[value, iter(seeds), []]]
        while True:
            frame = stack[-1]
            for s in frame[1]:
                value, seeds = expand(generator, s)
                stack.append([value, iter(seeds), []])
                break
            else:
                stack.pop()
                node = cls(frame[0], frame[2])
                if not stack:
                    return node
                stack[-1][2].append(node)

    def fold_iterative(self, combiner: Callable[[A, list[R]], R]) -> R:
        """
        Same as fold but with an explicit stack instead of recursion.

        The combiner is called in the same (post-order) sequence as fold.
        """
        stack: list[tuple[Tree[A], Any, list[R]]] = [(self, iter(self.children), [])]
        while True:
            node, pending, results = stack[-1]
            for child in pending:
                stack.append((child, iter(child.children), []))
                break
            else:
                stack.pop()
                result = combiner(node.value, results)
                if not stack:
                    return result
                stack[-1][2].append(result)


def hylo(
    generator: Callable[[S], tuple[A, Iterable[S]]],
    combiner: Callable[[A, list[R]], R],
    seed: S,
) -> R:
    """
    Unfold then fold without building the intermediate tree.

    Equivalent to Tree.unfold(generator, seed).fold(combiner).
    """
    value, seeds = expand(generator, seed)
    return combiner(value, [hylo(generator, combiner, s) for s in seeds])
