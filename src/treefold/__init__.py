"""
Treefold: generic trees built and consumed with unfold and fold.

Provides an immutable ordered tree with unfold (grow a tree from a seed),
fold (reduce a tree bottom-up) and map (derived from fold), plus async
variants that process sibling subtrees in parallel.

Usage:
    from treefold import Tree, hylo, parallel

    # Grow a tree from a seed
    tree = Tree.unfold(lambda x: (x, [2 * x, 2 * x + 1] if x < 8 else []), 1)

    # Reduce it, bottom-up
    total = tree.fold(lambda x, acc: x + sum(acc))

    # Same thing without building the tree
    total = hylo(lambda x: (x, [2 * x, 2 * x + 1] if x < 8 else []),
                 lambda x, acc: x + sum(acc), 1)

    # Parallel fold with an async combiner
    summary = await parallel.fold(tree, summarise)
"""

from .tree import Tree, MalformedNodeError, hylo
from . import parallel

__version__ = "0.1.0"
__all__ = [
    # Core
    "Tree",
    "hylo",
    "MalformedNodeError",
    # Async variants
    "parallel",
]
