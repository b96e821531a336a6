"""Shared fixtures."""

from pathlib import Path
import pytest
from treefold import Tree

DATA = Path(__file__).parent / "data"


def binary_seed(x: int) -> tuple[int, list[int]]:
    """
    Full binary tree of height 4 unfolded from 1:

            ______1______
           /             \\
        __2__           __3__
       /     \\         /     \\
      4       5       6       7
     / \\     / \\     / \\     / \\
    8   9  10  11  12  13  14  15
    """
    return (x, [2 * x, 2 * x + 1]) if x < 2 ** 3 else (x, [])


@pytest.fixture
def seed_fn():
    return binary_seed


@pytest.fixture
def binary_tree() -> Tree[int]:
    return Tree.unfold(binary_seed, 1)


@pytest.fixture
def people_json() -> str:
    return (DATA / "people.json").read_text().strip()
