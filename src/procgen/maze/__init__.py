"""Maze generation package.

Five spanning-tree construction algorithms, dead-end pruning, BFS solving,
structural statistics and ASCII/JSON export.
"""

from .config import GridPoint, MazeAlgorithm, MazeBias, MazeConfig
from .generator import MazeGenerator, MazeStats
from .grid import Direction, MazeCell, MazeGrid, Walls

__all__ = [
    "Direction",
    "GridPoint",
    "MazeAlgorithm",
    "MazeBias",
    "MazeCell",
    "MazeConfig",
    "MazeGenerator",
    "MazeGrid",
    "MazeStats",
    "Walls",
]
