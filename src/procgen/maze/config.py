"""Maze generation configuration models."""

from enum import Enum

from pydantic import BaseModel, Field


class MazeAlgorithm(str, Enum):
    """Supported maze construction algorithms."""

    RECURSIVE_BACKTRACK = "recursive_backtrack"
    KRUSKAL = "kruskal"
    PRIM = "prim"
    BINARY_TREE = "binary_tree"
    SIDEWINDER = "sidewinder"


class GridPoint(BaseModel):
    """Cell coordinate."""

    x: int = 0
    y: int = 0


class MazeBias(BaseModel):
    """Directional preference for the recursive backtracker."""

    horizontal: float = Field(
        default=0.0,
        description="-1 favors vertical moves, 1 favors horizontal moves",
    )
    start: GridPoint = Field(
        default_factory=GridPoint, description="Preferred entrance (informational, not read)"
    )
    end: GridPoint = Field(
        default_factory=GridPoint, description="Preferred exit (informational, not read)"
    )


class MazeConfig(BaseModel):
    """Complete maze generation configuration."""

    width: int = Field(default=10, description="Maze width in cells")
    height: int = Field(default=10, description="Maze height in cells")
    algorithm: MazeAlgorithm = Field(
        default=MazeAlgorithm.RECURSIVE_BACKTRACK, description="Construction algorithm"
    )
    seed: int = Field(default=42, description="Random seed for reproducibility")
    bias: MazeBias | None = Field(default=None, description="Optional direction bias")
    dead_end_removal: float | None = Field(
        default=None, description="Fraction (0-1) of dead ends to open up"
    )
