"""Grid and tile models.

The map is a fixed-size grid of tiles addressed by ``(x, y)``. Tiles are
stored column-major (``tiles[x][y]``). Generation carves floor out of a
fully walled grid; afterwards only the ``explored`` flag ever changes, and
only from False to True.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Tile(BaseModel):
    """A single map cell.

    Attributes:
        blocked: Whether movement through the tile is impossible.
        block_sight: Whether the tile blocks line of sight.
        explored: Whether the player has ever seen the tile.
    """

    model_config = ConfigDict(extra="forbid")

    blocked: bool = Field(default=True, description="Blocks movement")
    block_sight: bool = Field(default=True, description="Blocks line of sight")
    explored: bool = Field(default=False, description="Seen at least once")

    @classmethod
    def wall(cls) -> Self:
        return cls(blocked=True, block_sight=True)

    @classmethod
    def floor(cls) -> Self:
        return cls(blocked=False, block_sight=False)


class GameMap(BaseModel):
    """Fixed-dimension 2D grid of tiles.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tiles: Column-major tile grid, ``tiles[x][y]``.
    """

    model_config = ConfigDict(extra="forbid")

    width: int = Field(ge=1, description="Grid width in tiles")
    height: int = Field(ge=1, description="Grid height in tiles")
    tiles: list[list[Tile]] = Field(default_factory=list)

    @model_validator(mode="after")
    def fill_or_check_tiles(self) -> "GameMap":
        """Fill an empty grid with walls, or check a restored grid's shape."""
        if not self.tiles:
            self.tiles = [[Tile.wall() for _ in range(self.height)] for _ in range(self.width)]
        elif len(self.tiles) != self.width or any(len(col) != self.height for col in self.tiles):
            raise ValueError(
                f"tile grid does not match declared size {self.width}x{self.height}"
            )
        return self

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        """Return the tile at ``(x, y)``.

        Raises:
            IndexError: If the coordinates lie outside the grid.
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} map")
        return self.tiles[x][y]

    def is_blocked(self, x: int, y: int) -> bool:
        """Whether the terrain at ``(x, y)`` blocks movement.

        Coordinates outside the grid count as blocked.
        """
        if not self.in_bounds(x, y):
            return True
        return self.tiles[x][y].blocked

    def carve(self, x: int, y: int) -> None:
        """Turn the tile at ``(x, y)`` into open floor."""
        self.tiles[x][y] = Tile.floor()

    def mark_explored(self, x: int, y: int) -> None:
        # one-way flag, set by whoever computes visibility
        self.tile(x, y).explored = True

    def floor_tiles(self) -> list[tuple[int, int]]:
        """All unblocked coordinates, in column-major order."""
        return [
            (x, y)
            for x in range(self.width)
            for y in range(self.height)
            if not self.tiles[x][y].blocked
        ]


__all__ = [
    "Tile",
    "GameMap",
]
