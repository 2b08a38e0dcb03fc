from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """
    Glyph merging and row shaping parameters.

    Defaults are explicit constants (page-space units).
    Merging is off unless explicitly enabled.
    """

    merge_items: bool = False
    merge_x_gap: float = 1.0  # max horizontal gap between merged neighbours
    merge_y_tolerance: float = 0.5  # max baseline difference between merged neighbours
    row_y_tolerance: float = 1.0  # max baseline distance from a row's reference y

    def validate(self) -> None:
        if self.merge_x_gap < 0:
            raise ValueError("merge_x_gap must be >= 0")
        if self.merge_y_tolerance < 0:
            raise ValueError("merge_y_tolerance must be >= 0")
        if self.row_y_tolerance < 0:
            raise ValueError("row_y_tolerance must be >= 0")

    def to_dict(self) -> dict[str, float | bool]:
        return {
            "merge_items": self.merge_items,
            "merge_x_gap": self.merge_x_gap,
            "merge_y_tolerance": self.merge_y_tolerance,
            "row_y_tolerance": self.row_y_tolerance,
        }
