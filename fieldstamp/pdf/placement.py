"""Map clicks on the stacked page container to a page and page-local point.

Pages are assumed to share one height. Documents with mixed page sizes will
attribute clicks near page boundaries to the wrong page.
"""

from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True, slots=True)
class Placement:
    page_number: int
    x: float
    y: float


def page_index_for(local_y: float, container_height: float, total_pages: int) -> int:
    if total_pages < 1:
        raise ValueError(f"total_pages must be >= 1, got {total_pages}")
    if container_height <= 0:
        raise ValueError(f"container_height must be > 0, got {container_height}")

    page_height = container_height / total_pages
    index = math.floor(local_y / page_height)
    return max(0, min(index, total_pages - 1))


def place_click(
    click_x: float,
    click_y: float,
    container_top: float,
    container_left: float,
    container_height: float,
    total_pages: int,
) -> Placement:
    local_x = click_x - container_left
    local_y = click_y - container_top
    page_index = page_index_for(local_y, container_height, total_pages)
    page_height = container_height / total_pages
    return Placement(
        page_number=page_index + 1,
        x=local_x,
        y=local_y - page_index * page_height,
    )
