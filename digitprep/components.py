"""
Connected-component extraction over a binary mask.

Components are 4-connected (up, down, left, right). Traversal is a
breadth-first search over a queue preallocated to width * height slots and
indexed by head/tail counters: a component can never hold more pixels than
the image, so the queue never grows and the whole scan is O(width * height).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .types import BinaryMask, RegionOfInterest


@dataclass(frozen=True)
class Component:
    """A connected foreground component.

    Attributes:
        size: Number of pixels in the component.
        roi: Inclusive bounding box of the component.
        seed: Flat index of the first pixel reached by the row-major scan.
    """

    size: int
    roi: RegionOfInterest
    seed: int


def iter_components(mask: BinaryMask) -> Iterator[Component]:
    """Yield every 4-connected foreground component in row-major seed order."""
    width, height = mask.width, mask.height
    total = width * height
    foreground = mask.pixels.ravel().tolist()
    visited = bytearray(total)
    queue = [0] * total

    for seed in range(total):
        if not foreground[seed] or visited[seed]:
            continue

        head = tail = 0
        queue[tail] = seed
        tail += 1
        visited[seed] = 1

        min_x = max_x = seed % width
        min_y = max_y = seed // width

        while head < tail:
            idx = queue[head]
            head += 1
            y, x = divmod(idx, width)

            if x < min_x:
                min_x = x
            elif x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            elif y > max_y:
                max_y = y

            neighbors = []
            if x + 1 < width:
                neighbors.append(idx + 1)
            if x > 0:
                neighbors.append(idx - 1)
            if y + 1 < height:
                neighbors.append(idx + width)
            if y > 0:
                neighbors.append(idx - width)

            for nidx in neighbors:
                if foreground[nidx] and not visited[nidx]:
                    visited[nidx] = 1
                    queue[tail] = nidx
                    tail += 1

        # head == tail == number of pixels dequeued
        yield Component(
            size=tail,
            roi=RegionOfInterest(min_x, min_y, max_x, max_y),
            seed=seed,
        )


def label_components(mask: BinaryMask) -> list[Component]:
    """All components of the mask, in row-major seed order."""
    return list(iter_components(mask))


def largest_component(mask: BinaryMask) -> RegionOfInterest | None:
    """Bounding box of the component with the most pixels.

    The first component found wins a size tie. Returns None when the mask
    has no foreground pixel; callers substitute RegionOfInterest.full().
    """
    best: Component | None = None
    for component in iter_components(mask):
        if best is None or component.size > best.size:
            best = component
    return best.roi if best is not None else None
