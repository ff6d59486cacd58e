"""
judge.py: Collision and scoring for one simulation step.
"""

from typing import Iterable, Tuple

from .data_models import Obstacle, Rect, Verdict


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Half-open AABB test: rectangles that only share an edge do not overlap."""
    return (a.x < b.x + b.w and a.x + a.w > b.x and
            a.y < b.y + b.h and a.y + a.h > b.y)


def judge(body: Rect, hitbox: Rect, ground_y: float,
          pairs: Iterable[Tuple[Obstacle, Obstacle]]) -> Verdict:
    """
    Checks the player against the ground and every live pipe pair, oldest first.

    `body` is the full player rectangle (ground contact and the scoring point),
    `hitbox` the padded rectangle tested against pipes. Passed pairs are marked
    `scored` on their upper member.
    """
    # 1. Ground, using the same bound as the body clamp
    if body.y >= ground_y - body.h:
        return Verdict(points=0, collided=True)

    # 2. Pipes, scoring before collision for each pair
    points = 0
    for up, low in pairs:
        if not up.scored and body.x > up.rect.right:
            up.scored = True
            points += 1

        if rects_overlap(hitbox, up.rect) or rects_overlap(hitbox, low.rect):
            return Verdict(points=points, collided=True)

    return Verdict(points=points, collided=False)
