from stoney.data_models import EntityKind, Obstacle, Rect
from stoney.judge import judge, rects_overlap

GROUND = 400.0


def pair(x, upper_y=0.0, upper_h=100.0, lower_y=1000.0, w=52.0):
    up = Obstacle(EntityKind.UPPER_PIPE, x=x, y=upper_y, w=w, h=upper_h)
    low = Obstacle(EntityKind.LOWER_PIPE, x=x, y=lower_y, w=w, h=100.0)
    return up, low


def test_touching_edge_is_not_a_collision():
    player = Rect(50.0, 50.0, 30.0, 30.0)
    verdict = judge(player, player, GROUND, [pair(80.0)])
    assert not verdict.collided


def test_one_unit_overlap_collides():
    player = Rect(50.0, 50.0, 30.0, 30.0)
    verdict = judge(player, player, GROUND, [pair(79.0)])
    assert verdict.collided


def test_overlap_is_half_open_on_every_side():
    box = Rect(10.0, 10.0, 10.0, 10.0)
    assert not rects_overlap(box, Rect(20.0, 10.0, 5.0, 5.0))
    assert not rects_overlap(box, Rect(0.0, 10.0, 10.0, 5.0))
    assert not rects_overlap(box, Rect(10.0, 20.0, 5.0, 5.0))
    assert not rects_overlap(box, Rect(10.0, 0.0, 5.0, 10.0))
    assert rects_overlap(box, Rect(19.5, 19.5, 5.0, 5.0))
    assert rects_overlap(box, Rect(12.0, 12.0, 2.0, 2.0))


def test_lower_pipe_is_checked_too():
    player = Rect(50.0, 300.0, 30.0, 30.0)
    verdict = judge(player, player, GROUND, [pair(60.0, lower_y=320.0)])
    assert verdict.collided


def test_ground_contact_wins_and_skips_pipes():
    body = Rect(100.0, GROUND - 24.0, 34.0, 24.0)
    passed = pair(0.0)
    verdict = judge(body, body.shrink(4.0), GROUND, [passed])
    assert verdict.collided
    assert verdict.points == 0
    assert not passed[0].scored


def test_ground_uses_the_body_not_the_hitbox():
    body = Rect(100.0, GROUND - 24.0, 34.0, 24.0)
    assert judge(body, body.shrink(4.0), GROUND, []).collided
    above = Rect(100.0, GROUND - 24.5, 34.0, 24.0)
    assert not judge(above, above.shrink(4.0), GROUND, []).collided


def test_passing_a_pair_scores_exactly_once():
    player = Rect(100.0, 150.0, 34.0, 24.0)
    pairs = [pair(40.0)]
    first = judge(player, player.shrink(4.0), GROUND, pairs)
    assert first.points == 1 and first.scored and not first.collided
    assert pairs[0][0].scored

    second = judge(player, player.shrink(4.0), GROUND, pairs)
    assert second.points == 0 and not second.scored


def test_trailing_edge_must_be_strictly_passed():
    player = Rect(92.0, 150.0, 34.0, 24.0)
    verdict = judge(player, player.shrink(4.0), GROUND, [pair(40.0)])
    assert verdict.points == 0


def test_score_is_credited_before_a_later_collision():
    player = Rect(100.0, 150.0, 34.0, 24.0)
    pairs = [pair(40.0), pair(110.0, upper_h=200.0)]
    verdict = judge(player, player.shrink(4.0), GROUND, pairs)
    assert verdict.collided
    assert verdict.points == 1


def test_collision_short_circuits_remaining_pairs():
    player = Rect(100.0, 150.0, 34.0, 24.0)
    hit = pair(110.0, upper_h=200.0)
    later = pair(0.0)
    verdict = judge(player, player.shrink(4.0), GROUND, [hit, later])
    assert verdict.collided
    assert verdict.points == 0
    assert not later[0].scored


def test_hitbox_padding_forgives_a_graze():
    body = Rect(100.0, 102.0, 34.0, 24.0)
    grazing = pair(120.0, upper_h=105.0)
    assert rects_overlap(body, grazing[0].rect)
    assert not judge(body, body.shrink(4.0), GROUND, [grazing]).collided
