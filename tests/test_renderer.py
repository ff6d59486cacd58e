from stoney.assets import AssetProvider
from stoney.data_models import EntityKind
from stoney.renderer import BIRD, DRAWERS, GROUND, PIPE, FrameContext, Renderer, _draw_ground
from stoney.session import Session


def rgb(surface, x, y):
    return tuple(surface.get_at((int(x), int(y))))[:3]


def make_renderer(pygame, env, tmp_path):
    window = pygame.display.set_mode((int(env.width), int(env.height)))
    ctx = FrameContext(window, (env.width, env.height))
    return Renderer(ctx, AssetProvider(tmp_path))


def test_entity_drawers_need_only_the_entity(headless, env, rng, tmp_path):
    renderer = make_renderer(headless, env, tmp_path)
    session = Session(env, rng=rng)
    up, low = session.stream.spawn(x=200.0)

    for entity in (up, low, session.player):
        DRAWERS[entity.kind](renderer.ctx, renderer.assets, entity)

    canvas = renderer.ctx.canvas
    assert rgb(canvas, up.x + 5, up.y + up.h - 3) == PIPE
    assert rgb(canvas, low.x + 5, low.y + 3) == PIPE
    player = session.player
    assert rgb(canvas, player.x + player.w / 2, player.y + player.h / 2) == BIRD
    assert EntityKind.GROUND not in DRAWERS


def test_ground_is_drawn_from_the_play_height(headless, env, tmp_path):
    renderer = make_renderer(headless, env, tmp_path)
    _draw_ground(renderer.ctx, renderer.assets, env.play_height, 12.0)
    canvas = renderer.ctx.canvas
    assert rgb(canvas, 5, env.play_height + 20) == GROUND


def test_full_frame_without_sprites(headless, env, rng, tmp_path):
    renderer = make_renderer(headless, env, tmp_path)
    session = Session(env, rng=rng)
    session.press()
    up, _ = session.stream.spawn(x=200.0)

    renderer.draw(session, paused=True)

    canvas = renderer.ctx.canvas
    assert rgb(canvas, up.x + 5, up.y + up.h - 3) == PIPE
    assert rgb(canvas, 5, env.play_height + 20) == GROUND
