import pygame
import pytest

from config import *
from chart_renderer import HistogramRenderer
from histogram import AngleHistogram
from renderer import SceneRenderer, nucleus_alpha
from runtime_config import SimulationParameters
from simulation import FrameSnapshot, ParticleView, PreconditionNotMet, SimulationLoop


def make_snapshot(particles=(), histogram=None, theory=None, **params):
    return FrameSnapshot(
        particles=tuple(particles),
        histogram=histogram if histogram is not None else AngleHistogram().snapshot(),
        params=SimulationParameters(**params),
        particles_emitted=len(particles),
        deflected=0,
        running=True,
        theory=theory,
    )


def rgb(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


@pytest.fixture
def canvas():
    return pygame.Surface((WIDTH, HEIGHT))


def test_draw_without_surface_raises():
    with pytest.raises(PreconditionNotMet):
        SceneRenderer().draw(make_snapshot())


def test_background_and_foil(canvas):
    SceneRenderer(canvas).draw(make_snapshot())
    assert rgb(canvas, 50, 390) == COLOR_BG
    assert rgb(canvas, 590, 390) == COLOR_BG
    foil = [rgb(canvas, x, 390) for x in (299, 300, 301)]
    assert COLOR_FOIL in foil


def test_nucleus_opacity_follows_charge(canvas):
    renderer = SceneRenderer(canvas)
    renderer.draw(make_snapshot(nuclear_charge=1))
    faint = rgb(canvas, int(CENTER_X) + 2, int(CENTER_Y))
    renderer.draw(make_snapshot(nuclear_charge=92))
    strong = rgb(canvas, int(CENTER_X) + 2, int(CENTER_Y))
    # Red disc over a light background: more charge, less green
    assert strong[0] > 200
    assert strong[1] < faint[1]


def test_nucleus_alpha():
    assert nucleus_alpha(0) == 0
    assert nucleus_alpha(50) == 128
    assert nucleus_alpha(100) == 255
    assert nucleus_alpha(150) == 255


def test_particle_and_path(canvas):
    path = ((20.0, 350.0), (60.0, 350.0), (100.0, 350.0))
    particle = ParticleView(100.0, 350.0, path, False)
    renderer = SceneRenderer(canvas)

    renderer.draw(make_snapshot([particle], show_paths=True))
    assert rgb(canvas, 100, 350) == COLOR_PARTICLE
    on_path = rgb(canvas, 40, 350)
    assert on_path != COLOR_BG
    assert on_path[2] > on_path[0]

    renderer.draw(make_snapshot([particle], show_paths=False))
    assert rgb(canvas, 40, 350) == COLOR_BG
    assert rgb(canvas, 100, 350) == COLOR_PARTICLE


def test_single_point_path_is_not_drawn(canvas):
    particle = ParticleView(100.0, 350.0, ((100.0, 350.0),), False)
    SceneRenderer(canvas).draw(make_snapshot([particle], show_paths=True))
    assert rgb(canvas, 95, 350) == COLOR_BG


def test_histogram_panel_toggle(canvas):
    histogram = AngleHistogram()
    for _ in range(5):
        histogram.record(3.0)
    x, y, w, h = HISTOGRAM_RECT
    probe = (x + 4, y + h - 20)

    renderer = SceneRenderer(canvas)
    renderer.draw(make_snapshot(histogram=histogram.snapshot(), show_histogram=True))
    bar = rgb(canvas, *probe)
    assert bar[2] > bar[0] + 50

    renderer.draw(make_snapshot(histogram=histogram.snapshot(), show_histogram=False))
    assert rgb(canvas, *probe) == COLOR_BG


def test_empty_histogram_draws_no_bars(canvas):
    x, y, w, h = HISTOGRAM_RECT
    SceneRenderer(canvas).draw(make_snapshot(show_histogram=True))
    probe = rgb(canvas, x + 4, y + h - 20)
    assert probe[2] - probe[0] < 20


def test_theory_points_scale_with_total():
    chart = HistogramRenderer()
    theory = [0.5, 0.25, 0.25] + [0.0] * (HISTOGRAM_BINS - 3)
    points = chart.theory_points(theory, total=8, max_count=4)
    base = chart.pad + chart.rect.height
    assert len(points) == HISTOGRAM_BINS
    # Expected 4 of max 4: full height; expected 2: half height
    assert points[0][1] == pytest.approx(base - chart.rect.height)
    assert points[1][1] == pytest.approx(base - chart.rect.height / 2)
    assert points[-1][1] == pytest.approx(base)


def test_bar_heights_scale_by_max():
    chart = HistogramRenderer()
    assert chart.bar_heights([0, 2, 4], 4) == [0, chart.rect.height / 2, chart.rect.height]


def test_loop_drives_renderer(canvas):
    renderer = SceneRenderer(canvas)
    loop = SimulationLoop(on_frame=renderer, seed=0)
    assert loop.frames_drawn == 1
    loop.start()
    for i in range(20):
        loop.tick(i * 16.0)
    assert loop.frames_drawn == 21
    assert loop.frames_skipped == 0


def test_each_path_is_drawn_before_its_particle(canvas, monkeypatch):
    calls = []
    renderer = SceneRenderer(canvas)
    draw_path = renderer.draw_path
    circle = pygame.draw.circle

    def record_path(screen, path):
        calls.append(("path", tuple(path[-1])))
        draw_path(screen, path)

    def record_circle(surface, color, center, radius, *args, **kwargs):
        if tuple(color) == COLOR_PARTICLE:
            calls.append(("disc", tuple(center)))
        return circle(surface, color, center, radius, *args, **kwargs)

    monkeypatch.setattr(renderer, "draw_path", record_path)
    monkeypatch.setattr(pygame.draw, "circle", record_circle)

    first = ParticleView(100.0, 300.0, ((20.0, 300.0), (100.0, 300.0)), False)
    second = ParticleView(200.0, 320.0, ((20.0, 320.0), (200.0, 320.0)), False)
    renderer.draw(make_snapshot([first, second], show_paths=True, show_histogram=False))

    assert calls == [
        ("path", (100.0, 300.0)), ("disc", (100, 300)),
        ("path", (200.0, 320.0)), ("disc", (200, 320)),
    ]
    assert rgb(canvas, 150, 320) != COLOR_BG
