import pygame
from config import *
from chart_renderer import HistogramRenderer
from simulation import FrameSnapshot, PreconditionNotMet


def nucleus_alpha(nuclear_charge):
    """Nucleus fill opacity 0-255, proportional to Z and saturating at Z=100"""
    return int(round(min(1.0, max(0.0, nuclear_charge / NUCLEUS_OPACITY_Z)) * 255))


class SceneRenderer:
    """Paints a FrameSnapshot; never touches simulation state."""

    def __init__(self, surface=None):
        self.surface = None
        self.layer = None
        self.histogram = HistogramRenderer()
        self.font = pygame.font.SysFont("Arial", 12)
        if surface is not None:
            self.attach(surface)

    def attach(self, surface):
        self.surface = surface
        # Translucent paths go on their own layer
        self.layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)

    def __call__(self, snapshot):
        return self.draw(snapshot)

    def draw_path(self, screen, path):
        # Translucent lines need an alpha layer; only the path's bounding box is cleared and blitted
        xs = [p[0] for p in path]
        ys = [p[1] for p in path]
        area = pygame.Rect(int(min(xs)) - 1, int(min(ys)) - 1,
                           int(max(xs) - min(xs)) + 3, int(max(ys) - min(ys)) + 3)
        area = area.clip(self.layer.get_rect())
        if area.width == 0 or area.height == 0:
            return
        self.layer.fill((0, 0, 0, 0), area)
        pygame.draw.lines(self.layer, COLOR_PATH, False, path, 1)
        screen.blit(self.layer, area.topleft, area)

    def draw(self, snapshot: FrameSnapshot):
        if self.surface is None:
            raise PreconditionNotMet("no drawing surface attached")

        screen = self.surface
        params = snapshot.params

        screen.fill(COLOR_BG)

        # Foil
        pygame.draw.line(screen, COLOR_FOIL, (CENTER_X, 0), (CENTER_X, HEIGHT), FOIL_WIDTH)

        # Nucleus
        size = NUCLEUS_RADIUS * 2 + 1
        disc = pygame.Surface((size, size), pygame.SRCALPHA)
        pygame.draw.circle(disc, COLOR_NUCLEUS + (nucleus_alpha(params.nuclear_charge),),
                           (NUCLEUS_RADIUS, NUCLEUS_RADIUS), NUCLEUS_RADIUS)
        screen.blit(disc, (int(CENTER_X) - NUCLEUS_RADIUS, int(CENTER_Y) - NUCLEUS_RADIUS))

        # Each particle: its path, then its disc
        for particle in snapshot.particles:
            if params.show_paths and len(particle.path) > 1:
                self.draw_path(screen, particle.path)
            pygame.draw.circle(screen, COLOR_PARTICLE, (int(particle.x), int(particle.y)), PARTICLE_RADIUS)

        if params.show_histogram:
            self.histogram.render(screen, snapshot.histogram, snapshot.theory)

        # Info
        lines = [
            f"Particles: {snapshot.particles_emitted}",
            f"Nuclear Charge (Z): {params.nuclear_charge}",
            f"α Energy: {params.alpha_energy:g} MeV",
        ]
        for i, text in enumerate(lines):
            screen.blit(self.font.render(text, True, COLOR_TEXT), (10, 8 + i * 20))

        return screen
