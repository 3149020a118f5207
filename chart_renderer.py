import pygame
from config import *


class HistogramRenderer:
    def __init__(self, rect=HISTOGRAM_RECT):
        # rect is the plotting area; the panel background extends past it
        self.rect = pygame.Rect(rect)
        self.pad = 10
        self.surface = pygame.Surface(
            (self.rect.width + 2 * self.pad, self.rect.height + 3 * self.pad), pygame.SRCALPHA)

        self.label_font = pygame.font.SysFont("Arial", 9)
        self.title_font = pygame.font.SysFont("Arial", 10)

    def bar_heights(self, counts, max_count):
        return [count / max_count * self.rect.height for count in counts]

    def theory_points(self, theory, total, max_count):
        """
        Expected count per bin, as points at the bar centres (panel coordinates).
        """
        bar_width = self.rect.width / HISTOGRAM_BINS
        base_y = self.pad + self.rect.height
        points = []
        for index, fraction in enumerate(theory):
            expected = fraction * total
            # Expected counts above the tallest bar are clipped at the panel top
            height = min(expected / max_count, 1.0) * self.rect.height
            points.append((self.pad + index * bar_width + bar_width / 2, base_y - height))
        return points

    def render(self, screen, histogram, theory=None):
        """
        Draw the angle distribution panel.

        histogram: mapping bin start angle -> count
        theory: optional expected fraction per bin, drawn dashed when any count exists
        """
        self.surface.fill(HISTOGRAM_BG_COLOR)

        keys = sorted(histogram)
        counts = [histogram[k] for k in keys]
        max_count = max(1, *counts) if counts else 1
        total = sum(counts)

        base_y = self.pad + self.rect.height

        # Axis
        pygame.draw.line(self.surface, HISTOGRAM_AXIS_COLOR,
                         (self.pad, base_y), (self.pad + self.rect.width, base_y), 1)

        # Bars
        bar_width = self.rect.width / HISTOGRAM_BINS
        for index, (angle, height) in enumerate(zip(keys, self.bar_heights(counts, max_count))):
            x = self.pad + index * bar_width
            if height > 0:
                bar = pygame.Rect(int(x), int(round(base_y - height)),
                                  max(1, int(bar_width) - 1), max(1, int(round(height))))
                pygame.draw.rect(self.surface, HISTOGRAM_BAR_COLOR, bar)

            if index % HISTOGRAM_LABEL_EVERY == 0:
                label = self.label_font.render(f"{angle}°", True, COLOR_TEXT)
                self.surface.blit(label, label.get_rect(midtop=(x + bar_width / 2, base_y + 3)))

        # Expected distribution (dashed)
        if theory is not None and total > 0:
            points = self.theory_points(theory, total, max_count)
            for i in range(0, len(points) - 1, 2):
                pygame.draw.line(self.surface, HISTOGRAM_THEORY_COLOR, points[i], points[i + 1], 2)

        # Title
        title = self.title_font.render("Scattering Angle Distribution", True, COLOR_TEXT)
        self.surface.blit(title, title.get_rect(midbottom=(self.pad + self.rect.width / 2, self.pad - 1)))

        screen.blit(self.surface, (self.rect.x - self.pad, self.rect.y - self.pad))
