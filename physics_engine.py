import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from numba import njit

from config import *
from histogram import AngleHistogram
from runtime_config import SimulationParameters


@njit(cache=True)
def rutherford_angle_numba(impact_parameter, nuclear_charge, alpha_energy, random_factor):
    """
    Simplified Rutherford deflection, in degrees.

    tan(theta/2) = k * Z * z_alpha / (2 * E * |b| * scaleFactor)
    with scaleFactor = ENERGY_SCALE / E^2. The sign follows b so the particle
    is pushed away on the side it passed. b == 0 gives exactly 0.
    """
    if impact_parameter == 0.0:
        return 0.0

    scale_factor = ENERGY_SCALE / (alpha_energy * alpha_energy)
    tan_half_theta = (COULOMB_K * nuclear_charge * ALPHA_CHARGE) / (
        2.0 * alpha_energy * abs(impact_parameter) * scale_factor)
    angle = 2.0 * math.atan(tan_half_theta) * random_factor

    angle = angle * DEG_PER_RAD
    if impact_parameter < 0.0:
        angle = -angle
    return angle


@njit(cache=True)
def expected_bin_fractions_numba(nuclear_charge, alpha_energy, capture_radius,
                                 samples, factor_steps, n_bins, bin_width):
    """
    Expected share of deflected particles per bin.

    Impact parameters are uniform on [-capture_radius, capture_radius] (the
    only ones that ever reach the nucleus) and the random factor is uniform on
    [RANDOM_FACTOR_MIN, RANDOM_FACTOR_MAX]. Both are integrated with the
    midpoint rule. Mass that lands outside the bins is dropped.
    """
    counts = np.zeros(n_bins, dtype=np.float64)
    if samples <= 0 or factor_steps <= 0:
        return counts

    b_step = 2.0 * capture_radius / samples
    f_step = (RANDOM_FACTOR_MAX - RANDOM_FACTOR_MIN) / factor_steps
    total = 0
    for i in range(samples):
        b = -capture_radius + (i + 0.5) * b_step
        for j in range(factor_steps):
            f = RANDOM_FACTOR_MIN + (j + 0.5) * f_step
            angle = rutherford_angle_numba(b, nuclear_charge, alpha_energy, f)
            key = int(math.floor(abs(angle) / bin_width))
            total += 1
            if key < n_bins:
                counts[key] += 1.0

    return counts / total


def expected_bin_fractions(nuclear_charge: int, alpha_energy: float,
                           capture_radius: float = CAPTURE_RADIUS,
                           samples: int = THEORY_SAMPLES,
                           factor_steps: int = 11) -> np.ndarray:
    return expected_bin_fractions_numba(
        float(nuclear_charge), float(alpha_energy), float(capture_radius),
        samples, factor_steps, HISTOGRAM_BINS, float(HISTOGRAM_BIN_WIDTH))


# ============================================================================
# Particle record
# ============================================================================

@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    impact_parameter: float
    has_reached_nucleus: bool = False
    path: List[Tuple[float, float]] = field(default_factory=list)

    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def speed(self) -> float:
        return math.sqrt(self.vx * self.vx + self.vy * self.vy)

    def distance_to_nucleus(self) -> float:
        return math.sqrt((self.x - CENTER_X) ** 2 + (self.y - CENTER_Y) ** 2)

    def is_outside(self) -> bool:
        return self.x < 0 or self.x > WIDTH or self.y < 0 or self.y > HEIGHT


def create_particle(rng: np.random.Generator) -> Particle:
    """New alpha particle on the left edge, up to a quarter height off centre"""
    y = CENTER_Y + (rng.random() - 0.5) * SPAWN_SPREAD
    # The seed point is always recorded, whatever the path toggle says
    return Particle(
        x=0.0,
        y=y,
        vx=ALPHA_SPEED,
        vy=0.0,
        impact_parameter=y - CENTER_Y,
        has_reached_nucleus=False,
        path=[(0.0, y)],
    )


# ============================================================================
# Per-tick physics
# ============================================================================

def calculate_trajectory(impact_parameter: float, params: SimulationParameters,
                         rng: Optional[np.random.Generator] = None,
                         random_factor: Optional[float] = None) -> float:
    """Signed deflection angle in degrees for one particle"""
    if random_factor is None:
        if rng is None:
            rng = np.random.default_rng()
        random_factor = RANDOM_FACTOR_MIN + rng.random() * (RANDOM_FACTOR_MAX - RANDOM_FACTOR_MIN)
    return float(rutherford_angle_numba(
        float(impact_parameter),
        float(params.nuclear_charge),
        float(params.alpha_energy),
        float(random_factor),
    ))


def deflect_particle(particle: Particle, params: SimulationParameters,
                     histogram: AngleHistogram, rng: np.random.Generator) -> float:
    angle = calculate_trajectory(particle.impact_parameter, params, rng)
    histogram.record(angle)

    # Keep the speed, point it along the deflection angle
    speed = particle.speed()
    angle_rad = angle / DEG_PER_RAD
    particle.vx = speed * math.cos(angle_rad)
    particle.vy = speed * math.sin(angle_rad)

    particle.vx += (rng.random() - 0.5) * 2.0 * VELOCITY_JITTER
    particle.vy += (rng.random() - 0.5) * 2.0 * VELOCITY_JITTER

    particle.has_reached_nucleus = True
    return angle


def update_particle_position(particle: Particle, params: SimulationParameters,
                             histogram: AngleHistogram, rng: np.random.Generator) -> bool:
    """
    Advance one particle by one tick.

    Returns False once the particle has left the canvas and should be dropped.
    """
    if not particle.has_reached_nucleus and particle.distance_to_nucleus() <= CAPTURE_RADIUS:
        deflect_particle(particle, params, histogram, rng)

    particle.x += particle.vx
    particle.y += particle.vy

    if params.show_paths and len(particle.path) < MAX_PATH_POINTS:
        particle.path.append((particle.x, particle.y))

    return not particle.is_outside()


def advance_particles(particles: List[Particle], params: SimulationParameters,
                      histogram: AngleHistogram,
                      rng: np.random.Generator) -> Tuple[List[Particle], int]:
    """
    Move every particle one tick.

    Returns the survivors (order kept) and the number of particles that
    were deflected during this tick.
    """
    survivors = []
    deflected = 0
    for particle in particles:
        was_deflected = particle.has_reached_nucleus
        alive = update_particle_position(particle, params, histogram, rng)
        if particle.has_reached_nucleus and not was_deflected:
            deflected += 1
        if alive:
            survivors.append(particle)
    return survivors, deflected
