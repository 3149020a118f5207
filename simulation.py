# -*- coding: utf-8 -*-
"""
Simulation loop
Owns the simulation state and drives Spawner -> Physics -> Renderer once per frame
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from config import EMISSION_INTERVAL_MS, MAX_PARTICLES, CAPTURE_RADIUS
from histogram import AngleHistogram
from physics_engine import Particle, advance_particles, create_particle, expected_bin_fractions
from runtime_config import SimulationParameters


class PreconditionNotMet(RuntimeError):
    """Raised by a renderer asked to draw before its surface exists"""


# ============================================================================
# State
# ============================================================================

@dataclass
class SimulationState:
    particles: List[Particle] = field(default_factory=list)
    histogram: AngleHistogram = field(default_factory=AngleHistogram)
    particles_emitted: int = 0
    start_timestamp: Optional[float] = None  # ms, None until the first tick after a start
    running: bool = False
    deflected: int = 0

    def clear(self) -> None:
        self.running = False
        self.particles = []
        self.histogram.reset()
        self.particles_emitted = 0
        self.start_timestamp = None
        self.deflected = 0


@dataclass(frozen=True)
class ParticleView:
    x: float
    y: float
    path: Tuple[Tuple[float, float], ...]
    deflected: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "deflected": self.deflected,
            "path": [[round(px, 1), round(py, 1)] for px, py in self.path],
        }


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything a renderer needs for one paint; detached from live state"""
    particles: Tuple[ParticleView, ...]
    histogram: Dict[int, int]
    params: SimulationParameters
    particles_emitted: int
    deflected: int
    running: bool
    theory: Optional[Tuple[float, ...]] = None

    @property
    def active(self) -> int:
        return len(self.particles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "particles": [p.to_dict() for p in self.particles],
            "histogram": {str(k): v for k, v in sorted(self.histogram.items())},
            "theory": list(self.theory) if self.theory is not None else None,
            "params": self.params.to_dict(),
            "particlesEmitted": self.particles_emitted,
            "deflected": self.deflected,
            "active": self.active,
            "running": self.running,
        }


# ============================================================================
# Spawner
# ============================================================================

class Spawner:
    def __init__(self, interval_ms: float = EMISSION_INTERVAL_MS, max_particles: int = MAX_PARTICLES):
        self.interval_ms = interval_ms
        self.max_particles = max_particles

    def should_spawn(self, elapsed_ms: float, emitted: int, count: int, running: bool) -> bool:
        return elapsed_ms > emitted * self.interval_ms and count < self.max_particles and running

    def maybe_spawn(self, state: SimulationState, timestamp_ms: float,
                    rng: np.random.Generator) -> Optional[Particle]:
        if state.start_timestamp is None:
            # Pacing restarts from zero at the first tick after a start
            state.start_timestamp = timestamp_ms

        elapsed = timestamp_ms - state.start_timestamp
        if not self.should_spawn(elapsed, state.particles_emitted, len(state.particles), state.running):
            return None

        particle = create_particle(rng)
        state.particles.append(particle)
        state.particles_emitted += 1
        return particle


# ============================================================================
# Loop
# ============================================================================

FrameCallback = Callable[[FrameSnapshot], Any]


class SimulationLoop:
    """
    Two-state machine (Stopped / Running) around the per-frame tick.

    The shell calls tick() once per display frame with a millisecond
    timestamp and keeps scheduling only while tick() returns True.
    """

    def __init__(self, params: Optional[SimulationParameters] = None,
                 on_frame: Optional[FrameCallback] = None,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        self.params = params if params is not None else SimulationParameters()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.state = SimulationState()
        self.spawner = Spawner()
        self.on_frame = on_frame

        self.frames_drawn = 0
        self.frames_skipped = 0

        self._theory_key = None
        self._theory: Optional[Tuple[float, ...]] = None

        # Initial mount: empty scene
        self.redraw()

    @property
    def running(self) -> bool:
        return self.state.running

    # --- commands ---

    def start(self) -> bool:
        if self.state.running:
            return False
        self.state.start_timestamp = None
        self.state.running = True
        print(f"[Simulation] Started (emitted so far: {self.state.particles_emitted})")
        return True

    def pause(self) -> bool:
        if not self.state.running:
            return False
        self.state.running = False
        print(f"[Simulation] Paused with {len(self.state.particles)} particles in flight")
        return True

    def toggle(self) -> bool:
        if self.state.running:
            self.pause()
        else:
            self.start()
        return self.state.running

    def reset(self) -> None:
        self.state.clear()
        print("[Simulation] Reset")
        self.redraw()

    def configure(self, **changes: Any) -> List[str]:
        changed = self.params.update(**changes)
        self._after_configure(changed)
        return changed

    def configure_from_dict(self, data: Dict[str, Any]) -> List[str]:
        changed = self.params.update_from_dict(data)
        self._after_configure(changed)
        return changed

    def _after_configure(self, changed: List[str]) -> None:
        if not changed:
            return
        print(f"[Simulation] Parameters updated: {changed}")
        # A running loop repaints on its own next tick
        if not self.state.running:
            self.redraw()

    # --- frame ---

    def tick(self, timestamp_ms: float) -> bool:
        """One frame: Spawner, Physics, Renderer. Returns whether to reschedule."""
        if not self.state.running:
            return False

        params = self.params.copy()

        self.spawner.maybe_spawn(self.state, timestamp_ms, self.rng)

        survivors, deflected = advance_particles(
            self.state.particles, params, self.state.histogram, self.rng)
        self.state.particles = survivors
        self.state.deflected += deflected

        self.redraw(params)
        return self.state.running

    def redraw(self, params: Optional[SimulationParameters] = None) -> bool:
        if self.on_frame is None:
            return False
        snapshot = self.get_frame_snapshot(params)
        try:
            self.on_frame(snapshot)
        except PreconditionNotMet:
            self.frames_skipped += 1
            return False
        self.frames_drawn += 1
        return True

    def theory_fractions(self, params: Optional[SimulationParameters] = None) -> Tuple[float, ...]:
        params = params if params is not None else self.params
        key = (params.nuclear_charge, params.alpha_energy)
        if key != self._theory_key:
            self._theory = tuple(float(v) for v in expected_bin_fractions(
                params.nuclear_charge, params.alpha_energy, CAPTURE_RADIUS))
            self._theory_key = key
            print(f"[Physics] Expected distribution recomputed for Z={key[0]}, E={key[1]:g} MeV")
        return self._theory

    def get_frame_snapshot(self, params: Optional[SimulationParameters] = None) -> FrameSnapshot:
        params = params.copy() if params is not None else self.params.copy()
        theory = None
        if params.show_histogram and params.show_theory:
            theory = self.theory_fractions(params)

        particles = tuple(
            ParticleView(p.x, p.y, tuple(p.path), p.has_reached_nucleus)
            for p in self.state.particles
        )
        return FrameSnapshot(
            particles=particles,
            histogram=self.state.histogram.snapshot(),
            params=params,
            particles_emitted=self.state.particles_emitted,
            deflected=self.state.deflected,
            running=self.state.running,
            theory=theory,
        )
