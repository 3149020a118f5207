# -*- coding: utf-8 -*-
"""
Angle distribution check

Runs the engine headless and compares the recorded histogram with the
expected distribution from the deflection formula.

Only particles that pass within the capture radius are deflected, and
their impact parameters are uniform on [-CAPTURE_RADIUS, CAPTURE_RADIUS],
so the observed share per bin should converge to expected_bin_fractions().
"""

import time

import numpy as np

from config import FPS, HISTOGRAM_BIN_WIDTH
from runtime_config import SimulationParameters
from simulation import SimulationLoop


def run_distribution_simulation(params: SimulationParameters,
                                frames: int = 20000,
                                seed: int = 0,
                                report_every: int = 0) -> dict:
    """
    Run the loop for a number of frames at the display rate.

    Returns:
        dict with the histogram snapshot, deflection count and expected fractions
    """
    loop = SimulationLoop(params=params.copy(), seed=seed)
    loop.start()

    frame_ms = 1000.0 / FPS
    start_time = time.time()
    for i in range(frames):
        loop.tick(i * frame_ms)
        if report_every and i % report_every == 0:
            print(f"  frame={i}, emitted={loop.state.particles_emitted}, deflected={loop.state.deflected}")

    elapsed = time.time() - start_time
    if report_every:
        print(f"Run finished: {frames} frames in {elapsed:.1f}s")

    return {
        'histogram': loop.state.histogram.snapshot(),
        'deflected': loop.state.deflected,
        'emitted': loop.state.particles_emitted,
        'expected': np.array(loop.theory_fractions()),
        'params': loop.params.copy(),
    }


def analyze_distribution(result: dict) -> dict:
    """
    Observed vs expected share per bin

    Returns None when nothing was deflected.
    """
    deflected = result['deflected']
    if deflected == 0:
        return None

    keys = sorted(result['histogram'])
    observed = np.array([result['histogram'][k] for k in keys], dtype=np.float64) / deflected
    expected = result['expected']

    # Total variation distance, 0 = identical, 1 = disjoint
    distance = 0.5 * float(np.sum(np.abs(observed - expected)))

    return {
        'bins': keys,
        'observed': observed,
        'expected': expected,
        'distance': distance,
        'deflected': deflected,
        'emitted': result['emitted'],
    }


def main():
    print("=" * 60)
    print("Scattering angle distribution check")
    print("=" * 60)

    settings = [(79, 5.0), (92, 10.0), (20, 3.0)]

    for z, e in settings:
        params = SimulationParameters(nuclear_charge=z, alpha_energy=e)
        print(f"\nZ = {z}, E = {e:g} MeV")
        result = run_distribution_simulation(params, frames=20000, report_every=5000)
        analysis = analyze_distribution(result)
        if analysis is None:
            print("No particle reached the nucleus")
            continue

        print(f"{'Bin':<8} | {'Observed':<10} | {'Expected':<10}")
        print("-" * 34)
        for key, obs, exp in zip(analysis['bins'], analysis['observed'], analysis['expected']):
            if obs > 0 or exp > 0.001:
                print(f"{key:>3}-{key + HISTOGRAM_BIN_WIDTH:<4} | {obs:<10.3f} | {exp:<10.3f}")
        print(f"Deflected {analysis['deflected']} of {analysis['emitted']} emitted")
        print(f"Total variation distance = {analysis['distance']:.3f}")


if __name__ == "__main__":
    main()
