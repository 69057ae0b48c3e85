import time

import matplotlib.pyplot as plt
import numpy as np

from tlfdtd import GeneratorKind, LoadKind, ParameterSet, initialize, run_to_completion
from tlfdtd.logging_config import setup_logging

if __name__ == "__main__":
    setup_logging()

    # --- CONFIGURATION ---
    # 10 m line at 2e8 m/s -> 50 ns propagation delay.
    # Change R_LOAD away from Z0 to see reflections.
    Z0 = 50.0
    R_SOURCE = 50.0
    R_LOAD = 50.0
    # ---------------------

    params = ParameterSet(
        z0=Z0,
        r_gen=R_SOURCE,
        generator=GeneratorKind.STEP,
        t_rise=1e-9,
        t_period=20e-9,
        load=LoadKind.RESISTIVE,
        r_load=R_LOAD,
        line_length=10.0,
        v=2e8,
        ndz=400,
        t_stop_sim=100e-9,
    )

    sim = initialize(params)
    print(f"dz = {sim.derived.dz * 1e3:.1f} mm, dt = {sim.dt * 1e12:.1f} ps, {sim.no_time_steps} steps")
    print(f"rho_gen = {sim.rho_gen:.3f}, rho_load = {sim.rho_load:.3f}")

    t0 = time.time()
    sim = run_to_completion(sim)
    print(f"Simulation completed in {time.time() - t0:.4f}s")

    # --- Visualization ---
    t, v_gen, v_load = sim.terminal_samples()

    fig, (ax_line, ax_term) = plt.subplots(2, 1, figsize=(10, 8))
    ax_line.plot(sim.positions, sim.voltages, 'b-')
    ax_line.set_title(f"Voltage on transmission line at t = {sim.sim_time * 1e9:.1f} ns")
    ax_line.set_xlabel("length (m)")
    ax_line.set_ylim(-1.0, 2.0)
    ax_line.grid(True)

    ax_term.plot(t * 1e9, v_gen, 'b-', label='Generator')
    ax_term.plot(t * 1e9, v_load, 'r-', label='Load')
    ax_term.axvline(sim.derived.t_prop * 1e9, color='green', linestyle=':', label='Propagation delay')
    ax_term.set_title("Terminal voltages")
    ax_term.set_xlabel("time (ns)")
    ax_term.legend(loc='upper right')
    ax_term.grid(True)

    plt.tight_layout()
    plt.show()
