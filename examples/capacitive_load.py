import matplotlib.pyplot as plt

from tlfdtd import ParameterSet
from tlfdtd.driver import AnimationDriver
from tlfdtd.logging_config import setup_logging

if __name__ == "__main__":
    setup_logging()

    # Mismatched generator, capacitive load: the reflected pulses bounce
    # between both ends and get smeared by the capacitor.
    params = ParameterSet.from_settings({
        "Z0": 50,
        "generatorType": "step",
        "Rg": 20,
        "tRise": 1,
        "tPeriod": 20,
        "loadType": "C",
        "Cload": 5,
        "length": 10.0,
        "v": 2,
        "ndz": 400,
        "tStopSim": 200,
        "tStopWall": 5,
    })

    driver = AnimationDriver(params)
    print(driver.update_parameters(params).display())

    # Animated run, drawn live
    plt.ion()
    fig, ax = plt.subplots(figsize=(10, 4))
    driver.start()
    sim = driver.tick()
    (line,) = ax.plot(sim.positions, sim.voltages, 'b-')
    ax.set_ylim(-1.0, 2.0)
    ax.set_xlabel("length (m)")
    ax.grid(True)

    while driver.running:
        sim = driver.tick()
        line.set_ydata(sim.voltages)
        ax.set_title(f"t = {sim.sim_time * 1e9:.1f} ns")
        plt.pause(0.001)

    # Final result, computed at once
    sim = driver.show_final()
    t, v_gen, v_load = sim.terminal_samples()

    plt.ioff()
    plt.figure(figsize=(10, 4))
    plt.plot(t * 1e9, v_gen, 'b-', label='Generator')
    plt.plot(t * 1e9, v_load, 'r-', label='Load')
    plt.xlabel("time (ns)")
    plt.ylabel("Voltage (V)")
    plt.title("Terminal voltages")
    plt.legend()
    plt.grid(True)
    plt.show()
