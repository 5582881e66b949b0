"""
Microbenchmark: time per step vs number of chain points.
Also compares the exact chain solve with the sequential-impulse reference.
Run:
  python benchmarks/bench_steps.py
"""
import time
import numpy as np
from tether_sim.cable import Cable
from tether_sim.chain import Chain
from tether_sim.constraints.solver import solve_chain_velocities, solve_chain_velocities_gs
from tether_sim.profiler import Profiler
from tether_sim.scenarios import uniform_field
from tether_sim.types import Anchor

def _random_chain(n: int, rng) -> Chain:
    dirs = rng.normal(size=(n - 1, 3))
    dirs /= np.linalg.norm(dirs, axis=1)[:, None]
    positions = np.vstack([np.zeros(3), np.cumsum(0.1 * dirs, axis=0)])
    return Chain(
        positions=positions,
        velocities=rng.normal(size=(n, 3)),
        masses=np.full(n, 1e-4),
        link_length=0.1,
        linear_density=1e-3,
    )

def run(n: int, steps: int = 200):
    prof = Profiler()
    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)
    chain = _random_chain(n, rng)
    chain.fixed[0] = True
    anchor = Anchor(position=chain.positions[0], mass=1.3)
    cable = Cable.from_state(chain, anchor, field=uniform_field(), profiler=prof)

    # warmup
    for _ in range(10):
        cable.step(1e-4)

    t0 = time.perf_counter()
    for _ in range(steps):
        cable.step(1e-4)
    t1 = time.perf_counter()

    total = t1 - t0
    per_step = total / steps
    return per_step, prof.stats.summary()

def compare_solvers(n: int):
    rng = np.random.default_rng(n)
    chain = _random_chain(n, rng)

    v_exact = chain.velocities.copy()
    t0 = time.perf_counter()
    J_exact = solve_chain_velocities(chain.positions, v_exact, chain.masses)
    t1 = time.perf_counter()

    v_gs = chain.velocities.copy()
    J_gs = solve_chain_velocities_gs(chain.positions, v_gs, chain.masses, iters=2000, tol=1e-10)
    t2 = time.perf_counter()

    err = float(np.max(np.abs(J_exact - J_gs)))
    return 1e3 * (t1 - t0), 1e3 * (t2 - t1), err

if __name__ == "__main__":
    for n in [10, 100, 1000, 5000]:
        per_step, summary = run(n)
        print(f"N={n:5d}  step={1e3*per_step:8.3f} ms  steps/s={1/per_step:8.1f}")
        # print top sections
        for k in ["forces", "solve", "integrate", "project"]:
            if k in summary:
                print(" ", k, summary[k])
        print()

    for n in [10, 50, 200]:
        exact_ms, gs_ms, err = compare_solvers(n)
        print(f"N={n:4d}  exact={exact_ms:8.3f} ms  gauss-seidel={gs_ms:9.3f} ms  max|dJ|={err:.2e}")
