# examples/orbital_deployment.py
from tether_sim.profiler import Profiler
from tether_sim.recorder import DebugRecorder
from tether_sim.scenarios import orbital_tether

prof = Profiler()

# 100 m of cable, 1000 points, straight down at 10 m/s, 1 N braking once fully out
cable = orbital_tether(length=100.0, points=1000, deployment_angle=(0.0, 0.0), profiler=prof)

dt = 1e-4
cable.run(duration=1.0, dt=dt, recorder=DebugRecorder(), record_every=2000)

print("points:", cable.n_points, "length:", cable.length)
print("mid altitude:", cable.midpoint_altitude(), "mid speed:", cable.midpoint_speed())
print("max tension:", cable.max_tension())
for name, stats in prof.stats.summary().items():
    print(f"  {name:10s} mean={stats['mean_ms']:.4f} ms")
