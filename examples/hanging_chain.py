# examples/hanging_chain.py
from tether_sim import Cable, CableConfig
import numpy as np

def gravity_off_anchor(x):
    # Anchor sits at the origin and is held there.
    if np.linalg.norm(x) < 1e-9:
        return np.zeros(3)
    return np.array([0.0, -9.81, 0.0])

config = CableConfig(link_length=0.1, initial_points=11, initial_direction=(1.0, 0.0, 0.0),
                     pin_anchor_point=True, tension_smoothing=1e-2)
cable = Cable(config, field=gravity_off_anchor)

for _ in range(5000):
    cable.step(1e-4)

print("t:", cable.time)
print("tip:", cable.positions[-1], "|tip - anchor|:", float(np.linalg.norm(cable.positions[-1])))
print("energy:", cable.energy(), "max length error:", cable.max_length_error())
print("tension at anchor:", cable.tensions[0])
