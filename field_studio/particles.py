"""
Damped particle advection for the flow-field visualization.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .streamlines import Bounds
from .vector_field import FieldFunction

DAMPING = 0.99
ACCELERATION_SCALE = 0.01


class ParticleSystem:
    """
    Particles pushed by a vector field, with damping and finite lifetime.

    State lives in arrays: ``positions`` and ``velocities`` have shape
    ``(count, 2)``, ``life`` has shape ``(count,)``. Dead or escaped particles
    respawn at a uniformly random position with zero velocity and full life.
    Runs are reproducible for a fixed ``seed``.
    """

    def __init__(
        self,
        count: int,
        bounds: Bounds = Bounds(),
        max_life: int = 100,
        seed: Optional[int] = None,
    ):
        self.bounds = bounds
        self.max_life = max_life
        self.rng = np.random.default_rng(seed)
        self.positions = self._random_positions(count)
        self.velocities = np.zeros((count, 2), dtype=np.float64)
        self.life = self.rng.uniform(0.0, max_life, size=count)

    def __len__(self) -> int:
        return self.positions.shape[0]

    def _random_positions(self, n: int) -> np.ndarray:
        xs = self.rng.uniform(self.bounds.xmin, self.bounds.xmax, size=n)
        ys = self.rng.uniform(self.bounds.ymin, self.bounds.ymax, size=n)
        return np.stack([xs, ys], axis=1)

    def step(self, field_fn: FieldFunction, particle_speed: float = 2.0) -> int:
        """
        Advance every particle by one frame.

        Returns
        -------
        int
            Number of particles respawned this frame.
        """
        for i, (px, py) in enumerate(self.positions):
            sample = field_fn(float(px), float(py))
            self.velocities[i, 0] += sample.field_x * particle_speed * ACCELERATION_SCALE
            self.velocities[i, 1] += sample.field_y * particle_speed * ACCELERATION_SCALE

        self.velocities *= DAMPING
        self.positions += self.velocities
        self.life -= 1

        b = self.bounds
        x, y = self.positions[:, 0], self.positions[:, 1]
        dead = (self.life <= 0) | (x < b.xmin) | (x > b.xmax) | (y < b.ymin) | (y > b.ymax)
        n_dead = int(np.count_nonzero(dead))
        if n_dead:
            self.positions[dead] = self._random_positions(n_dead)
            self.velocities[dead] = 0.0
            self.life[dead] = self.max_life
        return n_dead


__all__ = ["ParticleSystem", "DAMPING", "ACCELERATION_SCALE"]
