from __future__ import annotations

import numpy as np

# Keep pitch short of straight up/down so look_at never degenerates.
_PITCH_LIMIT = 1.55


def _unit(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    return v / n if n > 0.0 else v


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """View matrix laid out column-major for OpenGL (array row i is column i)."""
    eye = np.asarray(eye, dtype=np.float64)
    f = _unit(np.asarray(target, dtype=np.float64) - eye)
    s = _unit(np.cross(f, up))
    u = np.cross(s, f)
    basis = np.stack([s, u, -f])

    m = np.eye(4, dtype=np.float32)
    m[:3, :3] = basis.T
    m[3, :3] = -(basis @ eye)
    return m


class FlyCamera:
    """Free-fly camera for inspecting generated terrain.

    yaw == 0 looks along +Z; positive pitch looks up.
    """

    def __init__(
        self,
        position: tuple[float, float, float],
        *,
        speed: float,
        sensitivity: float,
        yaw: float = 0.0,
        pitch: float = -0.35,
    ) -> None:
        self.position = np.array(position, dtype=np.float32)
        self.speed = float(speed)
        self.sensitivity = float(sensitivity)
        self.yaw = float(yaw)
        self.pitch = float(pitch)

    def forward(self) -> np.ndarray:
        cp = float(np.cos(self.pitch))
        return np.array(
            [np.sin(self.yaw) * cp, np.sin(self.pitch), np.cos(self.yaw) * cp],
            dtype=np.float32,
        )

    def right(self) -> np.ndarray:
        # forward x up, flattened to the XZ plane
        return np.array([-np.cos(self.yaw), 0.0, np.sin(self.yaw)], dtype=np.float32)

    def look(self, dx: float, dy: float) -> None:
        """Apply relative mouse motion in pixels."""
        self.yaw -= float(dx) * self.sensitivity
        self.pitch = clamp(self.pitch - float(dy) * self.sensitivity, -_PITCH_LIMIT, _PITCH_LIMIT)

    def update(self, dt: float, *, forward: float, strafe: float, lift: float) -> None:
        """Move the camera.

        Args:
            forward: -1..1 (back..forward, along the view direction)
            strafe: -1..1 (left..right)
            lift: -1..1 (down..up, world Y)
        """
        move = (
            self.forward() * clamp(float(forward), -1.0, 1.0)
            + self.right() * clamp(float(strafe), -1.0, 1.0)
            + np.array([0.0, 1.0, 0.0], dtype=np.float32) * clamp(float(lift), -1.0, 1.0)
        )
        n = float(np.linalg.norm(move))
        if n > 1.0:
            move = move / n
        self.position = (self.position + move * np.float32(self.speed * float(dt))).astype(np.float32)

    def eye(self) -> np.ndarray:
        return self.position.copy()

    def view_matrix(self) -> np.ndarray:
        eye = self.eye()
        up = np.array([0.0, 1.0, 0.0], dtype=np.float32)
        return look_at(eye, eye + self.forward(), up)
