"""Free-flying camera driven by keyboard, mouse button and cursor events."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from glowbox.transforms import (
    quat_from_euler,
    quat_multiply,
    quat_normalize,
    quat_to_matrix,
    translate,
)

__all__ = [
    "KEY_A",
    "KEY_D",
    "KEY_E",
    "KEY_Q",
    "KEY_S",
    "KEY_W",
    "MOUSE_BUTTON_LEFT",
    "PRESS",
    "RELEASE",
    "REPEAT",
    "Camera",
]

RELEASE = 0
PRESS = 1
REPEAT = 2

MOUSE_BUTTON_LEFT = 0

KEY_A = 65
KEY_D = 68
KEY_E = 69
KEY_Q = 81
KEY_S = 83
KEY_W = 87

_KEY_LIMIT = 512


class Camera:
    """Camera whose view matrix follows WASD/QE movement and left-drag rotation."""

    def __init__(
        self,
        position: Sequence[float] = (0.0, 0.0, 2.0),
        movement_speed: float = 5.0,
        mouse_sensitivity: float = 0.005,
    ) -> None:
        self._position = np.asarray(position, dtype=np.float64).copy()
        self._movement_speed = float(movement_speed)
        self._mouse_sensitivity = float(mouse_sensitivity)

        self._orientation = np.array([1.0, 0.0, 0.0, 0.0])
        self._pitch = 0.0
        self._yaw = 0.0

        self._reset_mouse = True
        self._mouse_pressed = False
        self._keys_in_use: set[int] = set()
        self._last_x = 0.0
        self._last_y = 0.0

        self._view = np.identity(4)
        self._update_view_matrix()

    def view_matrix(self) -> np.ndarray:
        """Current world-to-camera matrix."""
        return self._view.copy()

    def handle_keyboard_inputs(self, key: int, action: int) -> None:
        """Track which keys are held down."""
        if not 0 <= key < _KEY_LIMIT:
            return
        if action == PRESS:
            self._keys_in_use.add(key)
        elif action == RELEASE:
            self._keys_in_use.discard(key)

    def handle_mouse_button_inputs(self, button: int, action: int) -> None:
        """Rotation is enabled only while the left button is pressed."""
        if button == MOUSE_BUTTON_LEFT and action == PRESS:
            self._mouse_pressed = True
        else:
            self._mouse_pressed = False
            self._reset_mouse = True

    def handle_cursor_pos_input(self, xpos: float, ypos: float) -> None:
        """Turn cursor motion into the pitch and yaw for the next update."""
        if not self._mouse_pressed:
            return
        if self._reset_mouse:
            self._last_x = xpos
            self._last_y = ypos
            self._reset_mouse = False

        self._yaw = (xpos - self._last_x) * self._mouse_sensitivity
        self._pitch = (ypos - self._last_y) * self._mouse_sensitivity
        self._last_x = xpos
        self._last_y = ypos

    def update_camera(self, delta_time: float) -> None:
        """Move along the held directions for ``delta_time`` seconds and rebuild the view."""
        dir_x = self._view[0, :3]
        dir_y = self._view[1, :3]
        dir_z = self._view[2, :3]

        movement = np.zeros(3)
        for key, direction, sign in (
            (KEY_W, dir_z, -1.0),
            (KEY_S, dir_z, 1.0),
            (KEY_A, dir_x, -1.0),
            (KEY_D, dir_x, 1.0),
            (KEY_E, dir_y, 1.0),
            (KEY_Q, dir_y, -1.0),
        ):
            if key in self._keys_in_use:
                movement += sign * direction

        self._position = self._position + movement * (self._movement_speed * delta_time)
        self._update_view_matrix()

    def _update_view_matrix(self) -> None:
        q_pitch = quat_from_euler((self._pitch, 0.0, 0.0))
        q_yaw = quat_from_euler((0.0, self._yaw, 0.0))
        self._pitch = 0.0
        self._yaw = 0.0

        self._orientation = quat_normalize(
            quat_multiply(quat_multiply(q_pitch, q_yaw), self._orientation)
        )
        self._view = quat_to_matrix(self._orientation) @ translate(-self._position)