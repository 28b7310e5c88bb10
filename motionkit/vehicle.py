"""Vehicle geometry and a kinematic bicycle model."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace


class Gear(enum.Enum):
    """Direction of travel."""

    DRIVE = enum.auto()
    REVERSE = enum.auto()


@dataclass
class VehicleConfig:
    """Vehicle dimensions in metres and limits in radians and m/s.

    ``rf``/``rb`` are distances from the rear axle to the front/back end,
    ``w`` is the width, ``wd`` the distance between left and right wheels
    (0.7 of the width unless given), ``wb`` the wheel base, ``tr``/``tw`` the
    tyre radius and width, and ``rtr``/``rtf``/``rtb`` the trailer wheel,
    front end and back end distances from the rear axle.
    """

    rf: float = 3.3
    rb: float = 0.8
    w: float = 2.4
    wb: float = 2.5
    tr: float = 0.44
    tw: float = 0.7
    max_steer: float = 0.6
    max_speed: float = 55.0 / 3.6
    min_speed: float = -20.0 / 3.6
    rtr: float = 8.0
    rtf: float = 1.0
    rtb: float = 9.0
    wd: float | None = None

    def __post_init__(self) -> None:
        if self.wd is None:
            self.wd = 0.7 * self.w

    @classmethod
    def scaled(cls, scale: float = 1.0) -> VehicleConfig:
        """Default vehicle with its body and wheel dimensions multiplied by ``scale``."""
        base = cls()
        return replace(
            base,
            rf=base.rf * scale,
            rb=base.rb * scale,
            w=base.w * scale,
            wd=base.wd * scale,
            wb=base.wb * scale,
            tr=base.tr * scale,
            tw=base.tw * scale,
        )


@dataclass
class VehicleState:
    """Pose and speed of a vehicle following the kinematic bicycle model."""

    config: VehicleConfig = field(default_factory=VehicleConfig)
    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0
    v: float = 0.0
    gear: Gear = Gear.DRIVE

    def update(self, acc: float, delta: float, dt: float = 0.1) -> None:
        """Advance the state by ``dt`` with acceleration ``acc`` and steering ``delta``."""
        cfg = self.config
        delta = max(-cfg.max_steer, min(delta, cfg.max_steer))

        self.x += self.v * math.cos(self.yaw) * dt
        self.y += self.v * math.sin(self.yaw) * dt
        self.yaw += self.v / cfg.wb * math.tan(delta) * dt
        self.v += acc * dt

        if self.v > cfg.max_speed:
            self.v = cfg.max_speed
        elif self.v < cfg.min_speed:
            self.v = cfg.min_speed

    def calc_distance(self, point_x: float, point_y: float) -> float:
        """Euclidean distance from the vehicle to a point."""
        return math.hypot(self.x - point_x, self.y - point_y)