"""Derived frame state — body placements and the rider's position for one instant."""

import math

from composeverse.models import BodyPlacement, CelestialBody, Viewport
from composeverse.scene import PLANETS


def place_body(
    body: CelestialBody, rotation_degrees: float, viewport: Viewport
) -> BodyPlacement:
    """Polar → screen position on the body's orbit.

    Every body reads the same master rotation scaled by its own velocity, so
    all orbits stay phase-locked to the clock.
    """
    scale = viewport.scale_factor
    cx, cy = viewport.center
    angle = math.radians(rotation_degrees * body.orbital_velocity)
    orbital_radius = body.orbital_radius * scale
    return BodyPlacement(
        body=body,
        position=(
            cx + math.cos(angle) * orbital_radius,
            cy + math.sin(angle) * orbital_radius,
        ),
        radius=body.radius * scale,
        orbital_radius=orbital_radius,
    )


def place_bodies(
    rotation_degrees: float,
    viewport: Viewport,
    bodies: tuple[CelestialBody, ...] = PLANETS,
) -> tuple[BodyPlacement, ...]:
    """Placements for every body, in scene order."""
    return tuple(place_body(b, rotation_degrees, viewport) for b in bodies)


def peak_distance(
    host: CelestialBody, target: CelestialBody, viewport: Viewport
) -> float:
    """Scaled gap between the host orbit and the target orbit."""
    return (target.orbital_radius - host.orbital_radius) * viewport.scale_factor
