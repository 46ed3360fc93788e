"""The fixed orrery: eight bodies, sizes and speeds chosen for looks, not accuracy."""

from composeverse.models import CelestialBody, Color

PLANETS: tuple[CelestialBody, ...] = (
    CelestialBody("Mercury", Color.from_argb(0xFFBDBDBD), 8, 100, 8.0),
    CelestialBody("Venus", Color.from_argb(0xFFE6BE8A), 14, 150, 6.0),
    CelestialBody("Earth", Color.from_argb(0xFF2196F3), 15, 210, 4.5, is_rider_host=True),
    CelestialBody("Mars", Color.from_argb(0xFFD32F2F), 12, 270, 3.5),
    CelestialBody("Jupiter", Color.from_argb(0xFFFFA000), 36, 380, 2.0),
    CelestialBody("Saturn", Color.from_argb(0xFFFDD835), 30, 490, 1.5, has_rings=True),
    CelestialBody("Uranus", Color.from_argb(0xFF00ACC1), 22, 580, 1.1),
    CelestialBody("Neptune", Color.from_argb(0xFF1976D2), 20, 660, 0.8),
)

SUN_RADIUS = 40.0
SUN_GLOW_RADIUS = 90.0
SUN_LABEL_OFFSET = 70.0


def rider_host(bodies: tuple[CelestialBody, ...] = PLANETS) -> CelestialBody:
    """The body the rider launches from (Earth)."""
    return next(b for b in bodies if b.is_rider_host)


def rider_target(bodies: tuple[CelestialBody, ...] = PLANETS) -> CelestialBody:
    """The body the rider flies toward: the outermost orbit (Neptune)."""
    return max(bodies, key=lambda b: b.orbital_radius)
