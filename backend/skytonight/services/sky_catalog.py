"""Allow-list of sky objects worth reporting from celestial navigation data."""

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from skytonight.models import SkyObjectType

PLANET_NAMES = frozenset({"mercury", "venus", "mars", "jupiter", "saturn", "uranus", "neptune"})

# Bright navigational stars that are easy naked-eye targets
BRIGHT_STAR_NAMES = frozenset({
    "sirius",
    "canopus",
    "arcturus",
    "rigil kentaurus",
    "vega",
    "capella",
    "rigel",
    "procyon",
    "betelgeuse",
    "achernar",
    "altair",
    "aldebaran",
    "antares",
    "spica",
    "pollux",
    "fomalhaut",
    "deneb",
    "regulus",
    "polaris",
})

CONSTELLATION_NAMES = frozenset({
    "orion",
    "ursa major",
    "big dipper",
    "ursa minor",
    "little dipper",
    "cassiopeia",
    "cygnus",
    "northern cross",
    "lyra",
    "scorpius",
    "sagittarius",
    "teapot",
    "leo",
    "gemini",
    "taurus",
    "pleiades",
    "andromeda",
    "pegasus",
    "great square of pegasus",
    "perseus",
    "summer triangle",
    "winter triangle",
})

# Handled from rise/set data instead
EXCLUDED_NAMES = frozenset({"sun", "moon"})


def _normalize(name: str) -> str:
    return " ".join(name.lower().split())


@dataclass(frozen=True)
class SkyCatalog:
    """Known-object allow-list used to filter and classify catalog entries.

    Matching is case-insensitive and ignores repeated whitespace.
    """

    planets: FrozenSet[str] = PLANET_NAMES
    stars: FrozenSet[str] = BRIGHT_STAR_NAMES
    constellations: FrozenSet[str] = CONSTELLATION_NAMES
    excluded: FrozenSet[str] = EXCLUDED_NAMES

    @classmethod
    def from_names(cls, planets: Iterable[str] = (), others: Iterable[str] = ()) -> "SkyCatalog":
        """Build a catalog from explicit planet names and other allowed names."""
        return cls(
            planets=frozenset(_normalize(n) for n in planets),
            stars=frozenset(_normalize(n) for n in others),
            constellations=frozenset(),
        )

    def is_known(self, name: str) -> bool:
        key = _normalize(name)
        if key in self.excluded:
            return False
        return key in self.planets or key in self.stars or key in self.constellations

    def is_planet(self, name: str) -> bool:
        return _normalize(name) in self.planets

    def classify(self, name: str, has_star_index: bool) -> SkyObjectType:
        """Object type from its name and whether the source gave a star-catalog index."""
        if self.is_planet(name):
            return SkyObjectType.PLANET
        if has_star_index:
            return SkyObjectType.STAR
        return SkyObjectType.OTHER


DEFAULT_CATALOG = SkyCatalog()
