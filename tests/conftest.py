import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import damsection
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

import matplotlib
matplotlib.use("Agg")

from damsection.geometry.primitives import Point2D
from damsection.profile.models import (
    BoundaryCondition, BoundaryConditions, FeaturePoints, MaterialProperties,
    MaterialZone, Profile, WaterLevels,
)

# Trapezoidal section with hand-derived loads and safety factors
SCENARIO_A_CONTOUR = [(0, 0), (0, 50), (10, 50), (15, 40), (20, 20), (25, 0)]

# Closed, well-proportioned section that passes every check
WELL_FORMED_CONTOUR = [(0, 0), (44, 0), (20, 40), (15, 40), (6, 3), (0, 0)]


# Common test fixtures
@pytest.fixture
def rectangle_contour():
    """10 m wide, 5 m high rectangle with a corner at the origin."""
    return [Point2D(0, 0), Point2D(10, 0), Point2D(10, 5), Point2D(0, 5)]


@pytest.fixture
def scenario_a_contour():
    return [Point2D(x, y) for x, y in SCENARIO_A_CONTOUR]


@pytest.fixture
def scenario_a_profile():
    zone = MaterialZone("body", SCENARIO_A_CONTOUR, MaterialProperties(density=24.0))
    return Profile.from_points(SCENARIO_A_CONTOUR, name="scenario A", material_zones=(zone,))


def make_well_formed_profile(**overrides):
    """Profile that validates as ready for calculation; keywords replace parts of it."""
    kwargs = dict(
        name="well formed",
        foundation_contour=[(0, 0), (44, 0)],
        material_zones=(MaterialZone("body", WELL_FORMED_CONTOUR, MaterialProperties()),),
        features=FeaturePoints(drainage_system=Point2D(8, 2), gravity_load=Point2D(17, 13)),
        boundary_conditions=BoundaryConditions(foundation=BoundaryCondition()),
        water_levels=WaterLevels(upstream=35.0, downstream=5.0),
    )
    contour = overrides.pop("main_contour", WELL_FORMED_CONTOUR)
    kwargs.update(overrides)
    return Profile.from_points(contour, **kwargs)


@pytest.fixture
def well_formed_profile():
    return make_well_formed_profile()


@pytest.fixture
def make_profile():
    """Factory for variants of the well-formed section."""
    return make_well_formed_profile


@pytest.fixture
def well_formed_dict():
    """Dict form of the well-formed section as read from a JSON artifact."""
    return {
        "name": "well formed",
        "main_contour": [list(p) for p in WELL_FORMED_CONTOUR],
        "foundation_contour": [[0, 0], [44, 0]],
        "material_zones": [
            {"name": "body", "boundary": [list(p) for p in WELL_FORMED_CONTOUR],
             "properties": {"grade": "C30"}},
        ],
        "water_levels": {"upstream": 35.0, "downstream": 5.0},
        "features": {"drainage_system": [8, 2], "gravity_load": [17, 13]},
        "boundary_conditions": {"foundation": {"constraint": "fixed"}},
    }
