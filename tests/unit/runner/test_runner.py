"""Unit tests for the allocation runner."""

import pytest
from shapely.geometry import Point, Polygon, box

from allocation.common.log_utils import ctx_run_id
from allocation.config import AllocationConfig
from allocation.errors import DissolveError, StoreAccessError
from allocation.models.enums import FailurePolicy
from allocation.runner import run_allocation
from tests.utils import parcels_gdf


@pytest.fixture
def config() -> AllocationConfig:
    return AllocationConfig(
        priority_order={"residential": 2, "open_space": 1},
        source_set_id="parcels",
        _env_file=None,
    )


@pytest.fixture
def sample_parcels():
    return parcels_gdf(
        [
            ("h1", "residential", box(0, 0, 2, 2)),
            ("p1", "open_space", box(1, 0, 3, 2)),
            ("p2", "open_space", box(3, 0, 4, 2)),
            ("f1", "farmland", box(10, 10, 11, 11)),
        ]
    )


def test_run_allocation_resolves_then_dissolves(sample_parcels, config):
    result = run_allocation(sample_parcels, config)

    assert result.complete
    assert result.run_id

    frames = result.to_frames()
    resolved = frames["resolved"].set_index("id")
    assert resolved.loc["h1"].geometry.equals(box(0, 0, 2, 2))
    assert resolved.loc["p1"].geometry.equals(box(2, 0, 3, 2))

    dissolved = frames["dissolved"].set_index("id")
    assert sorted(dissolved.index) == [
        "parcels.farmland.0",
        "parcels.open_space.0",
        "parcels.residential.0",
    ]
    # p1 (trimmed) and p2 touch, so open space dissolves to one region
    assert dissolved.loc["parcels.open_space.0"].geometry.equals(box(2, 0, 4, 2))


def test_run_allocation_respects_configured_categories(sample_parcels):
    config = AllocationConfig(
        priority_order={"residential": 2, "open_space": 1},
        dissolve_categories={"open_space"},
        _env_file=None,
    )

    result = run_allocation(sample_parcels, config)

    assert [feature.id for feature in result.dissolve.features] == ["id.open_space.0"]


def test_run_allocation_rejects_invalid_input(config):
    parcels = parcels_gdf([("a", "residential", Point(0, 0))])

    with pytest.raises(ValueError, match="Invalid geometry types"):
        run_allocation(parcels, config)


def test_run_allocation_repairs_geometries_when_configured():
    bowtie = Polygon([(0, 0), (2, 2), (2, 0), (0, 2)])
    parcels = parcels_gdf([("a", "residential", bowtie)])
    config = AllocationConfig(repair_geometries=True, _env_file=None)

    result = run_allocation(parcels, config)

    assert result.resolution.features.ids == ["a"]
    assert sum(f.geometry.area for f in result.dissolve.features) == pytest.approx(2.0)


def test_run_allocation_binds_run_id_for_logging(sample_parcels, config, monkeypatch):
    seen = []
    from allocation import runner

    original = runner.prioritise_overlap

    def _spy(*args, **kwargs):
        seen.append(ctx_run_id.get())
        return original(*args, **kwargs)

    monkeypatch.setattr(runner, "prioritise_overlap", _spy)

    result = run_allocation(sample_parcels, config)

    assert seen == [result.run_id]
    assert ctx_run_id.get() == ""


def test_run_allocation_surfaces_dissolve_failure(sample_parcels, config, monkeypatch):
    from allocation import runner

    def _fail(*_args, **_kwargs):
        raise DissolveError("open_space")

    monkeypatch.setattr(runner, "dissolve_by_category", _fail)

    with pytest.raises(DissolveError):
        run_allocation(sample_parcels, config)


def test_run_allocation_incomplete_when_categories_skipped(sample_parcels, monkeypatch):
    from allocation import runner
    from allocation.models.results import DissolveResult

    def _partial(*_args, **kwargs):
        assert kwargs["failure_policy"] == FailurePolicy.SKIP
        error = DissolveError("farmland")
        error.__cause__ = StoreAccessError("down")
        return DissolveResult(features=[], failures={"farmland": error})

    monkeypatch.setattr(runner, "dissolve_by_category", _partial)
    config = AllocationConfig(
        dissolve_failure_policy=FailurePolicy.SKIP, _env_file=None
    )

    result = run_allocation(sample_parcels, config)

    assert not result.complete
    assert len(result.to_frames()["dissolved"]) == 0
