import math

import pytest

from deflation_tools import G, T, Tile, TileType, Operations


@pytest.fixture
def op():
    return Operations()


@pytest.fixture
def sun(op):
    return op.seed_prototiles(960, 540)


def test_seed_sun_ring(sun):
    assert len(sun) == 6
    for k, tile in enumerate(sun):
        assert tile.kind is TileType.KITE
        assert (tile.x, tile.y) == (480.0, 270.0)
        assert tile.size == 384.0
        assert tile.angle == pytest.approx(math.pi / 2 + T + k * 2 * T)
    assert all(tile.angle < 3 * math.pi for tile in sun)


def test_seed_last_kite_overlaps_first_but_is_distinct(sun):
    assert sun[-1].angle == pytest.approx(sun[0].angle + 2 * math.pi)
    assert sun[-1] != sun[0]


@pytest.mark.parametrize("width,height", [(0, 540), (960, -1), (float('inf'), 540), (960, float('nan'))])
def test_seed_rejects_bad_dimensions(op, width, height):
    with pytest.raises(ValueError):
        op.seed_prototiles(width, height)


def test_dart_substitution(op):
    dart = Tile(TileType.DART, 100.0, 50.0, 0.3, 10.0)
    children = op.substitute(dart)
    assert [c.kind for c in children] == [TileType.KITE, TileType.DART, TileType.DART]
    kite = children[0]
    assert (kite.x, kite.y, kite.angle) == (100.0, 50.0, 0.3 + 5 * T)
    for child, sign in zip(children[1:], (1, -1)):
        angle = 0.3 - 4 * T * sign
        assert child.angle == angle
        assert child.x == 100.0 + math.cos(angle) * G * 10.0
        assert child.y == 50.0 - math.sin(angle) * G * 10.0
    assert all(c.size == 10.0 / G for c in children)


def test_kite_substitution(op):
    kite = Tile(TileType.KITE, 100.0, 50.0, 0.3, 10.0)
    children = op.substitute(kite)
    assert [c.kind for c in children] == [TileType.DART, TileType.KITE, TileType.DART, TileType.KITE]
    for i, sign in enumerate((1, -1)):
        dart, child_kite = children[2 * i], children[2 * i + 1]
        assert (dart.x, dart.y, dart.angle) == (100.0, 50.0, 0.3 - 4 * T * sign)
        assert child_kite.angle == 0.3 + 3 * T * sign
        assert child_kite.x == 100.0 + math.cos(0.3 - T * sign) * G * 10.0
        assert child_kite.y == 50.0 - math.sin(0.3 - T * sign) * G * 10.0


def test_single_tile_child_counts(op):
    assert len(op.deflate([Tile(TileType.DART, 0.0, 0.0, 0.0, 1.0)], 1)) == 3
    assert len(op.deflate([Tile(TileType.KITE, 0.0, 0.0, 0.0, 1.0)], 1)) == 4


@pytest.mark.parametrize("generations", [0, -1, -7])
def test_no_generations_is_identity(op, sun, generations):
    assert op.deflate(sun, generations) == sun


def test_deflate_does_not_mutate_input(op, sun):
    before = [(t.kind, t.x, t.y, t.angle, t.size) for t in sun]
    op.deflate(sun, 2)
    assert [(t.kind, t.x, t.y, t.angle, t.size) for t in sun] == before


def test_deduplication_spans_parents(op):
    parent = Tile(TileType.KITE, 5.0, 5.0, 1.0, 2.0)
    twin = Tile(TileType.KITE, 5.0, 5.0, 1.0, 2.0)
    assert op.deflate([parent, twin], 1) == op.deflate([parent], 1)


def test_remove_duplicates_keeps_first_seen(op):
    a = Tile(TileType.KITE, 0.0, 0.0, 0.0, 1.0)
    b = Tile(TileType.DART, 0.0, 0.0, 0.0, 1.0)
    a_again = Tile(TileType.KITE, 0.0, 0.0, 0.0, 9.0)
    c = Tile(TileType.KITE, 1.0, 0.0, 0.0, 1.0)
    result = op.remove_duplicates([a, b, a_again, c, b])
    assert result == [a, b, c]
    assert result[0] is a


def test_sun_first_generation_has_no_duplicates(op, sun):
    tiles = op.deflate(sun, 1)
    assert len(tiles) <= 4 * len(sun)
    assert len({tile.key for tile in tiles}) == len(tiles)


def test_deep_generation_has_no_duplicates(op, sun):
    tiles = op.deflate(sun, 4)
    assert len(set(tiles)) == len(tiles)


def test_deflation_is_deterministic(op, sun):
    first = op.deflate(sun, 3)
    second = Operations().deflate(op.seed_prototiles(960, 540), 3)
    assert [t.key for t in first] == [t.key for t in second]


def test_deflation_composes(op, sun):
    assert op.deflate(sun, 3) == op.deflate(op.deflate(sun, 1), 2)


def test_sizes_shrink_by_golden_ratio(op, sun):
    for n in range(4):
        tiles = op.deflate(sun, n)
        assert all(tile.size == pytest.approx(384.0 / G ** n) for tile in tiles)


def test_deflate_generations_yields_each_step(op, sun):
    steps = list(op.deflate_generations(sun, 3))
    assert len(steps) == 3
    assert steps[-1] == op.deflate(sun, 3)
    assert [len(s) for s in steps] == sorted(len(s) for s in steps)


def test_fractional_generation_count_is_rejected(op, sun):
    with pytest.raises(TypeError):
        op.deflate(sun, 1.5)


def test_tiling_cache(op):
    first = op.tiling(200, 100, 2)
    second = op.tiling(200, 100, 2)
    assert first == second
    assert first is not second
    assert list(op.tiles_cache) == [(200, 100, 2)]


def test_tiling_cache_evicts_oldest():
    op = Operations(cache_size=2)
    op.tiling(200, 100, 0)
    op.tiling(200, 100, 1)
    op.tiling(200, 100, 0)
    op.tiling(200, 100, 2)
    assert list(op.tiles_cache) == [(200, 100, 0), (200, 100, 2)]


def test_tile_polygons_array(op, sun):
    polygons = op.tile_polygons(sun)
    assert polygons.shape == (len(sun), 4, 2)
    assert tuple(polygons[0, 0]) == (480.0, 270.0)
    assert op.tile_polygons([]).shape == (0, 4, 2)


@pytest.mark.parametrize("elapsed,expected", [(0, 0), (9.9, 0), (10, 1), (35, 3), (1000, 7)])
def test_generation_at_steps_over_time(op, elapsed, expected):
    assert op.generation_at(elapsed, 7, 10) == expected


def test_generation_at_without_interval(op):
    assert op.generation_at(0, 7, 0) == 7
    assert op.generation_at(0, -2, 0) == 0
