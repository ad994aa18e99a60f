import pytest
from world.coords import CellCoord, to_cell_index, cell_bounds, offset_position, player_cell

TILE = 1e-4

def test_to_cell_index_floor():
    assert to_cell_index(0.0, TILE) == 0
    assert to_cell_index(0.00005, TILE) == 0
    assert to_cell_index(-0.00005, TILE) == -1
    assert to_cell_index(-0.0001, TILE) == -1

def test_to_cell_index_exact_on_boundaries():
    # 0.0003 / 0.0001 is 2.9999999999999996 in binary floating point
    assert to_cell_index(0.0003, TILE) == 3
    assert to_cell_index(0.0007, TILE) == 7

def test_to_cell_index_classroom():
    assert to_cell_index(36.997936938057016, TILE) == 369979
    assert to_cell_index(-122.05703507501151, TILE) == -1220571

def test_to_cell_index_idempotent():
    results = {to_cell_index(12.3456789, TILE) for _ in range(100)}
    assert results == {123456}

def test_cell_bounds():
    (south, west), (north, east) = cell_bounds(3, -2, TILE)
    assert south == 0.0003
    assert west == -0.0002
    assert north == 0.0004
    assert east == -0.0001

def test_offset_position_does_not_drift():
    lat = 0.0
    for _ in range(1000):
        lat = offset_position(lat, 1, TILE)
    assert lat == 0.1
    assert to_cell_index(lat, TILE) == 1000
    for _ in range(1000):
        lat = offset_position(lat, -1, TILE)
    assert lat == 0.0

def test_cell_coord_key_round_trip():
    c = CellCoord(-3, 14)
    assert c.key == "-3,14"
    assert CellCoord.from_key(c.key) == c
    with pytest.raises(ValueError):
        CellCoord.from_key("1,2,3")
    with pytest.raises(ValueError):
        CellCoord.from_key("a,b")

def test_player_cell():
    assert player_cell(0.00015, -0.00015, TILE) == CellCoord(1, -2)

@pytest.mark.parametrize("key", ["1_0", " 3,4", "3,4 ", "+1,2", "01,2", "-0,1", "1,", ",1", ""])
def test_cell_key_parsing_is_strict(key):
    with pytest.raises(ValueError):
        CellCoord.from_key(key)

def test_cell_key_accepts_canonical_forms():
    assert CellCoord.from_key("0,0") == CellCoord(0, 0)
    assert CellCoord.from_key("-1220571,369979") == CellCoord(-1220571, 369979)

def test_player_cell_contains_player_at_negative_coordinates():
    lat, lng = 36.997936938057016, -122.05703507501151
    cell = player_cell(lat, lng, TILE)
    assert cell == CellCoord(369979, -1220571)
    (south, west), (north, east) = cell_bounds(cell.x, cell.y, TILE)
    assert south <= lat < north
    assert west <= lng < east
