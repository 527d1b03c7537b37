import pytest

from framepipe.polygon import Polygon

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


def test_unit_square_area():
    assert Polygon([(0, 0), (1, 0), (1, 1), (0, 1)]).area() == pytest.approx(1.0)


def test_orientation_does_not_change_area():
    forward = Polygon(SQUARE)
    backward = Polygon(list(reversed(SQUARE)))
    assert backward.area() == pytest.approx(forward.area())
    assert forward.area() > 0


def test_explicit_closing_vertex_same_area():
    closed = Polygon(SQUARE + [SQUARE[0]])
    assert closed.area() == pytest.approx(Polygon(SQUARE).area())


def test_too_few_vertices():
    line = Polygon([(0, 0), (1, 1)], "line")
    assert line.area() == 0.0
    assert line.intersection_area(Polygon(SQUARE)) == 0.0
    assert Polygon(SQUARE).intersection_area(line) == 0.0
    assert not line.is_valid()


def test_empty_polygon():
    empty = Polygon()
    assert empty.area() == 0.0
    assert empty.vertices == []


def test_self_intersection_equals_area():
    square = Polygon(SQUARE)
    assert square.intersection_area(square) == pytest.approx(square.area())


def test_half_overlap():
    a = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
    b = Polygon([(0.5, 0), (1.5, 0), (1.5, 1), (0.5, 1)])
    assert a.intersection_area(b) == pytest.approx(0.5)
    assert b.intersection_area(a) == pytest.approx(a.intersection_area(b))


def test_disjoint_intersection_is_zero():
    a = Polygon(SQUARE)
    b = Polygon([(x + 100, y) for x, y in SQUARE])
    assert a.intersection_area(b) == 0.0


def test_contained_intersection_equals_inner_area():
    outer = Polygon(SQUARE)
    inner = Polygon([(2, 2), (4, 2), (4, 4), (2, 4)])
    assert outer.intersection_area(inner) == pytest.approx(inner.area())


def test_validity():
    assert Polygon(SQUARE).is_valid()
    bowtie = Polygon([(0, 0), (10, 10), (10, 0), (0, 10)], "bowtie")
    assert not bowtie.is_valid()


def test_vertices_and_id_kept():
    poly = Polygon(SQUARE, "fence_0")
    assert poly.vertices == SQUARE
    assert poly.id == "fence_0"