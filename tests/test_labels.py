"""Tests for vertex/side labels and pairs."""

import pytest

from quadrilateral_shape.labels import (
    OPPOSITE_SIDE_PAIRS,
    OPPOSITE_VERTEX_PAIRS,
    NamedQuadrilateral,
    SideLabel,
    SidePair,
    VertexLabel,
    VertexPair,
)

A, B, C, D = VertexLabel.A, VertexLabel.B, VertexLabel.C, VertexLabel.D
AB, BC, CD, DA = SideLabel.AB, SideLabel.BC, SideLabel.CD, SideLabel.DA


def test_vertex_cycle():
    assert A.next == B
    assert D.next == A
    assert A.previous == D
    assert A.opposite == C
    assert B.opposite == D


def test_vertex_sides():
    assert A.sides == (DA, AB)
    assert C.sides == (BC, CD)


def test_side_vertices_and_neighbours():
    assert CD.vertices == (C, D)
    assert DA.vertices == (D, A)
    assert AB.opposite == CD
    assert AB.adjacent == (DA, BC)


def test_side_between_is_order_independent():
    assert SideLabel.between(A, B) == AB
    assert SideLabel.between(B, A) == AB
    assert SideLabel.between(A, D) == DA


def test_side_between_rejects_opposite_vertices():
    with pytest.raises(ValueError):
        SideLabel.between(A, C)


def test_parse_vertex_label():
    assert VertexLabel.parse("c") == C
    assert VertexLabel.parse(" B ") == B
    assert VertexLabel.parse(D) is D
    with pytest.raises(ValueError):
        VertexLabel.parse("E")


def test_labels_serialize_as_plain_strings():
    assert A.value == "A"
    assert NamedQuadrilateral.ISOSCELES_TRAPEZOID.value == "isosceles_trapezoid"
    assert A == "A"


def test_pairs_are_unordered():
    assert VertexPair(A, C) == VertexPair(C, A)
    assert hash(VertexPair(A, C)) == hash(VertexPair(C, A))
    assert SidePair(AB, CD) == SidePair(CD, AB)
    assert len({SidePair(AB, CD), SidePair(CD, AB)}) == 1


def test_pair_relationships():
    assert VertexPair(A, B).is_adjacent
    assert VertexPair(A, C).is_opposite
    assert SidePair(AB, BC).is_adjacent
    assert all(pair.is_opposite for pair in OPPOSITE_SIDE_PAIRS)
    assert all(pair.is_opposite for pair in OPPOSITE_VERTEX_PAIRS)


def test_pair_requires_distinct_members():
    with pytest.raises(ValueError):
        VertexPair(A, A)
    with pytest.raises(ValueError):
        SidePair(AB, AB)
