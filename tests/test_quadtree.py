import random

import pytest

from alephcode.quadtree import MAX_DEPTH, QuadTree, inverse_square_push


def direct_repulsion(xs, ys, i, strength, epsilon):
    fx = fy = 0.0
    for j in range(len(xs)):
        if j == i:
            continue
        gx, gy = inverse_square_push(xs[i] - xs[j], ys[i] - ys[j], strength, epsilon)
        fx += gx
        fy += gy
    return fx, fy


def test_root_mass_counts_every_point():
    rng = random.Random(3)
    xs = [rng.uniform(0, 800) for _ in range(300)]
    ys = [rng.uniform(0, 600) for _ in range(300)]
    tree = QuadTree.build(xs, ys)

    assert tree.root_mass == 300
    assert tree.cx[0] == pytest.approx(sum(xs) / 300)
    assert tree.cy[0] == pytest.approx(sum(ys) / 300)


def test_empty_tree():
    tree = QuadTree.build([], [])
    assert tree.root_mass == 0
    assert len(tree) == 1


def test_coincident_points_share_a_bucket():
    tree = QuadTree.build([5.0, 5.0, 5.0], [5.0, 5.0, 5.0])
    assert tree.root_mass == 3
    assert tree.bucket[0] == [0, 1, 2]


def test_coincident_points_beside_a_distinct_point():
    tree = QuadTree.build([0.0, 1.0, 1.0], [0.0, 1.0, 1.0])
    buckets = [b for b in tree.bucket if b is not None]
    assert buckets == [[1, 2]]
    assert max(tree.depth) <= MAX_DEPTH


def test_children_are_contiguous_quadrants():
    tree = QuadTree.build([0.0, 10.0, 0.0, 10.0], [0.0, 0.0, 10.0, 10.0])
    first = tree.child[0]
    half = tree.size[0] / 2
    assert tree.x[first + 1] == pytest.approx(tree.x[first] + half)
    assert tree.y[first + 2] == pytest.approx(tree.y[first] + half)
    assert [tree.point[first + q] for q in range(4)] == [0, 1, 2, 3]


def test_repulsion_matches_direct_sum_when_never_approximating():
    rng = random.Random(11)
    xs = [rng.uniform(0, 100) for _ in range(60)]
    ys = [rng.uniform(0, 100) for _ in range(60)]
    tree = QuadTree.build(xs, ys)

    for i in (0, 17, 59):
        fx, fy = tree.repulsion(i, 100.0, theta=0.0, epsilon=0.01)
        ex, ey = direct_repulsion(xs, ys, i, 100.0, 0.01)
        assert fx == pytest.approx(ex)
        assert fy == pytest.approx(ey)


def test_repulsion_approximation_stays_close():
    rng = random.Random(5)
    xs = [rng.uniform(0, 1000) for _ in range(400)]
    ys = [rng.uniform(0, 1000) for _ in range(400)]
    # Outside the cloud, so the net force is large and one-sided.
    xs[0], ys[0] = -300.0, -300.0
    tree = QuadTree.build(xs, ys)

    fx, fy = tree.repulsion(0, 1000.0, theta=0.5, epsilon=0.01)
    ex, ey = direct_repulsion(xs, ys, 0, 1000.0, 0.01)
    assert fx == pytest.approx(ex, rel=0.1, abs=1e-3)
    assert fy == pytest.approx(ey, rel=0.1, abs=1e-3)


def test_coincident_points_are_pushed_apart():
    tree = QuadTree.build([5.0, 5.0], [5.0, 5.0])
    f0 = tree.repulsion(0, 10.0, 0.9, 0.01)
    f1 = tree.repulsion(1, 10.0, 0.9, 0.01)
    assert f0[0] < 0 < f1[0]
