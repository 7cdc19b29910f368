import pytest

from paraform import geom
from paraform.xform import Matrix, Rotation, Scale, Translation, compose
## unit tests for paraform xform.py


def _apply(m, p):
    return m.mul(geom.point(*p))[:3]


class TestXform:
    """unit tests for the matrix operations the part placements use"""

    def test_matrix(self):
        foo = Matrix([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16])
        bar = Matrix([[1, 0, 0, 1], [0, 1, 0, 1], [0, 0, 1, 1], [0, 0, 0, 1]])
        baz = geom.vect(1, 2, 3)
        I = Matrix()
        assert I.mul(bar) == bar
        assert I.mul(foo) == foo
        assert I.isidentity()
        assert foo.mul(bar).m == [[1, 2, 3, 10], [5, 6, 7, 26], [9, 10, 11, 42], [13, 14, 15, 58]]
        assert foo.mul(baz) == [18, 46, 74, 102]
        assert foo.mul(10.0).get(3, 3) == 160.0
        assert foo.getcol(1) == [2, 6, 10, 14]

    def test_bad_matrix(self):
        with pytest.raises(ValueError):
            Matrix([1, 2, 3])
        with pytest.raises(ValueError):
            Matrix().get(4, 0)

    def test_rotation_is_in_degrees(self):
        assert _apply(Rotation([0, 0, 1], 90), (1, 0, 0)) == pytest.approx([0, 1, 0])
        assert _apply(Rotation([0, 1, 0], 90), (1, 0, 0)) == pytest.approx([0, 0, -1])
        assert _apply(Rotation([1, 0, 0], 90), (0, 1, 0)) == pytest.approx([0, 0, 1])
        back = compose(Rotation([0, 0, 1], 30), Rotation([0, 0, 1], 30, inverse=True))
        assert back.isidentity()
        with pytest.raises(ValueError):
            Rotation([0, 0, 0], 10)

    def test_translation_and_scale(self):
        assert _apply(Translation([1, 2, 3]), (1, 1, 1)) == pytest.approx([2, 3, 4])
        assert _apply(Translation([1, 2, 3], inverse=True), (1, 1, 1)) == pytest.approx([0, -1, -2])
        assert _apply(Scale(2), (1, 1, 1)) == pytest.approx([2, 2, 2])
        assert _apply(Scale(1, 2, 3), (1, 1, 1)) == pytest.approx([1, 2, 3])
        assert _apply(Scale((2, 2, 2), inverse=True), (1, 1, 1)) == pytest.approx([0.5, 0.5, 0.5])

    def test_compose_order(self):
        # the rightmost matrix is applied first
        m = compose(Translation([10, 0, 0]), Scale(2, 1, 1))
        assert _apply(m, (1, 0, 0)) == pytest.approx([12, 0, 0])
        assert compose(None, Scale(2)) == Scale(2)
        assert compose().isidentity()

    def test_determinant_and_normals(self):
        assert Scale(-1, 1, 1).determinant3() == pytest.approx(-1.0)
        nm = Scale(2, 1, 1).normalmatrix()
        assert nm.get(0, 0) == pytest.approx(0.5)
        with pytest.raises(ValueError):
            Scale(0, 1, 1).normalmatrix()
