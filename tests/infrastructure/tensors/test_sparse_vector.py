import unittest
import numpy as np

from astute import (
    OutOfRangeError,
    SparseVector,
    Tensor,
    TensorKind,
    UnsupportedOperationError,
)


class TestSparseVectorBasics(unittest.TestCase):
    def test_construct_from_pairs(self) -> None:
        s = SparseVector([[0, 4], [4, 11]])
        self.assertTrue(s.sparse)
        self.assertIs(s.kind, TensorKind.SPARSE)
        self.assertEqual(s.shape, (None,))
        self.assertEqual(s.at(0), 4.0)
        self.assertEqual(s.at(4), 11.0)
        self.assertEqual(s.at(1000), 0.0)

    def test_construct_from_mapping_with_length(self) -> None:
        s = SparseVector({1: 2.0, 3: -1.0}, 5)
        self.assertEqual(s.shape, (5,))
        self.assertEqual(s.total_size(), 5)
        self.assertEqual(len(s), 2)

    def test_zero_is_never_stored(self) -> None:
        s = SparseVector({0: 1.0, 2: 0.0})
        self.assertEqual(s.entries, {0: 1.0})
        s.set(0, 0.0)
        self.assertEqual(s.entries, {})

    def test_out_of_range_on_bounded_vector(self) -> None:
        s = SparseVector({0: 1.0}, 3)
        with self.assertRaises(OutOfRangeError):
            s.at(3)
        with self.assertRaises(OutOfRangeError):
            s.set(5, 1.0)
        with self.assertRaises(OutOfRangeError):
            s.at(-1)

    def test_to_dense_uses_length_or_largest_index(self) -> None:
        np.testing.assert_array_equal(
            SparseVector({1: 2.0}, 4).to_dense().to_numpy(), [0, 2, 0, 0]
        )
        np.testing.assert_array_equal(
            SparseVector({2: 5.0}).to_dense().to_numpy(), [0, 0, 5]
        )
        self.assertEqual(SparseVector().to_dense().shape, (0,))

    def test_clone_is_independent(self) -> None:
        s = SparseVector({0: 1.0}, 2)
        c = s.clone()
        c.set(1, 3.0)
        self.assertEqual(s.entries, {0: 1.0})
        self.assertEqual(c.length, 2)

    def test_apply_and_apply_binary(self) -> None:
        s = SparseVector({0: 2.0, 3: -1.0}, 4)
        doubled = s.apply(lambda v: 2 * v)
        self.assertEqual(doubled.entries, {0: 4.0, 3: -2.0})

        d = Tensor([10.0, 20.0, 30.0, 40.0])
        summed = s.apply_binary(lambda a, b: a + b, d)
        self.assertEqual(summed.entries, {0: 12.0, 3: 39.0})

    def test_sum(self) -> None:
        out = SparseVector({0: 1.5, 7: 2.5}).sum()
        self.assertIsInstance(out, Tensor)
        self.assertEqual(out.shape, (1,))
        self.assertEqual(out.at(0), 4.0)


class TestSparseVectorProducts(unittest.TestCase):
    def test_dot_with_dense(self) -> None:
        s = SparseVector([[0, 4], [4, 11]])
        out = s.dot(Tensor([1, 2, 3, 4, 5, 6, 7]))
        self.assertEqual(out.shape, (1,))
        self.assertEqual(out.at(0), 59.0)

    def test_dense_dot_sparse_is_commutative(self) -> None:
        s = SparseVector([[0, 4], [4, 11]])
        out = Tensor([1, 2, 3, 4, 5, 6, 7]).dot(s)
        self.assertEqual(out.at(0), 59.0)

    def test_dot_sparse_sparse_uses_intersection(self) -> None:
        a = SparseVector({0: 4.0, 4: 11.0})
        b = SparseVector({0: 1.0, 4: 2.0, 6: 3.0})
        self.assertEqual(a.dot(b).at(0), 26.0)

    def test_mat_mul_row_vector(self) -> None:
        s = SparseVector({0: 4.0, 2: 1.0}, 3)
        m = Tensor([[1, 2], [3, 4], [5, 6]])
        out = s.mat_mul(m)
        self.assertEqual(out.shape, (2,))
        np.testing.assert_array_equal(out.data, [9, 14])

    def test_dense_mat_mul_sparse(self) -> None:
        m = Tensor([[1, 2], [3, 4]])
        s = SparseVector({0: 2.0, 1: 1.0}, 2)
        out = m.mat_mul(s)
        np.testing.assert_array_equal(out.to_numpy(), [4, 10])

    def test_mat_mul_requires_rank_two(self) -> None:
        s = SparseVector({0: 1.0})
        with self.assertRaises(UnsupportedOperationError):
            s.mat_mul(Tensor([1, 2, 3]))

    def test_mat_mul_index_beyond_rows(self) -> None:
        s = SparseVector({5: 1.0})
        with self.assertRaises(OutOfRangeError):
            s.mat_mul(Tensor(shape=(2, 2)))


class TestSparseVectorArithmetic(unittest.TestCase):
    def test_add_sparse_sparse_is_new_sparse(self) -> None:
        a = SparseVector({0: 1.0, 2: 2.0}, 4)
        b = SparseVector({2: -2.0, 3: 5.0}, 4)
        out = a.add(b)
        self.assertTrue(out.sparse)
        self.assertEqual(out.entries, {0: 1.0, 3: 5.0})
        self.assertEqual(out.length, 4)
        self.assertEqual(a.entries, {0: 1.0, 2: 2.0})

    def test_add_sparse_dense_is_dense(self) -> None:
        a = SparseVector({1: 3.0}, 3)
        out = a.add(Tensor([1.0, 1.0, 1.0]))
        self.assertFalse(out.sparse)
        np.testing.assert_array_equal(out.to_numpy(), [1, 4, 1])

    def test_sub_dense_sparse_applies_scales(self) -> None:
        out = Tensor([1.0, 1.0, 1.0]).sub(SparseVector({1: 3.0}, 3))
        np.testing.assert_array_equal(out.to_numpy(), [1, -2, 1])

    def test_add_number_is_dense(self) -> None:
        out = SparseVector({1: 3.0}, 3).add(1.0)
        np.testing.assert_array_equal(out.to_numpy(), [1, 4, 1])

    def test_mul_by_dense_is_dense(self) -> None:
        out = SparseVector({0: 2.0, 2: 3.0}, 3).mul(Tensor([5.0, 6.0, 7.0]))
        self.assertFalse(out.sparse)
        np.testing.assert_array_equal(out.to_numpy(), [10, 0, 21])

    def test_mul_by_scalar_stays_sparse(self) -> None:
        out = SparseVector({0: 2.0}, 3).mul(Tensor([4.0]))
        self.assertTrue(out.sparse)
        self.assertEqual(out.entries, {0: 8.0})

    def test_mul_sparse_sparse_is_intersection(self) -> None:
        out = SparseVector({0: 2.0, 1: 3.0}).mul(SparseVector({1: 4.0, 2: 5.0}))
        self.assertTrue(out.sparse)
        self.assertEqual(out.entries, {1: 12.0})

    def test_scale_stays_sparse(self) -> None:
        out = SparseVector({0: 2.0}, 3).scale(-0.5)
        self.assertTrue(out.sparse)
        self.assertEqual(out.entries, {0: -1.0})

    def test_divide_scale_by_dense(self) -> None:
        out = SparseVector({0: 2.0, 2: 3.0}, 3).divide_scale(Tensor([4.0, 1.0, 6.0]), 2.0)
        np.testing.assert_array_equal(out.to_numpy(), [1, 0, 1])

    def test_divide_by_sparse_is_unsupported(self) -> None:
        with self.assertRaises(UnsupportedOperationError):
            Tensor([1.0, 2.0]).div(SparseVector({0: 1.0}, 2))
        with self.assertRaises(UnsupportedOperationError):
            SparseVector({0: 1.0}, 2).div(SparseVector({0: 1.0}, 2))

    def test_zero_preserving_function_stays_sparse(self) -> None:
        out = SparseVector({0: 4.0, 3: 9.0}, 5).sqrt()
        self.assertTrue(out.sparse)
        self.assertEqual(out.entries, {0: 2.0, 3: 3.0})

    def test_other_functions_densify(self) -> None:
        out = SparseVector({1: 1.0}, 3).exp()
        self.assertFalse(out.sparse)
        np.testing.assert_allclose(out.to_numpy(), [1.0, np.e, 1.0])


if __name__ == "__main__":
    unittest.main()
