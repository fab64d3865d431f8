import unittest
import numpy as np

from astute import (
    MathFn,
    ShapeMismatchError,
    SparseVector,
    Tensor,
    UnsupportedOperationError,
    broadcast_shape,
    mathops,
)


class TestBroadcasting(unittest.TestCase):
    def test_trailing_alignment(self) -> None:
        out = mathops.add(Tensor([[1, 2], [3, 4]]), Tensor([1, 2]))
        self.assertEqual(out.shape, (2, 2))
        np.testing.assert_array_equal(out.data, [2, 4, 4, 6])

    def test_size_one_dimension_broadcasts(self) -> None:
        out = mathops.mul(Tensor([[1], [2]]), Tensor([[1, 10, 100]]))
        np.testing.assert_array_equal(out.to_numpy(), [[1, 10, 100], [2, 20, 200]])

    def test_incompatible_shapes_raise(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            mathops.add(Tensor(shape=(2, 3)), Tensor(shape=(2,)))
        with self.assertRaises(ShapeMismatchError):
            broadcast_shape((4, 3), (2, 3))

    def test_broadcast_shape(self) -> None:
        self.assertEqual(broadcast_shape((2, 1, 3), (4, 1)), (2, 4, 3))

    def test_numbers_promote_in_either_position(self) -> None:
        t = Tensor([1.0, 2.0])
        np.testing.assert_array_equal(mathops.sub(t, 1).to_numpy(), [0, 1])
        np.testing.assert_array_equal(mathops.sub(10, t).to_numpy(), [9, 8])
        np.testing.assert_array_equal(mathops.div(1, t).to_numpy(), [1, 0.5])


class TestScaledOperations(unittest.TestCase):
    def test_add_scale(self) -> None:
        out = mathops.add_scale(Tensor([1.0, 2.0]), Tensor([3.0, 4.0]), 2.0, -1.0)
        np.testing.assert_array_equal(out.to_numpy(), [-1, 0])

    def test_multiply_and_divide_scale(self) -> None:
        a, b = Tensor([2.0, 4.0]), Tensor([4.0, 8.0])
        np.testing.assert_array_equal(
            mathops.multiply_scale(a, b, 0.5).to_numpy(), [4, 16]
        )
        np.testing.assert_array_equal(
            mathops.divide_scale(a, b, 3.0).to_numpy(), [1.5, 1.5]
        )

    def test_division_by_zero_follows_ieee(self) -> None:
        out = mathops.div(Tensor([1.0, -1.0, 0.0]), Tensor([0.0, 0.0, 0.0]))
        arr = out.to_numpy()
        self.assertEqual(arr[0], np.inf)
        self.assertEqual(arr[1], -np.inf)
        self.assertTrue(np.isnan(arr[2]))


class TestDestinations(unittest.TestCase):
    def test_dest_is_written_and_returned(self) -> None:
        dest = Tensor(shape=(2,))
        out = mathops.add(Tensor([1.0, 2.0]), Tensor([3.0, 4.0]), dest)
        self.assertIs(out, dest)
        np.testing.assert_array_equal(dest.data, [4, 6])

    def test_dest_may_alias_an_operand(self) -> None:
        a = Tensor([1.0, 2.0, 3.0])
        mathops.add_scale(a, Tensor([1.0]), 2.0, 1.0, a)
        np.testing.assert_array_equal(a.data, [3, 5, 7])

    def test_dest_through_transposed_view(self) -> None:
        base = Tensor(shape=(2, 2))
        mathops.add(Tensor([[1, 2], [3, 4]]), 0.0, base.transpose())
        np.testing.assert_array_equal(base.to_numpy(), [[1, 3], [2, 4]])

    def test_dest_with_wrong_shape_raises(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            mathops.add(Tensor([1.0, 2.0]), Tensor([1.0, 2.0]), Tensor(shape=(3,)))

    def test_sparse_dest_for_sparse_result(self) -> None:
        dest = SparseVector({7: 1.0}, 8)
        out = mathops.scale(SparseVector({1: 2.0}, 8), 3.0, dest)
        self.assertIs(out, dest)
        self.assertEqual(dest.entries, {1: 6.0})


class TestSparseRouting(unittest.TestCase):
    def test_sparse_operand_routes_regardless_of_position(self) -> None:
        s = SparseVector({0: 2.0}, 2)
        d = Tensor([3.0, 4.0])
        np.testing.assert_array_equal(
            mathops.multiply_scale(d, s, 2.0).to_numpy(), [12, 0]
        )
        np.testing.assert_array_equal(
            mathops.add_scale(d, s, 1.0, 10.0).to_numpy(), [23, 4]
        )

    def test_divide_by_sparse_raises(self) -> None:
        with self.assertRaises(UnsupportedOperationError):
            mathops.divide_scale(1.0, SparseVector({0: 1.0}))

    def test_contract_rejects_sparse(self) -> None:
        with self.assertRaises(UnsupportedOperationError):
            mathops.contract(SparseVector({0: 1.0}), Tensor([1.0]), 1)

    def test_sparse_against_dense_of_other_length_raises(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            mathops.mul(SparseVector({0: 1.0}, 3), Tensor([1.0, 2.0]))

    def test_same_shape(self) -> None:
        self.assertTrue(mathops.same_shape(Tensor(shape=(2, 3)), Tensor(shape=(2, 3))))
        self.assertFalse(mathops.same_shape(Tensor(shape=(2, 3)), Tensor(shape=(3, 2))))
        self.assertFalse(mathops.same_shape(Tensor(shape=(6,)), Tensor(shape=(6, 1))))
        self.assertTrue(mathops.same_shape(SparseVector({0: 1.0}), Tensor(shape=(5,))))
        self.assertFalse(mathops.same_shape(SparseVector({0: 1.0}, 4), Tensor(shape=(5,))))
        self.assertFalse(mathops.same_shape(Tensor([1.0]), None))


class TestElementwiseFunctions(unittest.TestCase):
    def test_unary_functions_match_numpy(self) -> None:
        x_np = np.array([0.1, 0.4, 0.7])
        x = Tensor(x_np)
        cases = {
            "exp": np.exp,
            "log": np.log,
            "sin": np.sin,
            "cos": np.cos,
            "tan": np.tan,
            "sqrt": np.sqrt,
            "tanh": np.tanh,
            "atan": np.arctan,
            "asin": np.arcsin,
            "sinh": np.sinh,
        }
        for name, ref in cases.items():
            with self.subTest(fn=name):
                np.testing.assert_allclose(
                    getattr(x, name)().to_numpy(), ref(x_np), rtol=1e-12
                )

    def test_round_is_half_up(self) -> None:
        out = Tensor([0.5, 1.5, -0.5, 2.4]).round()
        np.testing.assert_array_equal(out.to_numpy(), [1, 2, 0, 2])

    def test_erf(self) -> None:
        out = Tensor([0.0, 1.0]).erf()
        np.testing.assert_allclose(out.to_numpy(), [0.0, 0.8427007929497149])

    def test_sign_and_abs(self) -> None:
        t = Tensor([-2.0, 0.0, 3.0])
        np.testing.assert_array_equal(t.sign().to_numpy(), [-1, 0, 1])
        np.testing.assert_array_equal(t.abs().to_numpy(), [2, 0, 3])

    def test_unary_into_dest(self) -> None:
        t = Tensor([1.0, 4.0])
        out = t.sqrt(t)
        self.assertIs(out, t)
        np.testing.assert_array_equal(t.data, [1, 2])

    def test_binary_functions(self) -> None:
        a, b = Tensor([1.0, 5.0, -3.0]), Tensor([2.0, 2.0, 2.0])
        np.testing.assert_array_equal(a.max(b).to_numpy(), [2, 5, 2])
        np.testing.assert_array_equal(a.min(b).to_numpy(), [1, 2, -3])
        np.testing.assert_array_equal(a.pow(b).to_numpy(), [1, 25, 9])
        np.testing.assert_array_equal(a.fmod(b).to_numpy(), [1, 1, -1])

    def test_max_sparse_sparse_stays_sparse(self) -> None:
        out = mathops.maximum(SparseVector({0: -1.0, 1: 2.0}), SparseVector({0: 3.0}))
        self.assertTrue(out.sparse)
        self.assertEqual(out.entries, {0: 3.0, 1: 2.0})

    def test_max_sparse_dense_compares_every_position(self) -> None:
        d = Tensor([0.5, 0.5, 0.5])
        out = mathops.maximum(d, SparseVector({1: 2.0}, 3), d)
        self.assertIs(out, d)
        np.testing.assert_array_equal(d.to_numpy(), [0.5, 2.0, 0.5])

    def test_registry_flags(self) -> None:
        self.assertTrue(MathFn.SIN.preserves_zero)
        self.assertFalse(MathFn.COS.preserves_zero)
        self.assertTrue(MathFn.MAX.is_binary)
        with self.assertRaises(ValueError):
            mathops.apply_fn(MathFn.MAX, Tensor([1.0]))

    def test_derivative_kernels(self) -> None:
        x_np = np.array([0.2, 0.5])
        np.testing.assert_allclose(
            mathops.apply_derivative(MathFn.TANH, Tensor(x_np)).to_numpy(),
            1.0 - np.tanh(x_np) ** 2,
        )
        np.testing.assert_allclose(
            mathops.apply_derivative(MathFn.SIN, SparseVector({1: 0.5}, 2)).to_numpy(),
            [1.0, np.cos(0.5)],
        )


if __name__ == "__main__":
    unittest.main()
