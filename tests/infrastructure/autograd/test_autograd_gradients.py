"""
Central-difference checks of every differentiable operation.

Each check builds ``out = op(*inputs)``, backpropagates a fixed random
weighting ``w`` of the output and compares every input coordinate of the
resulting gradient with the numerical derivative of ``sum(w * out)``. For
sparse inputs only the stored coordinates are perturbed.
"""

import unittest
import numpy as np

import astute
from astute import SparseVector, Tensor, Variable

EPS = 1e-6
RTOL = 1e-4
ATOL = 1e-6


def dense(shape, low=1.0, high=3.0, seed=0) -> Tensor:
    rng = np.random.default_rng(seed)
    return Tensor(rng.uniform(low, high, size=shape))


def sparse(length, indices, low=1.0, high=3.0, seed=1) -> SparseVector:
    rng = np.random.default_rng(seed)
    return SparseVector(
        {int(i): float(rng.uniform(low, high)) for i in indices}, length
    )


def _coords(data):
    if data.sparse:
        return list(data.entries)
    return list(np.ndindex(*data.shape))


def _objective(build, datas, weight) -> float:
    out = build(*[Variable(d) for d in datas])
    return float(np.sum(weight * out.data.to_dense().to_numpy()))


def _perturbed(data, coord, delta):
    copy = data.clone()
    copy.set(coord, copy.at(coord) + delta)
    return copy


class GradientCheckMixin:
    def assert_gradients(self, build, *datas) -> None:
        variables = [Variable(d) for d in datas]
        out = build(*variables)
        out_shape = out.data.to_dense().shape
        weight = np.random.default_rng(42).uniform(0.5, 1.5, size=out_shape)
        out.backward(Tensor(weight))

        for index, data in enumerate(datas):
            grad = variables[index].grad
            self.assertIsNotNone(grad, f"input {index} received no gradient")
            for coord in _coords(data):
                plus = list(datas)
                minus = list(datas)
                plus[index] = _perturbed(data, coord, EPS)
                minus[index] = _perturbed(data, coord, -EPS)
                numeric = (
                    _objective(build, plus, weight) - _objective(build, minus, weight)
                ) / (2 * EPS)
                analytic = grad.at(coord)
                np.testing.assert_allclose(
                    analytic,
                    numeric,
                    rtol=RTOL,
                    atol=ATOL,
                    err_msg=f"input {index} coord {coord}",
                )


class TestBinaryGradientsDense(GradientCheckMixin, unittest.TestCase):
    def test_add(self) -> None:
        self.assert_gradients(astute.add, dense((2, 3)), dense((2, 3), seed=1))

    def test_sub(self) -> None:
        self.assert_gradients(astute.sub, dense((4,)), dense((4,), seed=1))

    def test_mul(self) -> None:
        self.assert_gradients(astute.mul, dense((2, 2)), dense((2, 2), seed=1))

    def test_div(self) -> None:
        self.assert_gradients(astute.div, dense((3,)), dense((3,), seed=1))

    def test_dot_vectors(self) -> None:
        self.assert_gradients(astute.dot, dense((5,)), dense((5,), seed=1))

    def test_dot_matrices(self) -> None:
        self.assert_gradients(astute.dot, dense((2, 3)), dense((3, 4), seed=1))

    def test_dot_matrix_vector(self) -> None:
        self.assert_gradients(astute.dot, dense((3, 4)), dense((4,), seed=1))


class TestBinaryGradientsSparse(GradientCheckMixin, unittest.TestCase):
    def test_add_sparse_dense(self) -> None:
        self.assert_gradients(astute.add, sparse(5, [0, 3]), dense((5,)))

    def test_sub_dense_sparse(self) -> None:
        self.assert_gradients(astute.sub, dense((5,)), sparse(5, [1, 4]))

    def test_mul_sparse_dense(self) -> None:
        self.assert_gradients(astute.mul, sparse(5, [0, 2]), dense((5,)))

    def test_mul_dense_sparse(self) -> None:
        self.assert_gradients(astute.mul, dense((5,)), sparse(5, [2, 3]))

    def test_div_sparse_numerator(self) -> None:
        self.assert_gradients(astute.div, sparse(4, [1, 3]), dense((4,)))

    def test_dot_sparse_dense(self) -> None:
        self.assert_gradients(astute.dot, sparse(6, [0, 5]), dense((6,)))

    def test_dot_dense_sparse(self) -> None:
        self.assert_gradients(astute.dot, dense((6,)), sparse(6, [1, 2]))

    def test_dot_sparse_sparse(self) -> None:
        self.assert_gradients(
            astute.dot, sparse(6, [0, 2, 5]), sparse(6, [2, 5], seed=3)
        )


class TestUnaryGradientsDense(GradientCheckMixin, unittest.TestCase):
    def test_scale(self) -> None:
        self.assert_gradients(lambda x: astute.scale(x, -2.5), dense((2, 2)))

    def test_add_scalar(self) -> None:
        self.assert_gradients(lambda x: astute.add_scalar(x, 4.0), dense((3,)))

    def test_square(self) -> None:
        self.assert_gradients(astute.square, dense((3, 2)))

    def test_exp(self) -> None:
        self.assert_gradients(astute.exp, dense((4,)))

    def test_sqrt(self) -> None:
        self.assert_gradients(astute.sqrt, dense((4,)))

    def test_sin(self) -> None:
        self.assert_gradients(astute.sin, dense((4,)))

    def test_cos(self) -> None:
        self.assert_gradients(astute.cos, dense((4,)))

    def test_tan(self) -> None:
        self.assert_gradients(astute.tan, dense((4,), low=0.2, high=1.2))

    def test_sum(self) -> None:
        self.assert_gradients(astute.sum, dense((2, 3)))

    def test_log(self) -> None:
        self.assert_gradients(astute.log, dense((4,)))

    def test_abs(self) -> None:
        data = dense((4,))
        data.copy_from_numpy(data.to_numpy() * np.array([1.0, -1.0, -1.0, 1.0]))
        self.assert_gradients(astute.abs, data)

    def test_tanh(self) -> None:
        self.assert_gradients(astute.tanh, dense((3,), low=-1.0, high=1.0))

    def test_registry_function(self) -> None:
        self.assert_gradients(lambda x: astute.apply_fn(x, "atan"), dense((3,)))

    def test_composite_logistic(self) -> None:
        def build(w, x):
            return w.dot(x).scale(-1.0).exp().add_scalar(1.0).log()

        self.assert_gradients(build, dense((4,), low=-0.5, high=0.5), dense((4,)))


class TestUnaryGradientsSparse(GradientCheckMixin, unittest.TestCase):
    def test_scale(self) -> None:
        self.assert_gradients(lambda x: astute.scale(x, 3.0), sparse(5, [1, 3]))

    def test_add_scalar(self) -> None:
        self.assert_gradients(lambda x: astute.add_scalar(x, 1.0), sparse(5, [0, 4]))

    def test_square(self) -> None:
        self.assert_gradients(astute.square, sparse(5, [0, 2]))

    def test_exp(self) -> None:
        self.assert_gradients(astute.exp, sparse(4, [1, 2]))

    def test_sqrt(self) -> None:
        self.assert_gradients(astute.sqrt, sparse(6, [0, 5]))

    def test_sin(self) -> None:
        self.assert_gradients(astute.sin, sparse(4, [0, 3]))

    def test_cos(self) -> None:
        self.assert_gradients(astute.cos, sparse(4, [2]))

    def test_tan(self) -> None:
        self.assert_gradients(astute.tan, sparse(4, [1, 3], low=0.2, high=1.2))

    def test_sum(self) -> None:
        self.assert_gradients(astute.sum, sparse(7, [0, 6]))

    def test_abs(self) -> None:
        self.assert_gradients(astute.abs, sparse(4, [0, 1], low=-3.0, high=-1.0))

    def test_tanh(self) -> None:
        self.assert_gradients(astute.tanh, sparse(4, [3], low=0.1, high=0.9))


if __name__ == "__main__":
    unittest.main()
