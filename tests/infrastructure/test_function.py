import unittest
from unittest import TestCase

import numpy as np

from src.tapegrad.domain._errors import ShapeMismatchError
from src.tapegrad.infrastructure._function import dot, gather, relu, transpose, view
from src.tapegrad.infrastructure._tape import Tape
from src.tapegrad.infrastructure._tensor import Tensor
from src.tapegrad.infrastructure.ndarray import NdArray


def tensor_from_np(arr) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float64))


def seed(t: Tensor, arr) -> None:
    t.grad.add_(NdArray(t.shape, np.asarray(arr, dtype=np.float64)))


class TestView(TestCase):
    def test_forward_aliases_data_not_grad(self):
        x = tensor_from_np(np.arange(6).reshape(2, 3))
        y = view(None, x, (3, 2))
        self.assertEqual(y.shape, (3, 2))
        y.data.fill_(1.0)
        self.assertEqual(x.data.tolist(), [1.0] * 6)
        y.grad.fill_(1.0)
        self.assertEqual(x.grad.tolist(), [0.0] * 6)

    def test_backward_reshapes_gradient(self):
        tape = Tape()
        x = tensor_from_np(np.zeros((2, 3)))
        g = np.arange(6, dtype=np.float64).reshape(3, 2)
        with tape.scope():
            y = view(tape, x, (3, 2))
            seed(y, g)
        np.testing.assert_array_equal(x.grad.to_numpy(), g.reshape(2, 3))

    def test_bad_shape_raises(self):
        x = tensor_from_np(np.zeros((2, 3)))
        with self.assertRaises(ShapeMismatchError):
            view(Tape(), x, (4,))


class TestGather(TestCase):
    def test_forward_and_backward(self):
        tape = Tape()
        table = tensor_from_np(np.arange(10).reshape(5, 2))
        idx = Tensor(NdArray((3,), [3, 3, 0]))
        with tape.scope():
            out = gather(tape, table, idx)
            self.assertEqual(out.data.tolist(), [6.0, 7.0, 6.0, 7.0, 0.0, 1.0])
            seed(out, [[1, 2], [10, 20], [100, 200]])
        expected = np.zeros((5, 2))
        expected[3] = [11, 22]
        expected[0] = [100, 200]
        np.testing.assert_array_equal(table.grad.to_numpy(), expected)
        self.assertEqual(idx.grad.tolist(), [0.0, 0.0, 0.0])

    def test_grouped_backward(self):
        tape = Tape()
        table = tensor_from_np(np.zeros((2, 5, 2)))
        idx = Tensor(NdArray((2, 3), [[4, 0, 4], [4, 1, 1]]))
        with tape.scope():
            out = gather(tape, table, idx)
            out.grad.fill_(1.0)
        expected = np.zeros((2, 5, 2))
        expected[0, 4] = 2
        expected[0, 0] = 1
        expected[1, 4] = 1
        expected[1, 1] = 2
        np.testing.assert_array_equal(table.grad.to_numpy(), expected)

    def test_index_must_be_tensor(self):
        table = tensor_from_np(np.zeros((5, 2)))
        with self.assertRaises(TypeError):
            gather(None, table, NdArray((1,), [0]))


class TestTranspose(TestCase):
    def test_backward_applies_inverse_permutation(self):
        tape = Tape()
        x_np = np.arange(24, dtype=np.float64).reshape(2, 3, 4)
        x = tensor_from_np(x_np)
        dims = (2, 0, 1)
        g = np.random.RandomState(0).randn(4, 2, 3)
        with tape.scope():
            y = transpose(tape, x, dims)
            np.testing.assert_array_equal(y.data.to_numpy(), x_np.transpose(dims))
            seed(y, g)
        np.testing.assert_allclose(x.grad.to_numpy(), g.transpose(np.argsort(dims)))


class TestDot(TestCase):
    def test_backward_matches_closed_form(self):
        rs = np.random.RandomState(1)
        a_np = rs.randn(3, 2, 4)
        b_np = rs.randn(3, 4, 5)
        g = rs.randn(3, 2, 5)
        a, b = tensor_from_np(a_np), tensor_from_np(b_np)
        tape = Tape()
        with tape.scope():
            out = dot(tape, a, b)
            np.testing.assert_allclose(out.data.to_numpy(), a_np @ b_np)
            seed(out, g)
        np.testing.assert_allclose(a.grad.to_numpy(), g @ b_np.transpose(0, 2, 1))
        np.testing.assert_allclose(b.grad.to_numpy(), a_np.transpose(0, 2, 1) @ g)

    def test_shared_operand_accumulates(self):
        x = tensor_from_np([[1.0, 2.0]])
        w = tensor_from_np([[3.0], [4.0]])
        tape = Tape()
        with tape.scope():
            y1 = dot(tape, x, w)
            y2 = dot(tape, x, w)
            y1.grad.fill_(1.0)
            y2.grad.fill_(1.0)
        np.testing.assert_array_equal(w.grad.to_numpy(), [[2.0], [4.0]])
        np.testing.assert_array_equal(x.grad.to_numpy(), [[6.0, 8.0]])

    def test_no_tape_does_not_record(self):
        tape = Tape()
        x = tensor_from_np([[1.0, 2.0]])
        w = tensor_from_np([[3.0], [4.0]])
        with tape.scope():
            y = dot(None, x, w)
            self.assertEqual(len(tape), 0)
            y.grad.fill_(1.0)
        self.assertEqual(y.data.tolist(), [11.0])
        self.assertEqual(w.grad.tolist(), [0.0, 0.0])


class TestReLU(TestCase):
    def test_forward_and_backward(self):
        x = tensor_from_np([-1.0, 0.0, 2.0])
        tape = Tape()
        with tape.scope():
            y = relu(tape, x)
            self.assertEqual(y.data.tolist(), [0.0, 0.0, 2.0])
            seed(y, [5.0, 6.0, 7.0])
        # gradient passes through at exactly zero
        self.assertEqual(x.grad.tolist(), [0.0, 6.0, 7.0])

    def test_mask_is_fixed_at_forward_time(self):
        x = tensor_from_np([-1.0, 1.0])
        tape = Tape()
        with tape.scope():
            y = relu(tape, x)
            x.data.map_(np.negative)
            y.grad.fill_(1.0)
        self.assertEqual(x.grad.tolist(), [0.0, 1.0])


class TestComposite(TestCase):
    def test_two_layer_network_matches_finite_differences(self):
        rs = np.random.RandomState(3)
        x = tensor_from_np(rs.randn(4, 3))
        w0 = tensor_from_np(rs.randn(3, 5))
        w1 = tensor_from_np(rs.randn(5, 2))
        c = rs.randn(4, 2)

        def loss_value() -> float:
            out = dot(None, relu(None, dot(None, x, w0)), w1)
            return float(np.sum(out.data.to_numpy() * c))

        tape = Tape()
        with tape.scope():
            out = dot(tape, relu(tape, dot(tape, x, w0)), w1)
            seed(out, c)

        eps = 1e-6
        buf = w0.data
        numeric = np.zeros(buf.shape)
        for i in range(buf.size):
            base = buf.to_numpy().reshape(-1)
            for sign in (1.0, -1.0):
                bumped = base.copy()
                bumped[i] += sign * eps
                buf.map_(lambda _, b=bumped: b)
                numeric.reshape(-1)[i] += sign * loss_value() / (2 * eps)
            buf.map_(lambda _, b=base: b)
        np.testing.assert_allclose(w0.grad.to_numpy(), numeric, rtol=1e-5, atol=1e-6)


if __name__ == "__main__":
    unittest.main()
