import math
import unittest
from unittest import TestCase

import numpy as np

from src.tapegrad.domain._errors import ShapeMismatchError
from src.tapegrad.infrastructure._losses import softmax_cross_entropy
from src.tapegrad.infrastructure._tape import Tape
from src.tapegrad.infrastructure._tensor import Tensor
from src.tapegrad.infrastructure.ndarray import NdArray


def _softmax(x: np.ndarray) -> np.ndarray:
    e = np.exp(x - x.max(axis=1, keepdims=True))
    return e / e.sum(axis=1, keepdims=True)


class TestSoftmaxCrossEntropy(TestCase):
    def test_extreme_logits_are_stable(self):
        logits = Tensor(
            NdArray((2, 4), [1000, 1000, 1000, 1000, -2100, -2100, -2000, -2100])
        )
        targets = NdArray((2, 1), [3, 2])

        def forward(tape):
            loss = softmax_cross_entropy(tape, logits, targets)
            loss.grad.fill_(1.0)
            return loss

        loss = Tape().with_scope(forward)
        self.assertEqual(loss.shape, (2, 1))
        self.assertAlmostEqual(loss.data.item(0), math.log(4))
        self.assertAlmostEqual(loss.data.item(1), 0.0)
        np.testing.assert_allclose(
            logits.grad.tolist(),
            [0.25, 0.25, 0.25, -0.75, 0.0, 0.0, 0.0, 0.0],
            atol=1e-12,
        )

    def test_matches_reference_formula(self):
        rs = np.random.RandomState(0)
        x = rs.randn(5, 6)
        y = np.array([0, 5, 2, 2, 3])
        logits = Tensor.from_numpy(x)
        targets = NdArray((5, 1), y)
        tape = Tape()
        with tape.scope():
            loss = softmax_cross_entropy(tape, logits, targets)
            loss.grad.fill_(1.0)

        p = _softmax(x)
        np.testing.assert_allclose(
            loss.data.to_numpy().reshape(-1), -np.log(p[np.arange(5), y])
        )
        one_hot = np.eye(6)[y]
        np.testing.assert_allclose(logits.grad.to_numpy(), p - one_hot, atol=1e-12)

    def test_per_row_seed_scales_each_row(self):
        rs = np.random.RandomState(1)
        x = rs.randn(3, 4)
        y = np.array([1, 0, 3])
        row_seed = np.array([[2.0], [0.0], [-0.5]])
        logits = Tensor.from_numpy(x)
        tape = Tape()
        with tape.scope():
            loss = softmax_cross_entropy(tape, logits, NdArray((3, 1), y))
            loss.grad.add_(NdArray((3, 1), row_seed))

        expected = (_softmax(x) - np.eye(4)[y]) * row_seed
        np.testing.assert_allclose(logits.grad.to_numpy(), expected, atol=1e-12)

    def test_target_is_not_modified_by_later_writes(self):
        x = np.zeros((1, 3))
        logits = Tensor.from_numpy(x)
        targets = NdArray((1, 1), [2])
        tape = Tape()
        with tape.scope():
            loss = softmax_cross_entropy(tape, logits, targets)
            targets.fill_(0)
            loss.grad.fill_(1.0)
        np.testing.assert_allclose(logits.grad.tolist(), [1 / 3, 1 / 3, -2 / 3])

    def test_shape_errors(self):
        with self.assertRaises(ShapeMismatchError):
            softmax_cross_entropy(None, Tensor(NdArray((2, 3, 1))), NdArray((2, 1)))
        with self.assertRaises(ShapeMismatchError):
            softmax_cross_entropy(None, Tensor(NdArray((2, 3))), NdArray((2,)))
        with self.assertRaises(ShapeMismatchError):
            softmax_cross_entropy(None, Tensor(NdArray((2, 3))), NdArray((3, 1)))

    def test_target_out_of_range_raises(self):
        with self.assertRaises(IndexError):
            softmax_cross_entropy(None, Tensor(NdArray((1, 3))), NdArray((1, 1), [3]))

    def test_target_must_be_ndarray(self):
        with self.assertRaises(TypeError):
            softmax_cross_entropy(None, Tensor(NdArray((1, 3))), [[0]])


if __name__ == "__main__":
    unittest.main()
