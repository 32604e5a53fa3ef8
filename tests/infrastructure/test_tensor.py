import unittest
from unittest import TestCase

import numpy as np

from src.tapegrad.domain._parameter import IParameter
from src.tapegrad.infrastructure._parameter import Parameter
from src.tapegrad.infrastructure._tensor import Tensor
from src.tapegrad.infrastructure.ndarray import NdArray
from src.tapegrad.infrastructure.optimizers import AdamParameter, SGDParameter


class TestTensor(TestCase):
    def test_grad_starts_at_zero_with_same_shape(self):
        t = Tensor(NdArray((2, 3), np.arange(6)))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.ndim, 2)
        self.assertEqual(t.grad.shape, (2, 3))
        self.assertEqual(t.grad.tolist(), [0.0] * 6)

    def test_zero_grad_resets_in_place(self):
        t = Tensor.from_numpy(np.ones((2, 2)))
        grad = t.grad
        grad.fill_(4.0)
        t.zero_grad()
        self.assertIs(t.grad, grad)
        self.assertEqual(t.grad.tolist(), [0.0] * 4)

    def test_requires_ndarray(self):
        with self.assertRaises(TypeError):
            Tensor(np.zeros((2, 2)))

    def test_repr(self):
        self.assertEqual(repr(Tensor(NdArray((1, 2)))), "Tensor(shape=(1, 2))")


class TestParameter(TestCase):
    def test_parameter_is_abstract(self):
        with self.assertRaises(TypeError):
            Parameter(NdArray((1,)))

    def test_concrete_parameters_satisfy_protocol(self):
        for p in (SGDParameter(NdArray((2,))), AdamParameter(NdArray((2,)))):
            self.assertIsInstance(p, Tensor)
            self.assertIsInstance(p, IParameter)


if __name__ == "__main__":
    unittest.main()
