import unittest
from unittest import TestCase

import numpy as np

from src.tapegrad.infrastructure.ndarray import NdArray
from src.tapegrad.infrastructure.optimizers import (
    AdamParameter,
    SGDParameter,
    adam,
    init_uniform,
    sgd,
)


def arr(values) -> NdArray:
    return NdArray.from_numpy(np.asarray(values, dtype=np.float64))


class TestSGDParameter(TestCase):
    def test_update_descends_gradient(self):
        p = SGDParameter(arr([1.0, 2.0, 3.0]), lr=0.5)
        p.grad.add_(arr([0.1, -0.2, 0.3]))
        p.update()
        np.testing.assert_allclose(p.data.to_numpy(), [0.95, 2.1, 2.85])

    def test_zero_grad_is_a_no_op(self):
        p = SGDParameter(arr([1.0, 2.0]), lr=0.1)
        p.zero_grad()
        p.update()
        np.testing.assert_array_equal(p.data.to_numpy(), [1.0, 2.0])

    def test_invalid_lr_raises(self):
        with self.assertRaises(ValueError):
            SGDParameter(arr([1.0]), lr=0.0)
        with self.assertRaises(ValueError):
            SGDParameter(arr([1.0]), lr=-1.0)


class TestAdamParameter(TestCase):
    def test_moments_start_at_zero(self):
        p = AdamParameter(arr([[1.0, 2.0]]))
        self.assertEqual(p.momentum.shape, (1, 2))
        self.assertEqual(p.variance.tolist(), [0.0, 0.0])

    def test_two_steps_without_bias_correction(self):
        lr, b1, b2, eps = 0.1, 0.9, 0.999, 1e-8
        p0 = np.array([1.0, 2.0, -3.0])
        grads = [np.array([0.5, -1.0, 0.0]), np.array([0.25, 2.0, 0.0])]
        p = AdamParameter(arr(p0), lr=lr, betas=(b1, b2), eps=eps)

        m = np.zeros(3)
        v = np.zeros(3)
        expected = p0.copy()
        for g in grads:
            p.zero_grad()
            p.grad.add_(arr(g))
            p.update()
            m = b1 * m + (1 - b1) * g
            v = b2 * v + (1 - b2) * g * g
            expected = expected - lr * m / (np.sqrt(v) + eps)

        np.testing.assert_allclose(p.momentum.to_numpy(), m)
        np.testing.assert_allclose(p.variance.to_numpy(), v)
        np.testing.assert_allclose(p.data.to_numpy(), expected)
        # an element that never saw a gradient does not move
        self.assertEqual(p.data.item(2), -3.0)

    def test_zero_grad_still_applies_momentum(self):
        lr, b1, b2, eps = 0.1, 0.9, 0.999, 1e-8
        p = AdamParameter(arr([1.0]), lr=lr, betas=(b1, b2), eps=eps)
        p.grad.add_(arr([1.0]))
        p.update()
        after_first = p.data.item()

        p.zero_grad()
        p.update()
        m = b1 * (1 - b1)
        v = b2 * (1 - b2)
        self.assertLess(p.data.item(), after_first)
        self.assertAlmostEqual(p.data.item(), after_first - lr * m / (np.sqrt(v) + eps))

    def test_first_step_size_is_scale_free(self):
        # m / sqrt(v) = (1 - b1) / sqrt(1 - b2) on the first step
        p = AdamParameter(arr([0.0, 0.0]), lr=0.01)
        p.grad.add_(arr([1e-3, -50.0]))
        p.update()
        step = 0.01 * 0.1 / np.sqrt(0.001)
        np.testing.assert_allclose(p.data.to_numpy(), [-step, step], rtol=1e-3)

    def test_invalid_hyperparams_raise(self):
        with self.assertRaises(ValueError):
            AdamParameter(arr([1.0]), lr=0.0)
        with self.assertRaises(ValueError):
            AdamParameter(arr([1.0]), betas=(1.0, 0.999))
        with self.assertRaises(ValueError):
            AdamParameter(arr([1.0]), betas=(0.9, 0.0))
        with self.assertRaises(ValueError):
            AdamParameter(arr([1.0]), eps=0.0)


class TestFactories(TestCase):
    def test_init_uniform_range(self):
        a = init_uniform((50, 20), 0.3, rng=np.random.default_rng(0))
        vals = a.to_numpy()
        self.assertEqual(vals.shape, (50, 20))
        self.assertTrue(np.all(np.abs(vals) <= 0.3))
        self.assertGreater(vals.std(), 0.1)

    def test_zero_scale_gives_zeros(self):
        p = adam()((3, 4), 0.0)
        self.assertEqual(p.data.tolist(), [0.0] * 12)

    def test_sgd_factory(self):
        p = sgd(0.25)((2, 3), 1.0)
        self.assertIsInstance(p, SGDParameter)
        self.assertEqual(p.shape, (2, 3))
        self.assertEqual(p.lr, 0.25)
        self.assertEqual(p.grad.tolist(), [0.0] * 6)

    def test_adam_factory_shares_hyperparams(self):
        factory = adam(0.04, (0.8, 0.99), 1e-6)
        a, b = factory((2,), 0.1), factory((3, 3), 0.1)
        for p in (a, b):
            self.assertIsInstance(p, AdamParameter)
            self.assertEqual(p.lr, 0.04)
            self.assertEqual(p.betas, (0.8, 0.99))
            self.assertEqual(p.eps, 1e-6)

    def test_factory_seeded_by_generator(self):
        a = adam(rng=np.random.default_rng(7))((4,), 1.0)
        b = adam(rng=np.random.default_rng(7))((4,), 1.0)
        self.assertEqual(a.data.tolist(), b.data.tolist())

    def test_factories_validate_eagerly(self):
        with self.assertRaises(ValueError):
            sgd(0.0)
        with self.assertRaises(ValueError):
            adam(0.01, (0.9, 1.5))


if __name__ == "__main__":
    unittest.main()
