"""
Unit tests for the expression tree: construction, dimension checks,
rendering and immutability.
"""

import unittest
import os
import numpy as np
import sys

# Add the parent directory to the path so we can import the matexpr module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from matexpr import (
    make_leaf, multiply, add, dimensions, render, count_chain_operands,
    LeafNode, ProductNode, SumNode, MatrixExpr, DimensionMismatch,
)


class TestExpressionConstruction(unittest.TestCase):
    """Test cases for make_leaf(), multiply() and add()."""

    def setUp(self):
        self.A = make_leaf(np.ones((3, 4)), label="A")
        self.B = make_leaf(np.ones((4, 5)), label="B")
        self.C = make_leaf(np.ones((3, 5)), label="C")

    def test_make_leaf_reads_dimensions(self):
        leaf = make_leaf(np.zeros((6, 2)))
        self.assertIsInstance(leaf, LeafNode)
        self.assertEqual(dimensions(leaf), (6, 2))
        self.assertEqual(leaf.rows, 6)
        self.assertEqual(leaf.cols, 2)

    def test_make_leaf_default_label(self):
        self.assertEqual(make_leaf(np.zeros((6, 2))).label, "6x2")

    def test_make_leaf_accepts_lists(self):
        leaf = make_leaf([[1.0, 2.0, 3.0]], label="row")
        self.assertEqual(leaf.shape, (1, 3))

    def test_make_leaf_rejects_vectors(self):
        with self.assertRaises(ValueError):
            make_leaf(np.arange(4))

    def test_multiply_dimensions(self):
        product = multiply(self.A, self.B)
        self.assertIsInstance(product, ProductNode)
        self.assertIs(product.left, self.A)
        self.assertIs(product.right, self.B)
        self.assertEqual(dimensions(product), (3, 5))

    def test_add_dimensions(self):
        total = add(multiply(self.A, self.B), self.C)
        self.assertIsInstance(total, SumNode)
        self.assertEqual(dimensions(total), (3, 5))

    def test_multiply_incompatible_shapes_fails(self):
        """Test that (3,4) * (5,6) raises DimensionMismatch."""
        a = make_leaf(np.zeros((3, 4)))
        b = make_leaf(np.zeros((5, 6)))
        with self.assertRaises(DimensionMismatch) as ctx:
            multiply(a, b)
        self.assertEqual(ctx.exception.left_shape, (3, 4))
        self.assertEqual(ctx.exception.right_shape, (5, 6))
        self.assertIn("3x4", str(ctx.exception))

    def test_add_incompatible_shapes_fails(self):
        with self.assertRaises(DimensionMismatch):
            add(self.A, self.B)
        with self.assertRaises(DimensionMismatch):
            add(self.A, make_leaf(np.zeros((3, 5))))

    def test_non_expression_operands_are_rejected(self):
        with self.assertRaises(TypeError):
            multiply(self.A, np.ones((4, 5)))
        with self.assertRaises(TypeError):
            dimensions(np.ones((4, 5)))

    def test_dimension_invariant_over_random_trees(self):
        """Test that every constructed node's shape follows from its children."""
        rng = np.random.default_rng(0)
        for _ in range(20):
            dims = rng.integers(1, 9, size=5)
            leaves = [make_leaf(np.zeros((dims[i], dims[i + 1]))) for i in range(4)]
            expr = multiply(multiply(leaves[0], leaves[1]), multiply(leaves[2], leaves[3]))
            self.assertEqual(expr.shape, (dims[0], dims[4]))
            self.assertEqual(expr.left.shape, (dims[0], dims[2]))
            self.assertEqual(expr.right.shape, (dims[2], dims[4]))


class TestOperators(unittest.TestCase):
    """Test cases for the @ and + front-end."""

    def setUp(self):
        self.A = make_leaf(np.ones((2, 3)), label="A")
        self.B = make_leaf(np.ones((3, 2)), label="B")
        self.C = make_leaf(np.ones((2, 2)), label="C")

    def test_matmul_operator_builds_product(self):
        expr = self.A @ self.B
        self.assertIsInstance(expr, ProductNode)
        self.assertEqual(expr.shape, (2, 2))

    def test_add_operator_builds_sum(self):
        expr = self.A @ self.B + self.C
        self.assertIsInstance(expr, SumNode)
        self.assertIsInstance(expr.left, ProductNode)

    def test_operators_check_dimensions(self):
        with self.assertRaises(DimensionMismatch):
            self.A @ self.A
        with self.assertRaises(DimensionMismatch):
            self.A + self.B

    def test_operators_refuse_raw_arrays_and_scalars(self):
        with self.assertRaises(TypeError):
            self.A @ np.ones((3, 2))
        with self.assertRaises(TypeError):
            np.ones((2, 2)) @ self.A
        with self.assertRaises(TypeError):
            self.C + 1


class TestRender(unittest.TestCase):
    """Test cases for render() and repr()."""

    def setUp(self):
        self.A = make_leaf(np.ones((2, 3)), label="A")
        self.B = make_leaf(np.ones((3, 2)), label="B")
        self.C = make_leaf(np.ones((2, 2)), label="C")

    def test_render_leaf(self):
        self.assertEqual(render(self.A), "[A]")

    def test_render_product(self):
        self.assertEqual(render(self.A @ self.B), "([A] * [B])")

    def test_render_nested(self):
        expr = (self.A @ self.B) @ self.C + self.C
        self.assertEqual(render(expr), "((([A] * [B]) * [C]) + [C])")
        self.assertEqual(str(expr), render(expr))

    def test_render_is_deterministic(self):
        D = make_leaf(np.ones((2, 3)), label="D")
        expr = self.A @ (self.B @ self.C @ D)
        self.assertEqual(render(expr), render(expr))

    def test_render_rejects_unknown_objects(self):
        with self.assertRaises(TypeError):
            render("A")

    def test_repr_is_nested(self):
        text = repr(self.A @ self.B)
        self.assertTrue(text.startswith("ProductNode(left=LeafNode(label='A'"))


class TestImmutability(unittest.TestCase):
    """Test cases for immutability of built trees."""

    def setUp(self):
        self.A = make_leaf(np.ones((2, 3)), label="A")
        self.B = make_leaf(np.ones((3, 2)), label="B")

    def test_attributes_cannot_be_assigned(self):
        expr = self.A @ self.B
        with self.assertRaises(AttributeError):
            expr.left = self.B
        with self.assertRaises(AttributeError):
            expr._rows = 10
        with self.assertRaises(AttributeError):
            self.A.label = "Z"
        with self.assertRaises(AttributeError):
            del self.A.matrix

    def test_leaf_matrix_is_read_only(self):
        with self.assertRaises(ValueError):
            self.A.matrix[0, 0] = 2.0

    def test_all_nodes_are_matrix_expressions(self):
        for node in [self.A, self.A @ self.B, self.A + self.A]:
            self.assertIsInstance(node, MatrixExpr)


class TestCountChainOperands(unittest.TestCase):

    def test_counts_only_through_products(self):
        A = make_leaf(np.ones((2, 2)), label="A")
        self.assertEqual(count_chain_operands(A), 1)
        self.assertEqual(count_chain_operands(A @ A @ A), 3)
        self.assertEqual(count_chain_operands((A @ A) @ (A @ A)), 4)
        self.assertEqual(count_chain_operands(A @ (A + A) @ A), 3)
        self.assertEqual(count_chain_operands(A @ A + A), 1)


if __name__ == '__main__':
    unittest.main()
