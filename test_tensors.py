import numpy as np
import pytest

from aad_lift import (
    ShapeError,
    derivative,
    is_lifted,
    lift,
    reverse,
    scalar,
    scalars_to_tensor,
    tensor,
    tensor_entry,
    tensor_to_scalars,
)
from aad_lift.core.kind import SCALAR, TENSOR


def test_split_then_merge_round_trip():
    t = lift(np.array([1.5, -2.0, 4.0]))
    parts = tensor_to_scalars(t)
    assert [p.kind for p in parts] == [SCALAR] * 3
    assert [p.x for p in parts] == [1.5, -2.0, 4.0]

    merged = scalars_to_tensor(parts)
    assert merged.kind is TENSOR
    np.testing.assert_array_equal(merged.x, t.x)
    reverse(merged)
    np.testing.assert_array_equal(derivative(t), [1.0, 1.0, 1.0])


def test_scalars_to_tensor_accepts_varargs_and_constants():
    a = lift(2.0)
    out = scalars_to_tensor(a, 3.0, a)
    np.testing.assert_array_equal(out.x, [2.0, 3.0, 2.0])
    reverse(out, seed=np.array([1.0, 10.0, 100.0]))
    assert derivative(a) == 101.0
    raw = scalars_to_tensor([1.0, 2.0])
    assert not is_lifted(raw)
    np.testing.assert_array_equal(raw, [1.0, 2.0])


def test_tensor_entry_uses_flat_index():
    t = lift(np.arange(6.0).reshape(2, 3))
    e = tensor_entry(t, 4)
    assert e.x == 4.0
    reverse(scalar.mul(e, 3.0))
    expected = np.zeros((2, 3))
    expected[1, 1] = 3.0
    np.testing.assert_array_equal(derivative(t), expected)


def test_tensor_entry_out_of_range():
    t = lift(np.ones(3))
    with pytest.raises(ShapeError):
        tensor_entry(t, 3)
    with pytest.raises(ShapeError):
        tensor_entry(lift(1.0), 0)


def test_tensor_entry_on_raw_tensor_folds():
    assert tensor_entry(np.array([5.0, 6.0]), 1) == 6.0


def test_range_forward_and_gradient():
    t = lift(np.arange(5.0))
    r = tensor.range(t, 1, 4)
    np.testing.assert_array_equal(r.x, [1.0, 2.0, 3.0])
    reverse(r, seed=np.array([1.0, 2.0, 3.0]))
    np.testing.assert_array_equal(derivative(t), [0.0, 1.0, 2.0, 3.0, 0.0])


@pytest.mark.parametrize("start,end", [(-1, 2), (3, 2), (0, 6)])
def test_range_rejects_bad_bounds(start, end):
    with pytest.raises(ShapeError):
        tensor.range(lift(np.arange(5.0)), start, end)


def test_split_into_consecutive_pieces():
    t = lift(np.arange(6.0))
    a, b = tensor.split(t, [2, 3])
    np.testing.assert_array_equal(a.x, [0.0, 1.0])
    np.testing.assert_array_equal(b.x, [2.0, 3.0, 4.0])
    out = tensor.concat(tensor.mul(a, 2.0), b)
    reverse(out)
    np.testing.assert_array_equal(derivative(t), [2.0, 2.0, 1.0, 1.0, 1.0, 0.0])


def test_split_lengths_must_fit():
    with pytest.raises(ShapeError):
        tensor.split(lift(np.ones(4)), [2, 3])



def test_concat_gathers_back_into_parent_shapes():
    m = lift(np.ones((2, 2)))
    v = lift(np.array([5.0, 6.0]))
    s = lift(7.0)
    out = tensor.concat([m, v, s, np.array([9.0])])
    np.testing.assert_array_equal(out.x, [1.0, 1.0, 1.0, 1.0, 5.0, 6.0, 7.0, 9.0])
    reverse(out, seed=np.arange(8.0))
    np.testing.assert_array_equal(derivative(m), [[0.0, 1.0], [2.0, 3.0]])
    np.testing.assert_array_equal(derivative(v), [4.0, 5.0])
    assert derivative(s) == 6.0


def test_scalar_sum_list_or_varargs():
    a, b = lift(1.0), lift(2.0)
    assert scalar.sum(a, b, 3.0).x == 6.0
    out = scalar.sum([a, a, b])
    reverse(out)
    assert derivative(a) == 2.0
    assert derivative(b) == 1.0
    assert scalar.sum([]) == 0.0


def test_mvmuladd_forward_and_gradients():
    A0 = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    x0 = np.array([1.0, -1.0, 2.0])
    b0 = np.array([0.5, -0.5])
    A, x, b = lift(A0), lift(x0), lift(b0)
    y = tensor.mvmuladd(A, x, b)
    np.testing.assert_allclose(y.x, A0 @ x0 + b0)

    g = np.array([1.0, 2.0])
    reverse(y, seed=g)
    np.testing.assert_allclose(derivative(A), np.outer(g, x0))
    np.testing.assert_allclose(derivative(x), A0.T @ g)
    np.testing.assert_allclose(derivative(b), g)


def test_mvmuladd_with_constant_matrix():
    A0 = np.eye(2) * 3.0
    x = lift(np.array([1.0, 2.0]))
    y = tensor.mvmuladd(A0, x, np.zeros(2))
    reverse(y)
    np.testing.assert_array_equal(derivative(x), [3.0, 3.0])


def test_mvmuladd_shape_errors():
    A = np.ones((2, 3))
    with pytest.raises(ShapeError, match="input size is 2 but should be 3"):
        tensor.mvmuladd(A, lift(np.ones(2)), np.ones(2))
    with pytest.raises(ShapeError, match="bias size is 3 but should be 2"):
        tensor.mvmuladd(A, lift(np.ones(3)), np.ones(3))
    with pytest.raises(ShapeError):
        tensor.mvmuladd(np.ones(3), np.ones(3), np.ones(3))


def test_entries_of_a_computed_tensor():
    t = lift(np.array([1.0, 2.0]))
    sq = tensor.mul(t, t)
    first, second = tensor_to_scalars(sq)
    reverse(scalar.add(first, scalar.mul(second, 10.0)))
    np.testing.assert_array_equal(derivative(t), [2.0, 40.0])
