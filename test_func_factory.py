import numpy as np
import pytest

from aad_lift import (
    ConfigurationError,
    derivative,
    is_lifted,
    lift,
    lift_binary_function,
    nary_get_parents,
    new_binary_function,
    new_function,
    new_unary_function,
    reverse,
)
from aad_lift.core.node import BinaryNode, NaryNode, UnaryNode


def _square():
    def backward(out, p):
        p.accumulate(2.0 * p.x * out.dx)
    return new_unary_function(output_kind='scalar', name='test.square',
                              forward=lambda x: x * x, backward=backward)


def _scaled_diff():
    # f(x, y) = 3x - 2y
    calls = []

    def backward1(out, x, y):
        calls.append(('b1', type(y).__name__))
        x.accumulate(3.0 * out.dx)

    def backward2(out, x, y):
        calls.append(('b2', type(x).__name__))
        y.accumulate(-2.0 * out.dx)

    fn = new_binary_function(output_kind='scalar', name='test.scaled_diff',
                             forward=lambda x, y: 3.0 * x - 2.0 * y,
                             backward1=backward1, backward2=backward2)
    return fn, calls


@pytest.mark.parametrize("bad_kind", ["number", "Tensor", None, 3])
def test_invalid_output_kind_fails_at_registration(bad_kind):
    with pytest.raises(ConfigurationError):
        new_unary_function(output_kind=bad_kind, name='bad',
                           forward=lambda x: x, backward=lambda out, p: None)
    with pytest.raises(ConfigurationError):
        new_binary_function(output_kind=bad_kind, name='bad', forward=lambda x, y: x,
                            backward1=None, backward2=None)
    with pytest.raises(ConfigurationError):
        new_function(output_kind=bad_kind, name='bad', forward=lambda: 0,
                     backward=lambda out: None)


def test_unary_constant_folds():
    square = _square()
    assert square(3.0) == 9.0
    assert not is_lifted(square(3.0))


def test_unary_builds_node_and_differentiates():
    square = _square()
    x = lift(3.0)
    y = square(x)
    assert isinstance(y, UnaryNode)
    assert y.x == 9.0 and y.op_name == 'test.square'
    reverse(y)
    assert derivative(x) == 6.0


def test_binary_both_lifted():
    fn, calls = _scaled_diff()
    x, y = lift(1.0), lift(2.0)
    z = fn(x, y)
    assert isinstance(z, BinaryNode)
    assert z.parents == (x, y)
    reverse(z)
    assert derivative(x) == 3.0
    assert derivative(y) == -2.0
    # each formula sees the other side's raw value, never a node
    assert calls == [('b1', 'float'), ('b2', 'float')]


def test_binary_only_first_lifted():
    fn, calls = _scaled_diff()
    x = lift(1.0)
    z = fn(x, 2.0)
    assert isinstance(z, UnaryNode) and z.parent is x
    assert z.x == -1.0
    reverse(z)
    assert derivative(x) == 3.0
    assert calls == [('b1', 'float')]


def test_binary_only_second_lifted():
    fn, calls = _scaled_diff()
    y = lift(2.0)
    z = fn(1.0, y)
    assert isinstance(z, UnaryNode) and z.parent is y
    reverse(z)
    assert derivative(y) == -2.0
    assert calls == [('b2', 'float')]


def test_binary_constant_folds():
    fn, calls = _scaled_diff()
    assert fn(1.0, 2.0) == -1.0
    assert calls == []


def _product():
    def forward(*args):
        result = 1.0
        for a in args:
            result *= a.x if is_lifted(a) else a
        return result

    def backward(out, *args):
        for i, a in enumerate(args):
            if is_lifted(a):
                others = 1.0
                for j, b in enumerate(args):
                    if j != i:
                        others *= b.x if is_lifted(b) else b
                a.accumulate(others * out.dx)

    return new_function(output_kind='scalar', name='test.product',
                        forward=forward, backward=backward,
                        get_parents=nary_get_parents)


def test_nary_node_shape_follows_lifted_count():
    prod = _product()
    a, b, c = lift(2.0), lift(3.0), lift(4.0)
    assert prod(1.0, 2.0) == 2.0
    assert isinstance(prod(a, 5.0), UnaryNode)
    assert isinstance(prod(a, 5.0, b), BinaryNode)
    assert isinstance(prod(a, b, c), NaryNode)


def test_nary_backward_sees_all_arguments():
    prod = _product()
    a, b = lift(2.0), lift(3.0)
    z = prod(a, 5.0, b)
    assert z.x == 30.0
    reverse(z)
    assert derivative(a) == 15.0
    assert derivative(b) == 10.0


def test_nary_get_parents_accepts_list_or_varargs():
    a, b = lift(1.0), lift(2.0)
    assert nary_get_parents(a, 3.0, b) == [a, b]
    assert nary_get_parents([a, 3.0, b]) == [a, b]
    assert nary_get_parents((3.0,)) == []


def test_tensor_output_kind():
    def backward(out, p):
        p.accumulate(out.dx * 2.0)

    double = new_unary_function(output_kind='tensor', name='test.double',
                                forward=lambda x: np.multiply(x, 2.0), backward=backward)
    t = lift(np.array([1.0, -1.0]))
    y = double(t)
    np.testing.assert_array_equal(y.x, [2.0, -2.0])
    reverse(y, seed=np.array([1.0, 0.5]))
    np.testing.assert_array_equal(derivative(t), [2.0, 1.0])


def test_lift_binary_function_unwraps_nodes():
    gt = lift_binary_function(lambda x, y: x > y)
    assert gt(lift(2.0), 1.0) is True
    assert gt(1.0, lift(2.0)) is False
