# aad_lift/ops/transcendental.py
from .arithmetic import _call


def floor(x):    return _call('floor', x)
def ceil(x):     return _call('ceil', x)
def round(x):    return _call('round', x)
def sqrt(x):     return _call('sqrt', x)
def exp(x):      return _call('exp', x)
def log(x):      return _call('log', x)
def abs(x):      return _call('abs', x)
def sin(x):      return _call('sin', x)
def cos(x):      return _call('cos', x)
def tan(x):      return _call('tan', x)
def asin(x):     return _call('asin', x)
def acos(x):     return _call('acos', x)
def atan(x):     return _call('atan', x)
def sinh(x):     return _call('sinh', x)
def cosh(x):     return _call('cosh', x)
def tanh(x):     return _call('tanh', x)
def asinh(x):    return _call('asinh', x)
def acosh(x):    return _call('acosh', x)
def atanh(x):    return _call('atanh', x)
def sigmoid(x):  return _call('sigmoid', x)


def erf(x):
    """
    Error function: erf(x) = (2/sqrt(pi)) * integral_0^x e^(-t^2) dt

    Derivative: d/dx erf(x) = (2/sqrt(pi)) * e^(-x^2)
    """
    return _call('erf', x)


def norm_cdf(x):
    """Standard normal CDF N(x); derivative is the normal pdf phi(x)."""
    return _call('norm_cdf', x)
