"""
Parameter update rules.

- `SGDParameter`  : plain gradient descent
- `AdamParameter` : Adam without bias correction
- `sgd`, `adam`   : factories building uniformly initialized parameters
"""

from ._sgd import SGDParameter
from ._adam import AdamParameter
from ._factories import ParameterFactory, adam, init_uniform, sgd

__all__ = [
    SGDParameter.__name__,
    AdamParameter.__name__,
    "ParameterFactory",
    adam.__name__,
    init_uniform.__name__,
    sgd.__name__,
]
