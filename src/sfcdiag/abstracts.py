"""Base classes of the states and models of the surface diagnostics."""

from abc import abstractmethod
from typing import Generic, TypeVar

from flax import nnx
from simple_pytree import Pytree


class AbstractState(Pytree):
    """Base class of every state bundle: a pytree with an immutable `replace`."""


StateT = TypeVar("StateT", bound=AbstractState)


class AbstractModel(nnx.Module, Generic[StateT]):
    """Base class of models holding run options and mapping states to a result."""

    @abstractmethod
    def run(self, *args, **kwargs) -> StateT:
        raise NotImplementedError
