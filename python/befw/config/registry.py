"""
Registry of structural food-web models.

Structural models (niche, cascade, ...) are looked up by name so that
configuration files and ``FoodWeb.from_model`` can refer to them.

Example:
    >>> from befw.config.registry import model_registry, register_model
    >>>
    >>> @register_model("chain")
    >>> def chain_model(S, C, rng):
    ...     ...
    >>>
    >>> model_registry.get("chain")
    <function chain_model at ...>
"""

from __future__ import annotations

from collections.abc import Callable

from .exceptions import ModelNotFoundError

__all__ = ["ModelRegistry", "model_registry", "register_model"]


class ModelRegistry:
    """
    Registry mapping model names to adjacency-matrix samplers.

    A sampler is a callable ``(S, C, rng) -> numpy.ndarray`` returning an
    S x S binary matrix where entry ``[i, j]`` is 1 if species i eats j.
    """

    def __init__(self) -> None:
        self._registry: dict[str, Callable] = {}

    def register(self, name: str, sampler: Callable) -> None:
        """
        Register a sampler by name.

        Raises
        ------
        ValueError
            If the name is already registered with a different sampler.
        """
        if name in self._registry and self._registry[name] is not sampler:
            msg = (
                f"Food-web model '{name}' is already registered "
                "with a different sampler"
            )
            raise ValueError(msg)
        self._registry[name] = sampler

    def get(self, name: str) -> Callable:
        """
        Get a sampler by name.

        Raises
        ------
        ModelNotFoundError
            If the model is not registered.
        """
        if name not in self._registry:
            raise ModelNotFoundError(name, self.list())
        return self._registry[name]

    def list(self) -> list[str]:
        """Sorted list of registered model names."""
        return sorted(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        """Check if a model is registered."""
        return name in self._registry


model_registry = ModelRegistry()


def register_model(name: str) -> Callable[[Callable], Callable]:
    """
    Register a structural model sampler via decorator.

    Parameters
    ----------
    name
        Model name to register.

    Returns
    -------
    Callable[[Callable], Callable]
        Decorator that registers the sampler and returns it unchanged.
    """

    def decorator(func: Callable) -> Callable:
        model_registry.register(name, func)
        return func

    return decorator
