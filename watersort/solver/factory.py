"""
Strategy Factory Module - Name-keyed registry of search strategies.
"""

from typing import Any, Dict, List, Type

from .base import SolverStrategy


# Registered strategies by name
_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

DEFAULT_STRATEGY = "bucket"


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator adding a strategy to the registry under cls.name.

    Usage:
        @register_strategy
        class IterativeDeepening(SolverStrategy):
            name = "iddfs"
            ...

    Raises:
        ValueError: If another class already uses the name
    """
    existing = _STRATEGIES.get(cls.name)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"Strategy name '{cls.name}' already registered by {existing.__name__}"
        )
    _STRATEGIES[cls.name] = cls
    return cls


def get_strategy_class(name: str) -> Type[SolverStrategy]:
    """
    Look up a registered strategy class.

    Raises:
        ValueError: If strategy name not found
    """
    try:
        return _STRATEGIES[name]
    except KeyError:
        available = ", ".join(sorted(_STRATEGIES))
        raise ValueError(f"Unknown strategy: {name}. Available: {available}") from None


def create_strategy(name: str, **kwargs: Any) -> SolverStrategy:
    """
    Instantiate a registered strategy.

    Args:
        name: Strategy name ("bucket" or "bfs" for the built-ins)
        **kwargs: Constructor arguments, e.g. seed or max_states

    Returns:
        Strategy instance
    """
    return get_strategy_class(name)(**kwargs)


def get_strategy_names() -> List[str]:
    """Names of all registered strategies, in registration order."""
    return list(_STRATEGIES)


def get_strategy_info() -> List[Dict[str, str]]:
    """
    Describe the registered strategies.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    return [
        {"name": name, "description": cls.description}
        for name, cls in _STRATEGIES.items()
    ]


def get_default_strategy_name() -> str:
    """
    Get the strategy used when settings name none.

    Returns:
        "bucket" when registered, otherwise the first registered name
    """
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    return next(iter(_STRATEGIES), "")
