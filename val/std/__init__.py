from typing import FrozenSet

from .conversions import populate_conversion_environment
from .lists import populate_list_environment
from .math import populate_math_environment

POPULATORS = (
    populate_math_environment,
    populate_list_environment,
    populate_conversion_environment,
)


def populate_builtins(env) -> None:
    """Register every builtin function and the `e` and `pi` constants on `env`."""
    for populate in POPULATORS:
        populate(env)
    env.add_variable('e', env.numeric.e)
    env.add_variable('pi', env.numeric.pi)


class _NameCollector:
    def __init__(self):
        self.names = set()

    def add_function(self, name: str, function) -> None:
        self.names.add(name)


def builtin_names() -> FrozenSet[str]:
    """Names of the builtin functions, without building an environment."""
    collector = _NameCollector()
    for populate in POPULATORS:
        populate(collector)
    return frozenset(collector.names)
