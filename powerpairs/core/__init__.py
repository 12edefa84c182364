"""Core data types: powers of two, pairs, triplets and number sets."""

from .powers import PowerPair, PowerTable, PowerTriplet, is_power_of_two, is_power_of_two_array
from .number_set import NumberSet
from .combinations import iter_combinations, iter_prefixes, next_combination
from .triplets import generate_power_triplets
from .seeds import simple_number_set

__all__ = [
    "PowerPair",
    "PowerTable",
    "PowerTriplet",
    "is_power_of_two",
    "is_power_of_two_array",
    "NumberSet",
    "iter_combinations",
    "iter_prefixes",
    "next_combination",
    "generate_power_triplets",
    "simple_number_set",
]
