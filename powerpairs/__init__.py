"""Power-of-two pairs - search for integer sets with many power-of-two pair sums."""

__version__ = "0.1.0"
__author__ = "Rohan Vinaik"
__email__ = "rohanpvinaik@gmail.com"

from .core.number_set import NumberSet
from .core.powers import PowerPair, PowerTable, PowerTriplet, is_power_of_two
from .config import SearchConfig
from .search import PowerPairSearch, SearchResult

__all__ = [
    "NumberSet",
    "PowerPair",
    "PowerTable",
    "PowerTriplet",
    "is_power_of_two",
    "SearchConfig",
    "PowerPairSearch",
    "SearchResult",
    "__version__",
]
