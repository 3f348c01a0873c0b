from .dataclass import base_dataclass
from .hash import HASH_FUNCTIONS, get_hash_function, slot_index, words_to_hash, xxhash
from .values import as_value_array, resolve_value_dtype, to_uint32_words

__all__ = [
    "base_dataclass",
    "HASH_FUNCTIONS",
    "get_hash_function",
    "slot_index",
    "words_to_hash",
    "xxhash",
    "as_value_array",
    "resolve_value_dtype",
    "to_uint32_words",
]
