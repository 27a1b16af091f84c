# ==============================================
# dvutility
# ==============================================
#
# Package Structure:
#
# dvutility/
# ├── decoding/          # Decode arbitrary JSON into DynamicValue trees
# ├── persistence/       # Store JSON files in durable / cache user dirs
# ├── config.py          # Configuration management
# ├── exceptions.py      # Error hierarchy
# ├── logging_config.py  # Root logging setup
# └── cli.py             # Command line entry point
#
# ==============================================

from .decoding import DynamicValue, DynamicValueDecoder, decode_json
from .persistence import ScopedFileStore, StorageDirectory

__version__ = "0.1.0"

__all__ = [
    "DynamicValue",
    "DynamicValueDecoder",
    "decode_json",
    "ScopedFileStore",
    "StorageDirectory",
]
