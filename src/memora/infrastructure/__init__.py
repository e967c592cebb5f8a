# Infrastructure Package
from .json_store import JsonFileStore, generate_id

__all__ = ["JsonFileStore", "generate_id"]
