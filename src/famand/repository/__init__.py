from .json_store import JsonGameRepository

__all__ = ["JsonGameRepository"]
