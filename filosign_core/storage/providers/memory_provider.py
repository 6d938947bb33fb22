from typing import Dict, Optional
from filosign_core.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    name = "memory"

    def __init__(self):
        self.values: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str):
        self.values[key] = value

    def delete(self, key: str):
        self.values.pop(key, None)
