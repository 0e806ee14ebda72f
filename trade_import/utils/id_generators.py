# trade_import/utils/id_generators.py
import uuid
from typing import Protocol


class IdGenerator(Protocol):
    def new_id(self) -> uuid.UUID:
        ...


class RandomIdGenerator:
    """Default generator, random UUIDs like the persistence layer expects."""

    def new_id(self) -> uuid.UUID:
        return uuid.uuid4()


class SequentialIdGenerator:
    """
    Deterministic UUIDs derived from a namespace and a counter.
    Two generators built with the same namespace yield the same sequence,
    which keeps built trades reproducible in tests and re-imports.
    """

    def __init__(self, namespace: str = "trade-import"):
        self.namespace = uuid.uuid5(uuid.NAMESPACE_URL, namespace)
        self.counter = 0

    def new_id(self) -> uuid.UUID:
        self.counter += 1
        return uuid.uuid5(self.namespace, str(self.counter))
