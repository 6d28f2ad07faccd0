from buildview.db.fixtures import seed_demo
from buildview.db.memory import InMemoryStore

__all__ = [
    "InMemoryStore",
    "seed_demo",
]
