# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "autohide"

TREE: Final[str] = f"{ROOT}:tree"
CHILDREN: Final[str] = f"{TREE}:children"  # one sorted set per directory
STATUSES: Final[str] = f"{TREE}:status"  # name -> MetricStatus, absent means SIMPLE
LOADED: Final[str] = f"{TREE}:loaded"
