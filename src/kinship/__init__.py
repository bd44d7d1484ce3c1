"""Genealogy kinship inference.

Discovers relatives over stored parent/child/spouse/sibling relationships,
finds shortest connecting paths and names the relation they imply.
"""

__version__ = "0.1.0"

# Lazy imports keep `import kinship` cheap for the CLI
def __getattr__(name: str):
    if name == "graph":
        from kinship import graph
        return graph
    if name == "KinshipEngine":
        from kinship.graph import KinshipEngine
        return KinshipEngine
    if name == "KinshipConfig":
        from kinship.config import KinshipConfig
        return KinshipConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
