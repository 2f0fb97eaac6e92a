"""Schema-directed graph lens."""

__all__ = [
    "Binding",
    "MapExtension",
    "Generator",
    "generate_from",
    "PathBuilder",
    "NodeGenerator",
    "PathSegment",
    "RootSegment",
    "Path",
]

from .segments import NodeGenerator, Path, PathSegment, RootSegment
from .walker import PathBuilder
from .generator import Generator, generate_from
from .collector import Binding, MapExtension
