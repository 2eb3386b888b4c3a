from .config import MissingFragmentBehavior, ResolverConfig, ResolverSettings
from .context import EvaluationContext
from .evaluator import evaluate
from .exceptions import CircularDependencyError, FragmentNotFoundError, FragmentsError, InvalidKeyError, LoaderError
from .loader import load_fragments
from .nodes import iter_references
from .parser import FragmentParser
from .resolver import Resolver
from .tracker import DependencyTracker

__all__ = [
    "Resolver",
    "ResolverConfig",
    "ResolverSettings",
    "MissingFragmentBehavior",
    "FragmentParser",
    "DependencyTracker",
    "EvaluationContext",
    "evaluate",
    "iter_references",
    "load_fragments",
    "FragmentsError",
    "FragmentNotFoundError",
    "CircularDependencyError",
    "InvalidKeyError",
    "LoaderError",
]
