"""Major-line ref tracking: classify an event, resolve versions, move refs."""

from .engine import DecisionEngine
from .errors import TaggerError
from .event import Event, EventVariant, RawEvent, classify, load_event
from .model import LatestState, MutationResult, Namespace, Preferences, RefRecord
from .mutator import RefMutator, StoreRefMutator
from .resolver import LatestResolver, LinearLatestResolver
from .scanner import RefScanner, StoreRefScanner
from .semver import SemVer, SemVerParser, VersionParser, parse_version

__all__ = [
    "DecisionEngine",
    "Event",
    "EventVariant",
    "LatestResolver",
    "LatestState",
    "LinearLatestResolver",
    "MutationResult",
    "Namespace",
    "Preferences",
    "RawEvent",
    "RefMutator",
    "RefRecord",
    "RefScanner",
    "SemVer",
    "SemVerParser",
    "StoreRefMutator",
    "StoreRefScanner",
    "TaggerError",
    "VersionParser",
    "classify",
    "load_event",
    "parse_version",
]
