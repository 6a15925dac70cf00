from .zone import Point, Zone, ZoneError
from .snapshot import Snapshot
from .template import (
    DEFAULT_THRESHOLD,
    Template,
    MatchResult,
    LocationStrategy,
    TemplateMatchingStrategy,
    SquaredDifferenceStrategy,
)
from .diff import DiffResult, IncomparableSnapshots, diff_snapshots
from .utils import ImageLike, load_image, to_gray, crop

__all__ = [
    "Point",
    "Zone",
    "ZoneError",
    "Snapshot",
    "DEFAULT_THRESHOLD",
    "Template",
    "MatchResult",
    "LocationStrategy",
    "TemplateMatchingStrategy",
    "SquaredDifferenceStrategy",
    "DiffResult",
    "IncomparableSnapshots",
    "diff_snapshots",
    "ImageLike",
    "load_image",
    "to_gray",
    "crop",
]
