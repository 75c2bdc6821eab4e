from typing import Iterable, Mapping, Tuple, Union

from recycleme.core.models import BinGroups

GRID_UNITS = 12


def group_by_bin(throw_away: Union[Mapping[str, str], Iterable[Tuple[str, str]]]) -> BinGroups:
    """
    Turns material -> bin into bin -> [materials].

    Bins keep the order in which they are first seen, materials keep
    iteration order. Nothing is sorted or deduplicated.
    """
    pairs = throw_away.items() if isinstance(throw_away, Mapping) else throw_away

    bins: BinGroups = {}
    for material, bin_label in pairs:
        bins.setdefault(bin_label, []).append(material)
    return bins


def column_width(bin_count: int) -> int:
    """Width of one bin column on a 12-unit grid."""
    if bin_count <= 0:
        raise ValueError(f"bin_count must be positive, got {bin_count}")
    return GRID_UNITS // bin_count
