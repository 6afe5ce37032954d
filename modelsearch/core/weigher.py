from typing import List, NamedTuple

from .field_tree import BoostTree, FieldTree, walk_leaves
from .locales import LocaleSet
from .translatable import is_translatable


class WeightedField(NamedTuple):
    path: str
    weight: float

    def to_query_field(self) -> str:
        """Field in ``multi_match`` notation, e.g. ``title_en^3``."""
        return f"{self.path}^{self.weight:g}"


WeightedFieldList = List[WeightedField]


def build_weighted_fields(
    fields: FieldTree,
    translatable: FieldTree,
    boosts: BoostTree,
    locales: LocaleSet,
) -> WeightedFieldList:
    """Weighted, locale-expanded query fields, breadth-first in configuration order.

    Boost weights are looked up at the unexpanded path, so every locale of a
    translatable field shares its field's weight.
    """
    weighted: WeightedFieldList = []
    seen = set()
    for path, _ in walk_leaves(fields):
        weight = boosts.weight_for(path)
        if is_translatable(path, translatable):
            paths = [f"{path}_{locale}" for locale in locales.codes]
        else:
            paths = [path]
        for field_path in paths:
            if field_path not in seen:
                seen.add(field_path)
                weighted.append(WeightedField(field_path, weight))
    return weighted
