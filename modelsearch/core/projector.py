from typing import Any, Dict, Iterable, List, Mapping, Optional

from .computed import ComputedField
from .entity import MISSING, EntityNode, Many, Single
from .field_tree import FieldTree
from .locales import LocaleSet
from .translatable import decode_translations, is_translatable

Document = Dict[str, Any]


class DocumentProjector:
    """
    Projects a live entity graph onto a flat search document.

    Walks the field tree together with the entity:
    - plain leaves are copied under their dotted path
    - translatable leaves expand into one ``path_locale`` key per locale
    - single relations are flattened under ``relation.``
    - one-to-many relations are space-joined per key, in entity order
    """

    def __init__(
        self,
        fields: FieldTree,
        translatable: Optional[FieldTree] = None,
        locales: Optional[LocaleSet] = None,
        computed_fields: Optional[Mapping[str, ComputedField]] = None,
    ):
        self.fields = fields
        self.translatable = translatable or FieldTree()
        self.locales = locales or LocaleSet.of(["en"])
        self.computed_fields = dict(computed_fields or {})

    def project(self, entity: EntityNode) -> Document:
        """Build the document for one entity; never mutates the entity."""
        document = self._project(entity, self.fields, "")
        for name, computed in self.computed_fields.items():
            document[name] = computed.compute(document, entity)
        return document

    def _project(self, entity: EntityNode, fields: FieldTree, prefix: str) -> Document:
        document: Document = {}

        for leaf in fields.leaves:
            path = f"{prefix}{leaf}"
            if is_translatable(path, self.translatable):
                self._project_translatable(entity, leaf, path, document)
                continue
            value = entity.get_attribute(leaf)
            if value is not MISSING:
                document[path] = value

        for name, subtree in fields.children.items():
            relation = entity.get_relation(name)
            child_prefix = f"{prefix}{name}."
            if isinstance(relation, Single):
                document.update(self._project(relation.entity, subtree, child_prefix))
            elif isinstance(relation, Many):
                members = [self._project(member, subtree, child_prefix) for member in relation.entities]
                document.update(aggregate_documents(members))

        return document

    def _project_translatable(self, entity: EntityNode, leaf: str, path: str, document: Document) -> None:
        raw = entity.get_raw_attribute(leaf)
        if raw is MISSING:
            return

        translations = decode_translations(raw)
        if translations is None:
            document[path] = raw
            return

        for locale in self.locales.codes:
            value = translations.get(locale)
            if value is not None:
                document[f"{path}_{locale}"] = value


def aggregate_documents(documents: Iterable[Document]) -> Document:
    """Merge sibling sub-documents by space-joining each key's values in order."""
    values: Dict[str, List[str]] = {}
    for document in documents:
        for key, value in document.items():
            if value is None:
                continue
            values.setdefault(key, []).append(str(value))
    return {key: " ".join(parts) for key, parts in values.items()}


def project(
    entity: EntityNode,
    fields: FieldTree,
    translatable: Optional[FieldTree] = None,
    locales: Optional[LocaleSet] = None,
) -> Document:
    return DocumentProjector(fields, translatable, locales).project(entity)
