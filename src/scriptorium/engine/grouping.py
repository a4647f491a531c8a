"""Category grouping for the index page."""

from collections.abc import Iterable

from scriptorium.core.types import Document


def group_by_category(documents: Iterable[Document]) -> dict[str, list[Document]]:
    """Partition ``documents`` by category, each group sorted by title.

    Keys are the categories actually present, in sorted order. Documents with
    equal titles keep their input order.
    """
    groups: dict[str, list[Document]] = {}
    for doc in documents:
        groups.setdefault(doc.metadata.category, []).append(doc)

    return {
        category: sorted(groups[category], key=lambda doc: doc.metadata.title)
        for category in sorted(groups)
    }
