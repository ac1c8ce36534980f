"""
Version resolution for the core repository.

Picks the tag to update to from the tags listed on the remote:

1. If there is any release tag (``vX.Y.Z``), the greatest release wins.
2. Otherwise the greatest release candidate (``vX.Y.Z-rc.N``).
3. Otherwise the greatest beta (``vX.Y.Z-beta.N``).
4. Otherwise nothing.

Channel priority beats recency: ``v1.2.0`` is chosen over ``v1.3.0-rc.1``.
"""

from typing import Dict, Iterable, List, Optional

from ..domain.version import Channel, VersionTag


def classify_tags(tags: Iterable[str]) -> Dict[Channel, List[VersionTag]]:
    """
    Group tag names by channel, dropping names that are not version tags.

    Returns:
        Mapping with an entry (possibly empty) for every channel
    """
    grouped: Dict[Channel, List[VersionTag]] = {channel: [] for channel in Channel}
    for name in tags:
        tag = VersionTag.parse(name)
        if tag is not None:
            grouped[tag.channel].append(tag)
    return grouped


def resolve_latest(tags: Iterable[str]) -> Optional[VersionTag]:
    """
    Select the best tag to adopt.

    Args:
        tags: Tag names as listed on the remote

    Returns:
        The chosen VersionTag, or None if no name matched the grammar
    """
    grouped = classify_tags(tags)
    for channel in sorted(Channel, key=lambda c: c.priority):
        candidates = grouped[channel]
        if candidates:
            return max(candidates, key=lambda t: t.numbers)
    return None
