"""
Version tag domain object for devbase.

Release tags of the core repository follow a small grammar:
- Release:            v1.4.0
- Release candidate:  v1.4.0-rc.2
- Beta:               v1.4.0-beta.3

Anything else (``latest``, ``1.4.0``, ``v1.4``, ``v1.4.0-alpha.1``) is not a
version tag. The channel is taken from the suffix text only.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


TAG_PATTERN = re.compile(
    r'^v(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)'
    r'(?:-(?P<channel>rc|beta)\.(?P<pre>\d+))?$'
)


class Channel(Enum):
    """Stability channel of a tag, highest priority first."""
    RELEASE = "release"
    RC = "rc"
    BETA = "beta"

    @property
    def priority(self) -> int:
        """Lower is preferred."""
        return _CHANNEL_PRIORITY[self]


_CHANNEL_PRIORITY = {
    Channel.RELEASE: 0,
    Channel.RC: 1,
    Channel.BETA: 2,
}


@dataclass(frozen=True)
class VersionTag:
    """
    A tag that matched the release grammar.

    Attributes:
        raw: Tag name exactly as listed on the remote
        channel: release, rc or beta
        numbers: (major, minor, patch) for releases,
                 (major, minor, patch, N) for rc/beta
    """

    raw: str
    channel: Channel
    numbers: Tuple[int, ...]

    @classmethod
    def parse(cls, tag: str) -> Optional['VersionTag']:
        """
        Parse a tag name.

        Returns:
            VersionTag, or None when the name is not a version tag
        """
        if not isinstance(tag, str):
            return None
        match = TAG_PATTERN.match(tag.strip())
        if not match:
            return None

        numbers = (
            int(match.group('major')),
            int(match.group('minor')),
            int(match.group('patch')),
        )
        suffix = match.group('channel')
        if suffix is None:
            return cls(raw=tag.strip(), channel=Channel.RELEASE, numbers=numbers)

        channel = Channel.RC if suffix == 'rc' else Channel.BETA
        return cls(raw=tag.strip(), channel=channel, numbers=numbers + (int(match.group('pre')),))

    @property
    def is_prerelease(self) -> bool:
        return self.channel is not Channel.RELEASE

    def __str__(self) -> str:
        return self.raw
