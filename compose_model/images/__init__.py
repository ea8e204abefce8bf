#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Services images references.
"""

from __future__ import annotations

import re

DEFAULT_TAG = "latest"
DIGEST_RE = re.compile(r"^(?P<repository>[^@]+)@(?P<digest>[A-Za-z0-9_+.-]+:[A-Fa-f0-9]+)$")


class Image:
    """
    Parsed image reference

    :ivar str repository: the image repository, including the registry
    :ivar str tag:
    :ivar str digest:
    """

    def __init__(self, repository: str = "", tag: str = None, digest: str = None):
        self.repository = repository
        self.tag = tag
        self.digest = digest

    def __str__(self):
        if not self.repository:
            return ""
        if self.digest:
            return f"{self.repository}@{self.digest}"
        return f"{self.repository}:{self.tag or DEFAULT_TAG}"

    def __repr__(self):
        return f"Image({self})"

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __bool__(self):
        return bool(self.repository)

    @property
    def registry(self) -> str:
        """Registry host, when the first path segment looks like one"""
        parts = self.repository.split(r"/", 1)
        if len(parts) == 2 and (
            r"." in parts[0] or r":" in parts[0] or parts[0] == "localhost"
        ):
            return parts[0]
        return ""

    @property
    def name(self) -> str:
        return self.repository.split(r"/")[-1]


def parse_image_name(image: str) -> Image:
    """
    Parses an image reference into repository, tag and digest. No tag means latest.

    >>> str(parse_image_name("nginx"))
    'nginx:latest'
    >>> str(parse_image_name("registry.local:5000/app"))
    'registry.local:5000/app:latest'

    :param str image: the raw image reference
    :rtype: Image
    """
    if not image or not image.strip():
        return Image()
    image = image.strip()
    digest_match = DIGEST_RE.match(image)
    if digest_match:
        repository = digest_match.group("repository")
        tag = None
        last_segment = repository.split(r"/")[-1]
        if r":" in last_segment:
            repository, tag = repository.rsplit(r":", 1)
        return Image(repository, tag, digest_match.group("digest"))
    last_segment = image.split(r"/")[-1]
    if r":" in last_segment:
        repository, tag = image.rsplit(r":", 1)
        return Image(repository, tag or DEFAULT_TAG)
    return Image(image, DEFAULT_TAG)
