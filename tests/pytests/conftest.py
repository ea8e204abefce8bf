#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import fixture

from compose_model.exceptions import ImageInspectionError
from compose_model.images.docker_inspect import ImageMetadata


class FakeInspector:
    """Returns the metadata set per image reference, and records the calls"""

    def __init__(self, images: dict = None, failing: list = None):
        self.images = images or {}
        self.failing = failing or []
        self.calls = []

    def inspect(self, image_reference: str) -> ImageMetadata:
        self.calls.append(image_reference)
        if image_reference in self.failing:
            raise ImageInspectionError(
                f"Failed to pull {image_reference}", image_reference
            )
        return self.images.get(image_reference, ImageMetadata())


@fixture
def inspector():
    return FakeInspector()


@fixture
def web_compose():
    return """
services:
  web:
    image: nginx:1.25
    command: nginx -g "daemon off;"
    ports:
      - "8080"
      - "53:53/udp"
    volumes:
      - /data
      - ./conf:/etc/nginx/conf.d:ro
    environment:
      X: "1"
      DEBUG: "true"
    links:
      - c
      - d:alias
    depends_on:
      - a
      - b
    mem_limit: 512m
"""


@fixture
def inspector_factory():
    return FakeInspector
