#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for compose-model
"""


class ComposeModelException(Exception):
    """
    Top class for Compose Model Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)

    @property
    def message(self) -> str:
        return str(self.args[0])


class ManifestDecodeError(ComposeModelException):
    """
    Exception when the compose content cannot be decoded into services definitions
    """


class ImageInspectionError(ComposeModelException):
    """
    Exception when a service image could not be pulled or inspected
    """

    def __init__(self, msg, image_reference: str = None, *args):
        super().__init__(msg, *args)
        self.image_reference = image_reference
