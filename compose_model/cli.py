# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for compose_model.
"""

import argparse
import json
import sys

import yaml

from compose_model import __version__
from compose_model.common.logging import LOG, set_log_level
from compose_model.common.settings import ComposeModelSettings
from compose_model.images.docker_inspect import DockerImageInspector
from compose_model.parser import DockerComposeParser


def main_parser():
    """
    Console script for compose_model.
    """
    parser = argparse.ArgumentParser()
    cmd_parsers = parser.add_subparsers(
        dest=ComposeModelSettings.command_arg, help="Command to execute."
    )
    base_command_parser = argparse.ArgumentParser(add_help=False)
    base_command_parser.add_argument(
        "-f",
        "--compose-file",
        dest=ComposeModelSettings.input_file_arg,
        required=True,
        help="Path to the Docker compose file. Use - for stdin",
    )
    base_command_parser.add_argument(
        "--format",
        help="Defines the format you want to use.",
        type=str,
        dest=ComposeModelSettings.format_arg,
        choices=ComposeModelSettings.allowed_formats,
        default=ComposeModelSettings.default_format,
    )
    base_command_parser.add_argument(
        "--pull-retries",
        type=int,
        dest=ComposeModelSettings.retries_arg,
        required=False,
        help="How many times to try pulling an image. Defaults to 5",
    )
    base_command_parser.add_argument(
        "--docker-host",
        type=str,
        dest=ComposeModelSettings.docker_host_arg,
        required=False,
        help="Docker engine URL. Defaults to DOCKER_HOST or the local socket",
    )
    base_command_parser.add_argument(
        "--no-interpolate",
        dest=ComposeModelSettings.interpolate_arg,
        action="store_false",
        default=True,
        help="Do not interpolate the environment variables in the compose file",
    )
    base_command_parser.add_argument(
        "--loglevel", type=str, help="Log level. Defaults to INFO", required=False
    )
    for command in ComposeModelSettings.active_commands:
        cmd_parsers.add_parser(
            name=command["name"],
            help=command["help"],
            parents=[base_command_parser],
        )
    for command in ComposeModelSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


def render_services(services: list, output_format: str) -> str:
    content = [service.to_dict() for service in services]
    if output_format == "yaml":
        return yaml.safe_dump(content, default_flow_style=False, sort_keys=False)
    return json.dumps(content, indent=2)


def main(args=None):
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    args = parser.parse_args(args)
    command = getattr(args, ComposeModelSettings.command_arg)
    if not command:
        parser.print_help()
        return 0
    if command == "version":
        print("Compose Model", __version__)
        return 0
    if args.loglevel and not set_log_level(LOG, args.loglevel):
        print(f"Log level value {args.loglevel} is invalid.", file=sys.stderr)
        return 2
    LOG.debug(args)
    try:
        settings = ComposeModelSettings(**vars(args))
        content = settings.read_compose_content()
    except (ValueError, FileNotFoundError) as error:
        LOG.error(error)
        return 2
    compose_parser = DockerComposeParser(
        content,
        DockerImageInspector(settings=settings),
        logger=LOG,
        interpolate=settings.interpolate,
    )
    errors = compose_parser.parse()
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        return 1
    print(render_services(compose_parser.get_service_info(), settings.output_format))
    return 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
