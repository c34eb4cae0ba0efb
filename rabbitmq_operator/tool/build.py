"""Rabbitmq-operator build action."""

from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
import logging
import pathlib
from typing import cast

from rabbitmq_operator.exceptions import InputException
from rabbitmq_operator.manifest import RabbitmqCluster, read_objects
from rabbitmq_operator.resource import (
    build_server_config,
    server_config_map,
    write_server_config,
)

from .format import struct_formatter

_LOGGER = logging.getLogger(__name__)


class BuildAction:
    """Rabbitmq-operator build action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "build",
                help="Build the server configuration of a RabbitmqCluster",
                description="""Render the server configuration ConfigMap for the
                    first RabbitmqCluster object in a YAML file, or write the
                    configuration files into a directory.""",
            ),
        )
        args.add_argument(
            "path", type=pathlib.Path, help="Path to a file with a RabbitmqCluster"
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["yaml", "json"],
            default="yaml",
            help="Output format of the ConfigMap",
        )
        args.add_argument(
            "--output-file",
            type=str,
            default="/dev/stdout",
            help="Output file for the results of the command",
        )
        args.add_argument(
            "--output-dir",
            type=pathlib.Path,
            default=None,
            help="Write the configuration files into this directory instead",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        path: pathlib.Path,
        output: str = "yaml",
        output_file: str = "/dev/stdout",
        output_dir: pathlib.Path | None = None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        objects = await read_objects(path)
        cluster = next(
            (obj for obj in objects if isinstance(obj, RabbitmqCluster)), None
        )
        if cluster is None:
            raise InputException(f"No RabbitmqCluster found in {path}")
        _LOGGER.debug("Building server configuration for %s", cluster.resource_id)

        if output_dir is not None:
            if not output_dir.is_dir():
                raise InputException(f"Output directory {output_dir} does not exist")
            changed = await write_server_config(
                output_dir, build_server_config(cluster)
            )
            if changed:
                _LOGGER.info("Updated %s in %s", ", ".join(changed), output_dir)
            else:
                _LOGGER.info("Server configuration in %s is up to date", output_dir)
            return

        config_map = server_config_map(cluster)
        with open(output_file, "w") as file:
            struct_formatter(output).print([config_map.to_doc()], file=file)
