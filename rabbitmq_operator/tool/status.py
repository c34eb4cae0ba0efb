"""Rabbitmq-operator status action."""

from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
import logging
import pathlib
import sys
from typing import cast

from rabbitmq_operator.manifest import read_objects
from rabbitmq_operator.status import ObservedChildren, cluster_available_condition

from .format import PrintFormatter, struct_formatter

_LOGGER = logging.getLogger(__name__)


class StatusAction:
    """Rabbitmq-operator status action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "status",
                help="Evaluate the ClusterAvailable condition",
                description="""Evaluate the ClusterAvailable condition from the
                    child objects of a cluster observed in a YAML file. The
                    condition is Unknown when the file has no Endpoints object.""",
            ),
        )
        args.add_argument(
            "path", type=pathlib.Path, help="Path to a file with observed objects"
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml", "json"],
            default="table",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        path: pathlib.Path,
        output: str = "table",
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        objects = await read_objects(path)
        observed = ObservedChildren.from_objects(objects)
        if observed.endpoints is None:
            _LOGGER.debug("No Endpoints object found in %s", path)
        condition = cluster_available_condition(observed)
        data = [condition.to_dict()]
        if output == "table":
            PrintFormatter(keys=["type", "status", "reason", "message"]).print(
                data, file=sys.stdout
            )
            return
        struct_formatter(output).print(data, file=sys.stdout)
