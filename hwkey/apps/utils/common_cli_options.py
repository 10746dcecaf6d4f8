#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI helper for Click."""

import logging
import os
from typing import Any, Callable, Optional, TypeVar, Union

import click

from hwkey import __version__ as hwkey_version
from hwkey.exceptions import HWKeyError
from hwkey.ledger.device import DerivationPath

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])
logger = logging.getLogger(__name__)


class DerivationPathType(click.ParamType):
    """Click parameter type for derivation paths, "44,118,0,0,0" or "m/44'/118'/0'/0/0"."""

    name = "path"

    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> DerivationPath:
        """Perform the conversion str -> DerivationPath.

        :param value: Value to convert.
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: Derivation path.
        """
        if isinstance(value, DerivationPath):
            return value
        try:
            return DerivationPath.parse(value)
        except HWKeyError as exc:
            self.fail(str(exc.description), param, ctx)


def hwkey_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(hwkey_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options


def hwkey_path_option(options: FC) -> FC:
    """Derivation path click option.

    Provides: `path: DerivationPath`.

    :return: Click decorator
    """
    return click.option(
        "-p",
        "--path",
        type=DerivationPathType(),
        required=True,
        help="Derivation path of the key, e.g. \"m/44'/118'/0'/0/0\" or \"44,118,0,0,0\".",
    )(options)


def hwkey_config_option(
    required: bool = True,
    help: Optional[str] = None,  # pylint: disable=redefined-builtin
) -> Callable:
    """Click decorator handling config files.

    Provides: `config: str` a full path to config file.

    :param required: Config file is required
    :param help: Customized help message, defaults to None
    :return: Click decorator.
    """

    def decorator(func: Callable[[FC], FC]) -> Callable[[FC], FC]:
        return click.option(
            "-c",
            "--config",
            type=click.Path(resolve_path=True, exists=True, dir_okay=False),
            required=required,
            help=help or "Path to the YAML/JSON configuration file.",
        )(func)

    return decorator


def hwkey_output_option(
    required: bool = True,
    force: bool = False,
    help: Optional[str] = None,  # pylint: disable=redefined-builtin
) -> Callable:
    """Click decorator handling on output file.

    Provides: `output: str` a full path to file.
    The force option is not passed to click command.

    :param required: Output option is required, defaults to True
    :param force: Include --force option, defaults to False
    :param help: Customized help message, defaults to None
    :return: Click decorator
    """

    def callback(
        ctx: click.Context,
        param: click.Parameter,  # pylint: disable=unused-argument  # click's callback signature
        value: Optional[str],
    ) -> Optional[str]:
        if ctx.resilient_parsing:
            return value
        if force and value and os.path.exists(value) and not ctx.params.get("force"):
            click.echo(
                "Output file already exists. Please use --force is you want to overwrite it."
            )
            ctx.abort()
        if "force" in ctx.params:
            del ctx.params["force"]
        return value

    def decorator(func: Callable[[FC], FC]) -> Callable[[FC], FC]:
        if force:
            func = click.option(
                "--force",
                default=False,
                is_flag=True,
                help="Force overwriting of existing files.",
                is_eager=True,
            )(func)
        return click.option(
            "-o",
            "--output",
            type=click.Path(resolve_path=True, dir_okay=False),
            required=required,
            help=help or "Path to a file, where to store the output.",
            callback=callback,
        )(func)

    return decorator
