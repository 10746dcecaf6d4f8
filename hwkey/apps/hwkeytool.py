#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Command line tool for keys stored on a Ledger-class signing device."""

import logging
import sys
from typing import Optional

import click

from hwkey import HWKEY_ADDRESS_PREFIX, HWKEY_DEVICE
from hwkey.apps.utils import hwkey_logger
from hwkey.apps.utils.common_cli_options import (
    hwkey_apps_common_options,
    hwkey_config_option,
    hwkey_output_option,
    hwkey_path_option,
)
from hwkey.apps.utils.utils import HWKeyAppError, catch_hwkey_error, parse_hex_data
from hwkey.crypto.crypto_types import HWKeyEncoding
from hwkey.crypto.keys import ECDSASignature
from hwkey.ledger.device import DerivationPath, LedgerSecp256k1Device
from hwkey.ledger.discovery import DeviceDiscovery, get_device_discovery
from hwkey.ledger.hardware_key import HardwareKeySecp256k1
from hwkey.utils.config import Config
from hwkey.utils.misc import load_binary, write_file
from hwkey.utils.plugins import PluginsManager

logger = logging.getLogger(__name__)


class ToolSettings:
    """Settings shared by all commands of the tool."""

    def __init__(self, device: Optional[str], address_prefix: str, low_s: bool) -> None:
        self.device = device
        self.address_prefix = address_prefix
        self.low_s = low_s

    def get_discovery(self) -> Optional[DeviceDiscovery]:
        """Get discovery function of the configured device.

        :return: Discovery function, None when no device is configured.
        """
        if not self.device:
            return None
        return get_device_discovery(self.device)

    def create_key(self, path: DerivationPath) -> HardwareKeySecp256k1:
        """Create hardware key on the configured device.

        :param path: Derivation path of the key.
        :return: Hardware key.
        """
        return HardwareKeySecp256k1.create(
            path,
            self.get_discovery(),
            address_prefix=self.address_prefix,
            low_s=self.low_s,
        )


@click.group(name="hwkeytool", no_args_is_help=True)
@hwkey_apps_common_options
@hwkey_config_option(required=False)
@click.option(
    "-d",
    "--device",
    help=(
        "Device configuration, e.g. 'type=emulator;seed=test'. "
        "Defaults to the HWKEY_DEVICE environment variable."
    ),
)
@click.option("--prefix", help="Bech32 account address prefix, 'cosmos' by default.")
@click.option(
    "--plugin",
    type=click.Path(resolve_path=True, dir_okay=False, exists=True),
    help="External python file containing a custom device backend.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: int,
    config: Optional[str],
    device: Optional[str],
    prefix: Optional[str],
    plugin: Optional[str],
) -> None:
    """Utility for SECP256K1 keys held by a Ledger-class signing device."""
    hwkey_logger.install(level=log_level)
    if plugin:
        PluginsManager().load_from_source_file(plugin)
    cfg = Config.create_from_file(config) if config else Config()
    ctx.obj = ToolSettings(
        device=device or cfg.get_str("device", "") or HWKEY_DEVICE,
        address_prefix=prefix or cfg.get_str("address_prefix", "") or HWKEY_ADDRESS_PREFIX,
        low_s=cfg.get_bool("low_s", False),
    )


@main.command(name="pubkey", no_args_is_help=True)
@hwkey_path_option
@click.pass_obj
def pubkey(settings: ToolSettings, path: DerivationPath) -> None:
    """Print the public key and the account address of a key."""
    key = settings.create_key(path)
    click.echo(f"Path:       {key.path}")
    click.echo(f"Public key: {key.public_key.export().hex()}")
    click.echo(f"Address:    {key.address()}")


@main.command(name="sign", no_args_is_help=True)
@hwkey_path_option
@click.option("-m", "--message", help="Text message to sign.")
@click.option("-b", "--binary", help="Hex encoded message to sign.")
@click.option(
    "-f",
    "--file",
    "message_file",
    type=click.Path(exists=True, dir_okay=False),
    help="File with the message to sign.",
)
@hwkey_output_option(required=False, help="Path to a file, where to store the signature.")
@click.pass_obj
def sign(
    settings: ToolSettings,
    path: DerivationPath,
    message: Optional[str],
    binary: Optional[str],
    message_file: Optional[str],
    output: Optional[str],
) -> None:
    """Sign a message, the signature is printed as 64 bytes of R and S."""
    sources = [source for source in (message, binary, message_file) if source is not None]
    if len(sources) != 1:
        raise HWKeyAppError("Exactly one of --message, --binary or --file must be used")
    if message is not None:
        data = message.encode("utf-8")
    elif binary is not None:
        data = parse_hex_data(binary)
    else:
        data = load_binary(str(message_file))

    key = settings.create_key(path)
    signature = key.sign(data)
    if output:
        write_file(signature, output, mode="wb")
        click.echo(f"Signature has been stored into: {output}")
    else:
        click.echo(signature.hex())


@main.command(name="export", no_args_is_help=True)
@hwkey_path_option
@hwkey_output_option(force=True)
@click.pass_obj
def export(settings: ToolSettings, path: DerivationPath, output: str) -> None:
    """Store the public key and the path of a key, the device can verify it later."""
    key = settings.create_key(path)
    write_file(key.export(), output, mode="wb")
    click.echo(f"Hardware key {key.path} has been stored into: {output}")


@main.command(name="validate", no_args_is_help=True)
@click.option(
    "-k",
    "--key",
    "key_file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="File with the exported key.",
)
@click.pass_obj
def validate(settings: ToolSettings, key_file: str) -> None:
    """Check the device still provides an exported key."""
    key = HardwareKeySecp256k1.load(
        load_binary(key_file), settings.get_discovery(), address_prefix=settings.address_prefix
    )
    click.echo(f"Hardware key {key.path} with address {key.address()} is valid")


@main.command(name="convert-signature", no_args_is_help=True)
@click.argument("signature")
@click.option("--low-s", is_flag=True, default=False, help="Normalize S to the lower half.")
def convert_signature(signature: str, low_s: bool) -> None:
    """Convert hex encoded DER signature into 64 bytes of R and S."""
    ecdsa_signature = ECDSASignature.parse(parse_hex_data(signature), encoding=HWKeyEncoding.DER)
    if low_s:
        ecdsa_signature = ecdsa_signature.normalize_s()
    click.echo(ecdsa_signature.export(HWKeyEncoding.RAW).hex())


@main.command(name="get-devices")
def get_devices() -> None:
    """List available device backends."""
    LedgerSecp256k1Device.load_plugins()
    for provider in LedgerSecp256k1Device.get_all_providers():
        description = provider.__doc__.splitlines()[0] if provider.__doc__ else ""
        click.echo(f"{provider.identifier}: {description}")


@catch_hwkey_error
def safe_main() -> None:
    """Call the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
