#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey pytest configuration and shared test fixtures."""

import logging
import os
from typing import Any

import pytest

os.environ["HWKEY_DEBUG_LOGGING_DISABLED"] = "True"
os.environ.pop("HWKEY_DEVICE", None)
os.environ.pop("HWKEY_INTERACTIVE_DISABLED", None)
os.environ.pop("HWKEY_ADDRESS_PREFIX", None)

# pylint: disable=wrong-import-position
from tests.cli_runner import CliRunner
from tests.fake_device import FakeLedgerDevice


@pytest.fixture
def cli_runner() -> CliRunner:
    """Get CLI runner instance for testing.

    :return: CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture(scope="module")
def data_dir(request: Any) -> str:
    """Get test data directory path for the current test module.

    :param request: Pytest request fixture containing test execution context.
    :return: Absolute path to the test data directory.
    """
    data_path = os.path.join(os.path.dirname(request.fspath), "data")
    logging.debug(f"data_dir: {data_path}")
    return data_path


@pytest.fixture
def tests_root_dir() -> str:
    """Get the root directory of tests.

    :return: Absolute path to the tests root directory.
    """
    return os.path.dirname(os.path.abspath(__file__))


@pytest.fixture
def fake_device() -> FakeLedgerDevice:
    """Get a fake device with application 1.2.0 recording all calls.

    :return: Fake device.
    """
    return FakeLedgerDevice()
