# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Pytest fixtures for unit tests."""

import logging

import pytest

from tests.factories import (
    FakeUIMessenger,
    RecordingTelemetrySink,
    make_context,
    make_registry,
)


@pytest.fixture(autouse=True)
def reset_toolgate_logger():
    """Ensure toolgate log records propagate so caplog captures them."""
    logger = logging.getLogger("toolgate")
    original_handlers = logger.handlers.copy()
    original_level = logger.level
    original_propagate = logger.propagate

    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.DEBUG)

    yield

    logger.handlers = original_handlers
    logger.level = original_level
    logger.propagate = original_propagate


@pytest.fixture
def ui():
    return FakeUIMessenger()


@pytest.fixture
def telemetry_sink():
    return RecordingTelemetrySink()


@pytest.fixture
def registry():
    return make_registry()


@pytest.fixture
def context():
    return make_context()
