"""Shared helpers: logging setup and identifier generation."""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import uuid

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """Return the module logger for ``name``.

    The library never attaches handlers of its own; output is configured by
    the application through :func:`configure_logging`.
    """
    logger = logging.getLogger(name)
    if name == "rallypairing" or not name.startswith("rallypairing."):
        return logger
    root = logging.getLogger("rallypairing")
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logger


def configure_logging(verbose: bool = False) -> None:
    """Install a console handler on the root logger.

    Args:
        verbose: Log at DEBUG instead of INFO
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def generate_id() -> str:
    """Generate an opaque player identifier."""
    return uuid.uuid4().hex[:12]


def default_match_id(round_index: int, wave_index: int, court: int) -> str:
    """Deterministic match id used when no factory is injected."""
    return f"r{round_index}w{wave_index}c{court}"
