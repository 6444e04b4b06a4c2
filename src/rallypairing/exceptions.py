"""Exceptions for use in Rally Pairing"""

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


# ========== Base Application Exception ==========


class RallyPairingException(Exception):
    """Base exception for all Rally Pairing errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(RallyPairingException):
    """Base exception for pairing-related errors."""

    pass


class InvalidPairingException(PairingException):
    """Raised when a match does not have four distinct players."""

    pass


class NoPairingAvailableException(PairingException):
    """Raised when no valid pairing can be generated."""

    pass


class WaveValidationException(PairingException):
    """Raised when a generated wave breaks a structural rule.

    This signals a bug in a pairing algorithm and is never caught by the
    library itself.
    """

    pass


# ========== Tournament Exceptions ==========


class TournamentException(RallyPairingException):
    """Base exception for tournament-related errors."""

    pass


class InsufficientPlayersException(TournamentException):
    """Raised when there are not enough players for the requested operation."""

    pass


class InvalidFieldSizeException(TournamentException):
    """Raised when a field size is not supported by the requested wave format."""

    pass


class TournamentStateException(TournamentException):
    """Raised when a round is in an invalid state for the requested operation."""

    pass


# ========== Player Exceptions ==========


class PlayerException(RallyPairingException):
    """Base exception for player-related errors."""

    pass


class InvalidPlayerDataException(PlayerException):
    """Raised when player data is invalid."""

    pass


class PlayerNotFoundException(PlayerException):
    """Raised when a requested player does not exist."""

    pass


# ========== Result Exceptions ==========


class ResultException(RallyPairingException):
    """Base exception for result-related errors."""

    pass


class InvalidResultException(ResultException):
    """Raised when a score is invalid."""

    pass


class DuplicateResultException(ResultException):
    """Raised when attempting to record a result for an already completed match."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(RallyPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when schedule preferences are invalid."""

    pass
