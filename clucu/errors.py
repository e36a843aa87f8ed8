"""Exception types raised by the cluster-cosmology toolkit."""

from __future__ import annotations

_MESSAGE_LIMIT = 249


class ClucuError(Exception):
    """Base error carrying a numeric status code and a message."""

    default_code = 1

    def __init__(self, message: str, code: int | None = None) -> None:
        self.message = str(message)
        self.code = self.default_code if code is None else int(code)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"WARNING {self.code}: {self.message[:_MESSAGE_LIMIT]}"


class SplineError(ClucuError):
    """An interpolation table could not be built or evaluated."""

    default_code = 1011


class RootFindingError(ClucuError):
    """A numerical root solver failed to converge."""

    default_code = 1012


class UnphysicalNeutrinoMassError(ClucuError):
    """A neutrino mass sum is incompatible with the requested hierarchy."""

    default_code = 1013


class NotComputedError(ClucuError):
    """A quantity was requested before its tables were computed."""

    default_code = 1014


class ParameterError(ClucuError):
    """Parameters are inconsistent or a named preset does not exist."""

    default_code = 1015