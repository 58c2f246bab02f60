import os
from dataclasses import dataclass
from typing import Optional

BASE_URL_ENVVAR = "COURIER_BASE_URL"
READ_TIMEOUT_ENVVAR = "COURIER_READ_TIMEOUT"

# One hour, the read ceiling applied to every exchange unless configured.
DEFAULT_READ_TIMEOUT = 3600.0


@dataclass
class NamedValueFromEnvironment:
    """A configuration value that is either passed explicitly or read from
    an environment variable.

    The name property reports where the value came from, so error messages
    can point users at the right knob.
    """

    _envvar: str
    _name: str
    _value: str
    _from_envvar: bool

    def __init__(self, envvar: str, name: str, value: Optional[str] = None):
        self._envvar = envvar
        self._name = name
        if value is None:
            self._value = os.environ.get(envvar) or ""
            self._from_envvar = True
        else:
            self._value = value
            self._from_envvar = False

    def __str__(self):
        return self.value

    @property
    def name(self) -> str:
        return self._envvar if self._from_envvar else self._name

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str):
        self._value = value
        self._from_envvar = False


def read_timeout(value: Optional[float] = None) -> float:
    """Returns the read timeout of exchanges, in seconds.

    Args:
        value: Explicit timeout. Uses the value of the COURIER_READ_TIMEOUT
            environment variable if None, otherwise DEFAULT_READ_TIMEOUT.

    Raises:
        ValueError: if the timeout is not a positive number.
    """
    if value is not None:
        timeout = float(value)
        name = "read_timeout"
    else:
        setting = NamedValueFromEnvironment(READ_TIMEOUT_ENVVAR, "read_timeout")
        if not setting.value:
            return DEFAULT_READ_TIMEOUT
        try:
            timeout = float(setting.value)
        except ValueError:
            raise ValueError(
                f"invalid {setting.name}: '{setting.value}' is not a number"
            ) from None
        name = setting.name
    if timeout <= 0:
        raise ValueError(f"invalid {name}: must be positive, got {timeout}")
    return timeout
