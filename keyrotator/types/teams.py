"""Team and repository input models."""

from dataclasses import dataclass, field
from typing import Any

from keyrotator.exceptions import ConfigurationError

# Accepted spellings match Go's strconv.ParseBool so that booleans serialized
# as strings by Terraform keep working.
_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: Any) -> bool:
    """
    Parse a loosely typed boolean.

    Args:
        value: A bool, or a string such as "true", "false", "1" or "0"

    Returns:
        The boolean value

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
    raise ConfigurationError(f"invalid boolean value: {value!r}")


@dataclass(frozen=True)
class Repository:
    """A GitHub repository that should carry a Concourse deploy key."""

    name: str
    owner: str
    read_only: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Repository":
        try:
            name = data["name"]
            owner = data["owner"]
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"repository is missing field: {e}") from e
        return cls(
            name=name,
            owner=owner,
            read_only=parse_bool(data.get("readOnly", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "owner": self.owner, "readOnly": self.read_only}


@dataclass(frozen=True)
class Team:
    """A Concourse team and the repositories it needs access to."""

    name: str
    repositories: list[Repository] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Team":
        """
        Build a team from its JSON representation.

        Args:
            data: Mapping with "name" and an optional "repositories" list

        Returns:
            Team instance

        Raises:
            ConfigurationError: If required fields are missing or malformed
        """
        if not isinstance(data, dict) or "name" not in data:
            raise ConfigurationError("team must be an object with a name")
        repositories = data.get("repositories") or []
        if not isinstance(repositories, list):
            raise ConfigurationError("team repositories must be a list")
        return cls(
            name=data["name"],
            repositories=[Repository.from_dict(r) for r in repositories],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "repositories": [r.to_dict() for r in self.repositories],
        }
