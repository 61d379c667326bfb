"""
Path and title templates.

Templates use ``str.format`` placeholders and may only reference
``{Team}``, ``{Repository}`` and ``{Owner}``, e.g.
``/concourse/{Team}/{Repository}-deploy-key``.
"""

import string
from dataclasses import dataclass

from keyrotator.exceptions import TemplateResolutionError

DEFAULT_TOKEN_TEMPLATE = "/concourse/{Team}/{Owner}-access-token"
DEFAULT_KEY_TEMPLATE = "/concourse/{Team}/{Repository}-deploy-key"
DEFAULT_TITLE_TEMPLATE = "concourse-{Team}-deploy-key"

PLACEHOLDERS = frozenset({"Team", "Repository", "Owner"})

_formatter = string.Formatter()

_CONVERSIONS = frozenset({None, "s", "r", "a"})


def _fields(template: str) -> list[tuple[str, str | None]]:
    """Return (field, conversion) pairs, including fields nested in format specs."""
    fields = []
    for _, name, format_spec, conversion in _formatter.parse(template):
        if name is None:
            continue
        fields.append((name, conversion))
        if format_spec:
            fields.extend(_fields(format_spec))
    return fields


@dataclass(frozen=True)
class Template:
    """A template bound to one team, repository and owner."""

    team: str
    repository: str
    owner: str
    template: str

    def render(self) -> str:
        """
        Resolve the template.

        Returns:
            The template with every placeholder substituted

        Raises:
            TemplateResolutionError: If the template is malformed or references
                a placeholder other than Team, Repository or Owner
        """
        try:
            fields = _fields(self.template)
        except ValueError as e:
            raise TemplateResolutionError(f"malformed template {self.template!r}: {e}") from e

        for name, conversion in fields:
            if name not in PLACEHOLDERS:
                raise TemplateResolutionError(
                    f"unknown placeholder {{{name}}} in template {self.template!r}"
                )
            if conversion not in _CONVERSIONS:
                raise TemplateResolutionError(
                    f"unknown conversion !{conversion} in template {self.template!r}"
                )

        try:
            return self.template.format(
                Team=self.team,
                Repository=self.repository,
                Owner=self.owner,
            )
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            raise TemplateResolutionError(f"malformed template {self.template!r}: {e}") from e

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class ResolvedPaths:
    """Secret paths and key title for a single repository."""

    token_path: str
    key_path: str
    title: str


def resolve_paths(
    team: str,
    repository: str,
    owner: str,
    token_template: str = DEFAULT_TOKEN_TEMPLATE,
    key_template: str = DEFAULT_KEY_TEMPLATE,
    title_template: str = DEFAULT_TITLE_TEMPLATE,
) -> ResolvedPaths:
    """
    Resolve the token path, key path and key title for a repository.

    Raises:
        TemplateResolutionError: If any of the templates cannot be resolved
    """
    resolved = {}
    for label, template in (
        ("token path", token_template),
        ("deploy key", key_template),
        ("github title", title_template),
    ):
        try:
            resolved[label] = Template(team, repository, owner, template).render()
        except TemplateResolutionError as e:
            raise TemplateResolutionError(
                f"failed to parse {label} template: {e.message}"
            ) from e

    return ResolvedPaths(
        token_path=resolved["token path"],
        key_path=resolved["deploy key"],
        title=resolved["github title"],
    )
