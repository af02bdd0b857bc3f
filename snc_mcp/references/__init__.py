"""Static Fluent and SDK reference documents, served as MCP resources."""

from importlib import resources
from typing import NamedTuple


class Reference(NamedTuple):
    name: str
    uri: str
    description: str
    filename: str


REFERENCES = [
    Reference("fluent-api-reference", "servicenow://fluent/api-reference",
              "Fluent API reference for @servicenow/sdk/core and /automation", "api-reference.md"),
    Reference("fluent-column-types", "servicenow://fluent/column-types",
              "Fluent column types and their properties", "column-types.md"),
    Reference("fluent-flow-triggers", "servicenow://fluent/flow-triggers",
              "Flow record triggers, trigger options and condition syntax", "flow-triggers.md"),
    Reference("fluent-flow-actions", "servicenow://fluent/flow-actions",
              "Flow core actions, flow logic and data pills", "flow-actions.md"),
    Reference("sdk-commands", "servicenow://sdk/commands",
              "now-sdk CLI commands, templates and project files", "sdk-commands.md"),
]


def load(filename: str) -> str:
    return resources.files(__name__).joinpath(filename).read_text(encoding="utf-8")
