"""Guided workflow prompt for building a new ServiceNow application."""

from typing import Annotated, Optional

from pydantic import Field

STEPS = [
    ("Initialize", "Use `snc_init` with template `typescript.basic` to scaffold the project"),
    ("Tables", "Use `snc_generate_table` for each table needed. Ask me what tables and columns I want."),
    ("Roles", "Use `snc_generate_role` to create access roles"),
    ("ACLs", "Use `snc_generate_acl` to secure each table"),
    ("Business Rules", "Use `snc_generate_business_rule` for any automation logic"),
    ("Flows", "Use `snc_generate_flow` for workflow automation"),
    ("App Menu", "Use `snc_generate_app_menu` to create navigation"),
    ("Workspace", "Use `snc_generate_workspace` to set up the workspace UI"),
    ("Build", "Use `snc_build` to compile"),
    ("Deploy", "Use `snc_install` to deploy to the instance"),
]


def new_servicenow_app(
    appName: Annotated[str, Field(description="Application display name (e.g. 'Expense Tracker')")],
    scopeName: Annotated[str, Field(description="Application scope (e.g. x_myorg_expenses, max 18 chars)")],
    description: Annotated[Optional[str], Field(description="Brief description of what the app does")] = None,
) -> str:
    """Guided workflow to create a complete new ServiceNow application with tables, roles, ACLs, business rules, flows, and workspace."""
    intro = f'Create a new ServiceNow application called "{appName}" with scope "{scopeName}".'
    if description:
        intro += f" {description}"
    steps = "\n".join(f"{i}. **{title}** — {text}" for i, (title, text) in enumerate(STEPS, start=1))
    return (
        f"{intro}\n\n"
        "Use the ServiceNow MCP tools to build the complete application:\n\n"
        f"{steps}\n\n"
        "Start by asking me about the tables and fields I need for this application."
    )
