"""Generator tools — Fluent source files for ServiceNow metadata.

Tools: snc_generate_table, snc_generate_flow, snc_generate_business_rule,
snc_generate_acl, snc_generate_role, snc_generate_app_menu,
snc_generate_workspace.
Pure string rendering. No I/O, no subprocess, same input gives the same text.
"""

import textwrap
from collections import Counter
from typing import Annotated, Optional

from pydantic import Field

from snc_mcp.core import id_key
from snc_mcp.tools.render import COLUMN_TYPES, INDENT, array, entries, inline, literal, quoted, render
from snc_mcp.tools.schemas import (
    AclOperation,
    AclRequest,
    ActionSpec,
    AppMenuRequest,
    BusinessRuleRequest,
    ColumnSpec,
    FlowRequest,
    MenuModule,
    RoleRequest,
    RuleAction,
    RuleWhen,
    TableRequest,
    TriggerType,
    WorkspaceRequest,
    WorkspaceTable,
)

CORE = "@servicenow/sdk/core"
AUTOMATION = "@servicenow/sdk/automation"


def _imports(names, module: str) -> str:
    return f"import {{ {', '.join(names)} }} from '{module}'"


def _role_import(role_name, role_import_path) -> list[str]:
    if role_name and role_import_path:
        return [_imports([role_name], role_import_path)]
    return []


# ── Emitters ──────────────────────────────────────────

def table_source(req: TableRequest) -> str:
    factories = {"Table"} | {COLUMN_TYPES[c.type] for c in req.columns}
    var_name = req.table_name.replace(".", "_")
    return (
        f"{_imports(sorted(factories), CORE)}\n\n"
        f"export const {var_name} = Table({render('table', req)})\n"
    )


def _action_keys(flow_key: str, actions):
    """Yield (key, action); repeats of a type get a _2, _3... suffix."""
    seen = Counter()
    for action in actions:
        seen[action.type] += 1
        seed = f"{flow_key}_{action.type}"
        if seen[action.type] > 1:
            seed += f"_{seen[action.type]}"
        yield id_key(seed), action


def _action_source(key: str, action, flow_table: str) -> str:
    ctx = action.model_dump()
    if action.type == "updateRecord":
        ctx["table"] = action.table or flow_table
    elif action.type == "sendEmail":
        ctx["table"] = flow_table

    opener = "wfa.action("
    if action.type == "lookUpRecord":
        opener = f"const {key}_result = wfa.action("
    return "\n".join([
        f"        {opener}",
        f"            action.core.{action.type},",
        f"            {{ $id: Now.ID['{key}'] }},",
        f"            {render(action.type, ctx, 3)}",
        "        )",
        "",
    ])


def flow_source(req: FlowRequest) -> str:
    key = req.key
    lines = [
        _imports(["action", "Flow", "wfa", "trigger"], AUTOMATION),
        "",
        f"export const {key} = Flow(",
        f"    {render('flow', req, 1)},",
        "    wfa.trigger(",
        f"        trigger.record.{req.trigger_type},",
        f"        {{ $id: Now.ID['{key}_trigger'] }},",
        f"        {render('flow_trigger', req, 2)}",
        "    ),",
        "    (params) => {",
    ]
    lines += [_action_source(k, a, req.table) for k, a in _action_keys(key, req.actions)]
    lines += ["    }", ")"]
    return "\n".join(lines) + "\n"


def business_rule_source(req: BusinessRuleRequest) -> str:
    return "\n".join([
        _imports(["BusinessRule"], CORE),
        _imports(["GlideRecord", "gs"], "@servicenow/glide"),
        "",
        f"function {req.function_name}(current: GlideRecord): void {{",
        textwrap.indent(req.script_body, INDENT),
        "}",
        "",
        f"BusinessRule({render('business_rule', req)})",
        "",
    ])


def acl_source(req: AclRequest) -> str:
    lines = [_imports(["Acl"], CORE)] + _role_import(req.role_name, req.role_import_path)
    text = "\n".join(lines) + "\n\n"
    for op in req.operations:
        acl = {"key": id_key(f"{req.table}_{op}"), "operation": op, "role": req.role_name, "table": req.table}
        text += f"Acl({render('acl', acl)})\n\n"
    return text


def role_source(req: RoleRequest) -> str:
    return (
        f"{_imports(['Role'], CORE)}\n\n"
        f"export const {req.var_name} = Role({render('role', req)})\n"
    )


def _record(table: str, key: str, data: list) -> str:
    return f"Record({render('record', {'table': table, 'key': key, 'data': data})})"


def app_menu_source(req: AppMenuRequest) -> str:
    key = req.key
    lines = [_imports(["ApplicationMenu", "Record"], CORE)] + _role_import(req.role_name, req.role_import_path)
    text = "\n".join(lines) + "\n\n"
    text += f"export const {key} = ApplicationMenu({render('app_menu', req)})\n\n"
    for module in req.modules:
        data = entries("app_module", {**module.model_dump(), "menu": key})
        text += _record("sys_app_module", id_key(f"{key}_{module.title}"), data) + "\n\n"
    return text


def _list_columns(columns: list[str]):
    items = [inline([("element", quoted(c)), ("position", literal(i))]) for i, c in enumerate(columns)]
    return lambda depth: array(items, depth)


def workspace_source(req: WorkspaceRequest) -> str:
    key = req.key
    text = _imports(["Record", "List"], CORE) + "\n\n"
    text += _record("sys_aw_master_config", key, entries("workspace", req)) + "\n\n"

    for table in req.tables:
        name = table.table_name
        row = {"workspace": key, "table_name": name, "primary": table.primary}
        text += _record("sys_aw_table", id_key(f"ws_{name}"), entries("workspace_table", row)) + "\n\n"

        view = id_key(f"{name}_view")
        view_data = entries("ui_view", {"view": view, "table_name": name})
        text += f"const {view} = {_record('sys_ui_view', view, view_data)}\n\n"

        listing = {
            "key": id_key(f"{name}_list"),
            "table": name,
            "view": view,
            "columns": _list_columns(table.list_columns),
        }
        text += f"List({render('list', listing)})\n\n"
    return text


# ── Tools ─────────────────────────────────────────────

def snc_generate_table(
    tableName: Annotated[str, Field(description="Full table name including scope prefix (e.g. x_myapp_task)")],
    label: Annotated[str, Field(description="Display label for the table")],
    columns: Annotated[list[ColumnSpec], Field(description="Column definitions")],
    displayColumn: Annotated[Optional[str], Field(description="Column to use as display value")] = None,
) -> str:
    """Generate a Fluent Table definition file with columns."""
    return table_source(TableRequest(
        table_name=tableName, label=label, columns=columns, display_column=displayColumn,
    ))


def snc_generate_flow(
    name: Annotated[str, Field(description="Flow name")],
    description: Annotated[str, Field(description="Flow description")],
    triggerType: Annotated[TriggerType, Field(description="Record trigger type")],
    table: Annotated[str, Field(description="Table to trigger on")],
    actions: Annotated[list[ActionSpec], Field(description="Flow actions to execute, in order")],
    condition: Annotated[Optional[str], Field(description="Trigger condition (e.g. 'priority=1')")] = None,
) -> str:
    """Generate a Fluent Flow definition with trigger and actions.

    Action config keys: log (level, message), updateRecord (table, then any
    field=value assignments), sendEmail (subject, body, to),
    lookUpRecord (table, conditions).
    """
    return flow_source(FlowRequest(
        name=name, description=description, trigger_type=triggerType,
        table=table, condition=condition, actions=actions,
    ))


def snc_generate_business_rule(
    name: Annotated[str, Field(description="Business rule name")],
    table: Annotated[str, Field(description="Table to attach the rule to")],
    when: Annotated[RuleWhen, Field(description="When to run the rule")],
    actions: Annotated[list[RuleAction], Field(description="On which operations")],
    scriptBody: Annotated[str, Field(description="Function body for the script (receives 'current' GlideRecord)")],
    condition: Annotated[Optional[str], Field(description="Filter condition (e.g. 'state=2')")] = None,
    scriptFunctionName: Annotated[Optional[str], Field(description="Name for the exported script function")] = None,
) -> str:
    """Generate a Fluent BusinessRule definition."""
    return business_rule_source(BusinessRuleRequest(
        name=name, table=table, when=when, actions=actions, condition=condition,
        script_body=scriptBody, script_function_name=scriptFunctionName,
    ))


def snc_generate_acl(
    table: Annotated[str, Field(description="Table name")],
    operations: Annotated[
        Optional[list[AclOperation]],
        Field(description="Operations to generate ACLs for (default: create, read, write, delete)"),
    ] = None,
    roleName: Annotated[Optional[str], Field(description="Role variable name to import (e.g. 'myAppUser')")] = None,
    roleImportPath: Annotated[Optional[str], Field(description="Import path for the role (e.g. './role.now')")] = None,
) -> str:
    """Generate Fluent ACL definitions for a table (one per CRUD operation)."""
    fields = {"table": table, "role_name": roleName, "role_import_path": roleImportPath}
    if operations is not None:
        fields["operations"] = operations
    return acl_source(AclRequest(**fields))


def snc_generate_role(
    name: Annotated[str, Field(description="Role name including scope (e.g. x_myapp.my_role)")],
    description: Annotated[str, Field(description="Role description")],
    exportName: Annotated[Optional[str], Field(description="TypeScript export variable name")] = None,
) -> str:
    """Generate a Fluent Role definition."""
    return role_source(RoleRequest(name=name, description=description, export_name=exportName))


def snc_generate_app_menu(
    title: Annotated[str, Field(description="Menu title")],
    description: Annotated[str, Field(description="Menu description")],
    modules: Annotated[list[MenuModule], Field(description="Navigation modules")],
    roleName: Annotated[Optional[str], Field(description="Role variable to import for access control")] = None,
    roleImportPath: Annotated[Optional[str], Field(description="Import path for the role")] = None,
) -> str:
    """Generate a Fluent ApplicationMenu with navigation modules."""
    return app_menu_source(AppMenuRequest(
        title=title, description=description, modules=modules,
        role_name=roleName, role_import_path=roleImportPath,
    ))


def snc_generate_workspace(
    title: Annotated[str, Field(description="Workspace title")],
    urlPath: Annotated[str, Field(description="URL path (accessible at /now/workspace/<urlPath>)")],
    description: Annotated[str, Field(description="Workspace description")],
    tables: Annotated[list[WorkspaceTable], Field(description="Tables to register in the workspace")],
) -> str:
    """Generate Fluent workspace configuration records (sys_aw_master_config, sys_aw_table, list views)."""
    return workspace_source(WorkspaceRequest(
        title=title, url_path=urlPath, description=description, tables=tables,
    ))


GENERATOR_TOOLS = [
    snc_generate_table,
    snc_generate_flow,
    snc_generate_business_rule,
    snc_generate_acl,
    snc_generate_role,
    snc_generate_app_menu,
    snc_generate_workspace,
]
