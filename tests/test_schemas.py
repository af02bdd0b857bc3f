"""Unit tests for request validation, identifier keys and settings.

Run:  uv run python -m tests.test_schemas
"""

import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

import pytest
from pydantic import ValidationError

from snc_mcp.core import DEFAULT_AUTH_ALIAS, Settings, id_key
from snc_mcp.tools.schemas import (
    AclRequest,
    ActionSpec,
    AppMenuRequest,
    BusinessRuleRequest,
    ColumnSpec,
    FlowRequest,
    LogAction,
    LookUpRecordAction,
    RoleRequest,
    SendEmailAction,
    TableRequest,
    UpdateRecordAction,
    WorkspaceRequest,
)

TOTAL = 0
PASSED = 0


def check(label, actual, expected):
    global TOTAL, PASSED
    TOTAL += 1
    ok = actual == expected
    PASSED += ok
    print(f"  {'[PASS]' if ok else '[FAIL]'}  {label}")
    if not ok:
        print(f"         Expected {expected!r}")
        print(f"         Got      {actual!r}")
    assert ok, label


def rejected(build):
    """Return the error locations of a failed validation."""
    with pytest.raises(ValidationError) as info:
        build()
    return [".".join(str(p) for p in err["loc"]) for err in info.value.errors()]


# ── id_key ────────────────────────────────────────────

def test_id_key():
    print("\n--- id_key -----------------------------------------------")
    check("spaces",       id_key("Asset Tracker"), "asset_tracker")
    check("hyphen",       id_key("Asset-Tracker"), "asset_tracker")
    check("punctuation",  id_key("My App!"), "my_app_")
    check("underscores kept", id_key("x_myorg_item"), "x_myorg_item")
    check("dots",         id_key("x_app.role"), "x_app_role")
    check("non-ascii",    id_key("Café Menü"), "caf__men_")
    check("empty",        id_key(""), "")
    for text in ("Asset Tracker", "My App!", "Ünïcode-Title 2", "a.b/c\\d", "  "):
        check(f"idempotent {text!r}", id_key(id_key(text)), id_key(text))


# ── Settings ──────────────────────────────────────────

def test_settings():
    print("\n--- Settings ---------------------------------------------")
    check("default alias",  Settings.from_env({}).default_auth_alias, DEFAULT_AUTH_ALIAS)
    check("empty alias",    Settings.from_env({"SNC_DEFAULT_AUTH_ALIAS": ""}).default_auth_alias, DEFAULT_AUTH_ALIAS)
    check("env alias",      Settings.from_env({"SNC_DEFAULT_AUTH_ALIAS": "dev999"}).default_auth_alias, "dev999")
    check("timeout",        Settings().timeout, 120.0)
    check("sdk command",    Settings().sdk_command, ("npx", "now-sdk"))
    with pytest.raises(Exception):
        Settings().timeout = 5


# ── Column and table shapes ───────────────────────────

def test_column_aliases():
    print("\n--- ColumnSpec -------------------------------------------")
    col = ColumnSpec.model_validate({"name": "owner", "type": "reference", "label": "Owner",
                                     "referenceTable": "sys_user", "maxLength": 40, "defaultValue": "x"})
    check("referenceTable", col.reference_table, "sys_user")
    check("maxLength",      col.max_length, 40)
    check("defaultValue",   col.default_value, "x")
    check("python names",   ColumnSpec(name="a", type="string", label="A", max_length=10).max_length, 10)


def test_rejects_bad_shapes():
    print("\n--- validation failures ----------------------------------")
    check("bad column type", rejected(lambda: TableRequest.model_validate(
        {"tableName": "x", "label": "X", "columns": [{"name": "a", "type": "text", "label": "A"}]})),
        ["columns.0.type"])
    check("missing label", rejected(lambda: TableRequest.model_validate(
        {"tableName": "x", "columns": []})), ["label"])
    check("bad trigger", "triggerType" in rejected(lambda: FlowRequest.model_validate(
        {"name": "f", "description": "d", "triggerType": "deleted", "table": "x", "actions": []})), True)
    check("bad rule action", rejected(lambda: BusinessRuleRequest(
        name="r", table="x", when="before", actions=["insert", "merge"], script_body="")),
        ["actions.1"])
    check("bad acl op", rejected(lambda: AclRequest(table="x", operations=["read", "execute"])),
          ["operations.1"])
    check("order must be integer", rejected(lambda: AppMenuRequest.model_validate(
        {"title": "m", "description": "d", "modules": [{"title": "t", "table": "x", "order": "first"}]})),
        ["modules.0.order"])
    check("bad link type", rejected(lambda: AppMenuRequest.model_validate(
        {"title": "m", "description": "d", "modules": [{"title": "t", "table": "x", "linkType": "EDIT", "order": 1}]})),
        ["modules.0.linkType"])
    check("list columns required", rejected(lambda: WorkspaceRequest.model_validate(
        {"title": "w", "urlPath": "w", "description": "d", "tables": [{"tableName": "x"}]})),
        ["tables.0.listColumns"])


def test_defaults_and_sets():
    print("\n--- defaults ---------------------------------------------")
    check("acl default ops", AclRequest(table="x").operations, ["create", "read", "write", "delete"])
    check("acl dedupe", AclRequest(table="x", operations=["write", "read", "write"]).operations, ["write", "read"])
    menu = AppMenuRequest.model_validate(
        {"title": "m", "description": "d", "modules": [{"title": "t", "table": "x", "order": 1}]})
    check("link type LIST", menu.modules[0].link_type, "LIST")
    ws = WorkspaceRequest.model_validate(
        {"title": "w", "urlPath": "w", "description": "d", "tables": [{"tableName": "x", "listColumns": []}]})
    check("primary false", ws.tables[0].primary, False)
    check("role var", RoleRequest(name="x_myorg.asset_manager", description="d").var_name, "asset_manager")
    check("role var without scope", RoleRequest(name="Asset Manager", description="d").var_name, "asset_manager")
    check("rule function", BusinessRuleRequest(
        name="Close Tasks", table="x", when="after", actions=["update"], script_body="").function_name,
        "close_tasksScript")


# ── Flow actions ──────────────────────────────────────

def test_action_decoding():
    print("\n--- ActionSpec.decode ------------------------------------")
    check("log defaults", ActionSpec(type="log", config={}).decode(), LogAction())
    check("log empty values", ActionSpec(type="log", config={"level": "", "message": ""}).decode(), LogAction())
    check("log ignores unknown keys", ActionSpec(type="log", config={"colour": "red"}).decode(), LogAction())
    update = ActionSpec(type="updateRecord", config={"state": "2", "table": "x_t", "active": "false"}).decode()
    check("update type",   isinstance(update, UpdateRecordAction), True)
    check("update table",  update.table, "x_t")
    check("update values", list(update.values.items()), [("state", "2"), ("active", "false")])
    check("update no table", ActionSpec(type="updateRecord", config={"state": "2"}).decode().table, None)
    check("email defaults", ActionSpec(type="sendEmail", config={}).decode(), SendEmailAction())
    check("lookup defaults", ActionSpec(type="lookUpRecord", config={}).decode(),
          LookUpRecordAction(table="sys_user", conditions=""))
    check("config type ignored", ActionSpec(type="log", config={"type": "sendEmail", "message": "hi"}).decode(),
          LogAction(message="hi"))
    check("email type ignored", ActionSpec(type="sendEmail", config={"type": "html"}).decode(),
          SendEmailAction())
    check("update type is a field", ActionSpec(type="updateRecord", config={"type": "incident"}).decode().values,
          {"type": "incident"})


def test_flow_request_decodes_once():
    print("\n--- FlowRequest ------------------------------------------")
    req = FlowRequest.model_validate({
        "name": "Escalate", "description": "d", "triggerType": "updated", "table": "x_t",
        "actions": [
            {"type": "log", "config": {"message": "hi"}},
            ActionSpec(type="sendEmail", config={"to": "a@b.c"}),
            {"type": "lookUpRecord", "config": {"conditions": "active=true"}},
        ],
    })
    check("kinds", [a.type for a in req.actions], ["log", "sendEmail", "lookUpRecord"])
    check("log message", req.actions[0].message, "hi")
    check("email to", req.actions[1].to, "a@b.c")
    check("lookup table", req.actions[2].table, "sys_user")
    check("key", req.key, "escalate")
    check("bad action type", rejected(lambda: FlowRequest.model_validate({
        "name": "f", "description": "d", "triggerType": "created", "table": "x",
        "actions": [{"type": "deleteRecord", "config": {}}]}))[0].startswith("actions.0"), True)
    check("config must be strings", rejected(lambda: ActionSpec.model_validate(
        {"type": "log", "config": {"level": 3}})), ["config.level"])


# ── Main ───────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 52)
    print("  ServiceNow Dev — Schema Tests")
    print("=" * 52)

    test_id_key()
    test_settings()
    test_column_aliases()
    test_rejects_bad_shapes()
    test_defaults_and_sets()
    test_action_decoding()
    test_flow_request_decodes_once()

    print("\n" + "=" * 52)
    print(f"  {PASSED}/{TOTAL} passed")
    print("=" * 52)
