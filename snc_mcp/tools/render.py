"""Renderer — object-literal layouts for Fluent source files.

Each artifact kind maps to an ordered tuple of fields. A field names the
output key, where its value comes from, and the formatting rule that turns
the value into Fluent text. Fields whose value is None are left out.
Strings are embedded in single quotes as-is; nothing is escaped.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

INDENT = "    "


# ── Formatting rules ──────────────────────────────────

def quoted(value) -> str:
    return f"'{value}'"


def literal(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def now_id(value) -> str:
    return f"Now.ID['{value}']"


def quoted_list(values) -> str:
    return "[" + ", ".join(quoted(v) for v in values) + "]"


def name_list(values) -> str:
    return "[" + ", ".join(values) + "]"


def raw(value):
    """Already rendered: a string, a nested entry list, or a depth callable."""
    return value


def data_pill(value) -> str:
    return f"wfa.dataPill({value}, 'reference')"


def mapping(rule: Callable[[Any], str]) -> Callable[[dict], list]:
    """Render a dict as an object, one key per entry, in insertion order."""
    return lambda value: [(k, rule(v), None) for k, v in value.items()]


def choice_set(choices: dict) -> list:
    return [
        (key, inline([("label", quoted(label)), ("sequence", literal(seq))]), None)
        for seq, (key, label) in enumerate(choices.items(), start=1)
    ]


# ── Fields and layouts ────────────────────────────────

@dataclass(frozen=True)
class Field:
    key: str
    source: Any
    rule: Callable[[Any], Any] = quoted
    note: Optional[str] = None

    def value(self, obj):
        if callable(self.source):
            return self.source(obj)
        if isinstance(obj, dict):
            return obj.get(self.source)
        return getattr(obj, self.source, None)


def const(value):
    return lambda _obj: value


def when(flag: str, value=True):
    """Emit `value` only when attribute `flag` is truthy."""
    return lambda obj: value if getattr(obj, flag) else None


LAYOUTS: dict[str, tuple[Field, ...]] = {
    "table": (
        Field("name", "table_name"),
        Field("label", "label"),
        Field("schema", "columns", lambda cols: [(c.name, column_call(c), None) for c in cols]),
        Field("display", lambda t: t.display_column or None),
    ),
    "column": (
        Field("label", "label"),
        Field("mandatory", when("mandatory"), literal),
        Field("maxLength", lambda c: c.max_length or None, literal),
        Field("default", "default_value"),
        Field("referenceTable", lambda c: c.reference_table if c.type == "reference" else None),
        Field("choices", lambda c: c.choices if c.type == "choice" else None, choice_set),
    ),
    "flow": (
        Field("$id", "key", now_id),
        Field("name", "name"),
        Field("description", "description"),
    ),
    "flow_trigger": (
        Field("table", "table"),
        Field("condition", lambda f: f.condition or None),
        Field("run_flow_in", const("background")),
        Field("run_on_extended", const("false")),
        Field("run_when_setting", const("both")),
        Field("run_when_user_setting", const("any")),
        Field("run_when_user_list", const("[]"), literal),
    ),
    "log": (
        Field("log_level", "level"),
        Field("log_message", "message"),
    ),
    "updateRecord": (
        Field("table_name", "table"),
        Field("record", const("params.trigger.current.sys_id"), data_pill,
              note="@ts-ignore - sys_id is a system column"),
        Field("values", "values", mapping(quoted)),
    ),
    "sendEmail": (
        Field("table_name", "table"),
        Field("watermark_email", const(True), literal),
        Field("ah_subject", "subject"),
        Field("ah_body", "body"),
        Field("record", const("params.trigger.current.sys_id"), data_pill,
              note="@ts-ignore - sys_id is a system column"),
        Field("ah_to", "to"),
    ),
    "lookUpRecord": (
        Field("table", "table"),
        Field("conditions", "conditions"),
        Field("sort_type", const("sort_asc")),
        Field("if_multiple_records_are_found_action", const("use_first_record")),
    ),
    "business_rule": (
        Field("$id", "key", now_id),
        Field("name", "name"),
        Field("table", "table"),
        Field("when", "when"),
        Field("action", "actions", quoted_list),
        Field("active", const(True), literal),
        Field("filter_condition", lambda r: r.condition or None),
        Field("script", "function_name", literal),
        Field("abort_action", const(False), literal),
    ),
    "acl": (
        Field("$id", "key", now_id),
        Field("active", const(True), literal),
        Field("type", const("record")),
        Field("operation", "operation"),
        Field("roles", lambda a: [a["role"]] if a["role"] else None, name_list),
        Field("table", "table"),
    ),
    "role": (
        Field("name", "name"),
        Field("description", "description"),
    ),
    "app_menu": (
        Field("$id", "key", now_id),
        Field("title", "title"),
        Field("description", "description"),
        Field("active", const(True), literal),
        Field("roles", lambda m: [m.role_name] if m.role_name else None, name_list),
    ),
    "app_module": (
        Field("title", "title"),
        Field("active", const(True), literal),
        Field("application", lambda m: f"{m['menu']}.$id", literal),
        Field("link_type", "link_type"),
        Field("name", "table"),
        Field("order", "order", literal),
        Field("override_menu_roles", const(False), literal),
        Field("require_confirmation", const(False), literal),
        Field("uncancelable", const(False), literal),
    ),
    "workspace": (
        Field("title", "title"),
        Field("description", "description"),
        Field("url_path", "url_path"),
        Field("active", const(True), literal),
    ),
    "workspace_table": (
        Field("master_config", "workspace", now_id),
        Field("table", "table_name"),
        Field("active", const(True), literal),
        Field("primary", "primary", literal),
    ),
    "ui_view": (
        Field("name", "view"),
        Field("title", lambda v: f"{v['table_name']} Workspace View"),
    ),
    "record": (
        Field("table", "table"),
        Field("$id", "key", now_id),
        Field("data", "data", raw),
    ),
    "list": (
        Field("$id", "key", now_id),
        Field("table", "table"),
        Field("view", "view", literal),
        Field("columns", "columns", raw),
    ),
}


def entries(kind: str, obj) -> list:
    """Apply a layout to an object, returning (key, rendered, note) triples."""
    out = []
    for field in LAYOUTS[kind]:
        value = field.value(obj)
        if value is None:
            continue
        out.append((field.key, field.rule(value), field.note))
    return out


# ── Text assembly ─────────────────────────────────────

def block(items: list, depth: int = 0) -> str:
    """Multi-line object literal. Nested lists become nested blocks."""
    pad = INDENT * (depth + 1)
    lines = ["{"]
    for key, text, note in items:
        if note:
            lines.append(f"{pad}// {note}")
        if isinstance(text, list):
            text = block(text, depth + 1)
        elif callable(text):
            text = text(depth + 1)
        lines.append(f"{pad}{key}: {text},")
    lines.append(INDENT * depth + "}")
    return "\n".join(lines)


def inline(pairs: list) -> str:
    return "{ " + ", ".join(f"{k}: {v}" for k, v in pairs) + " }"


def array(items: list, depth: int = 0) -> str:
    pad = INDENT * (depth + 1)
    lines = ["["]
    lines.extend(f"{pad}{item}," for item in items)
    lines.append(INDENT * depth + "]")
    return "\n".join(lines)


def render(kind: str, obj, depth: int = 0) -> str:
    return block(entries(kind, obj), depth)


COLUMN_TYPES = {
    "string": "StringColumn",
    "integer": "IntegerColumn",
    "boolean": "BooleanColumn",
    "date": "DateColumn",
    "datetime": "DateTimeColumn",
    "decimal": "DecimalColumn",
    "reference": "ReferenceColumn",
    "choice": "ChoiceColumn",
}


def column_call(column) -> Callable[[int], str]:
    """`XColumn({...})`, laid out once the enclosing depth is known."""
    factory = COLUMN_TYPES[column.type]
    items = entries("column", column)
    return lambda depth: f"{factory}({block(items, depth)})"
