"""Request models for the generator tools.

Each model is the declared input shape of one tool. Callers send camelCase
keys; the models also accept the Python field names. Validation is
all-or-nothing: a bad field raises pydantic.ValidationError before any
text is generated.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from snc_mcp.core import id_key

ColumnType = Literal["string", "integer", "boolean", "date", "datetime", "decimal", "reference", "choice"]
TriggerType = Literal["created", "updated", "createdOrUpdated"]
ActionType = Literal["log", "updateRecord", "sendEmail", "lookUpRecord"]
RuleWhen = Literal["before", "after", "async", "display"]
RuleAction = Literal["insert", "update", "delete", "query"]
AclOperation = Literal["create", "read", "write", "delete"]
LinkType = Literal["LIST", "NEW"]

ACL_OPERATIONS: list[AclOperation] = ["create", "read", "write", "delete"]


class Shape(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


def _unique(values: list) -> list:
    return list(dict.fromkeys(values))


# sets on the wire: duplicates dropped, first occurrence order kept
RuleActions = Annotated[list[RuleAction], AfterValidator(_unique)]
AclOperations = Annotated[list[AclOperation], AfterValidator(_unique)]


# ── Tables ────────────────────────────────────────────

class ColumnSpec(Shape):
    name: str = Field(description="Column field name (snake_case)")
    type: ColumnType = Field(description="Column type")
    label: str = Field(description="Display label")
    mandatory: Optional[bool] = Field(None, description="Required field")
    max_length: Optional[int] = Field(None, description="Max length (string only)")
    reference_table: Optional[str] = Field(None, description="Referenced table name (reference only)")
    choices: Optional[dict[str, str]] = Field(None, description="Choice key to label map (choice only)")
    default_value: Optional[str] = Field(None, description="Default value")


class TableRequest(Shape):
    table_name: str
    label: str
    columns: list[ColumnSpec]
    display_column: Optional[str] = None


# ── Flows ─────────────────────────────────────────────

class ActionSpec(Shape):
    """A flow action as sent over the wire: a type plus a string map."""

    type: ActionType = Field(description="Action type")
    config: dict[str, str] = Field(description="Action-specific configuration")

    def decode(self) -> "FlowAction":
        return _FLOW_ACTION.validate_python(_flatten(self.type, self.config))


class LogAction(Shape):
    type: Literal["log"] = "log"
    level: str = "info"
    message: str = "Flow executed"


class UpdateRecordAction(Shape):
    type: Literal["updateRecord"] = "updateRecord"
    table: Optional[str] = None
    values: dict[str, str] = {}


class SendEmailAction(Shape):
    type: Literal["sendEmail"] = "sendEmail"
    subject: str = "Notification"
    body: str = ""
    to: str = ""


class LookUpRecordAction(Shape):
    type: Literal["lookUpRecord"] = "lookUpRecord"
    table: str = "sys_user"
    conditions: str = ""


FlowAction = Annotated[
    Union[LogAction, UpdateRecordAction, SendEmailAction, LookUpRecordAction],
    Field(discriminator="type"),
]
_FLOW_ACTION = TypeAdapter(FlowAction)


def _flatten(kind: str, config: dict) -> dict:
    # updateRecord: every key but `table` is a field assignment
    if kind == "updateRecord":
        return {
            "type": kind,
            "table": config.get("table") or None,
            "values": {k: v for k, v in config.items() if k != "table"},
        }
    # empty strings fall back to the documented defaults; a config key never changes the kind
    return {**{k: v for k, v in config.items() if v and k != "type"}, "type": kind}


class FlowRequest(Shape):
    name: str
    description: str
    trigger_type: TriggerType
    table: str
    condition: Optional[str] = None
    actions: list[FlowAction]

    @field_validator("actions", mode="before")
    @classmethod
    def decode_actions(cls, value):
        if not isinstance(value, list):
            return value
        decoded = []
        for item in value:
            if isinstance(item, ActionSpec):
                item = _flatten(item.type, item.config)
            elif isinstance(item, dict) and isinstance(item.get("config"), dict):
                item = _flatten(item.get("type"), item["config"])
            decoded.append(item)
        return decoded

    @property
    def key(self) -> str:
        return id_key(self.name)


# ── Business rules, ACLs, roles ───────────────────────

class BusinessRuleRequest(Shape):
    name: str
    table: str
    when: RuleWhen
    actions: RuleActions
    condition: Optional[str] = None
    script_body: str
    script_function_name: Optional[str] = None

    @property
    def key(self) -> str:
        return id_key(self.name)

    @property
    def function_name(self) -> str:
        return self.script_function_name or f"{self.key}Script"


class AclRequest(Shape):
    table: str
    operations: AclOperations = Field(default_factory=lambda: list(ACL_OPERATIONS))
    role_name: Optional[str] = None
    role_import_path: Optional[str] = None


class RoleRequest(Shape):
    name: str
    description: str
    export_name: Optional[str] = None

    @property
    def var_name(self) -> str:
        return self.export_name or id_key(self.name.split(".")[-1] or self.name)


# ── Navigation and workspace ──────────────────────────

class MenuModule(Shape):
    title: str = Field(description="Module title")
    table: str = Field(description="Table name for the module")
    link_type: LinkType = Field("LIST", description="LIST for list view, NEW for create form")
    order: int = Field(description="Display order")


class AppMenuRequest(Shape):
    title: str
    description: str
    modules: list[MenuModule]
    role_name: Optional[str] = None
    role_import_path: Optional[str] = None

    @property
    def key(self) -> str:
        return id_key(self.title)


class WorkspaceTable(Shape):
    table_name: str = Field(description="Table name")
    primary: bool = Field(False, description="Is this the primary table")
    list_columns: list[str] = Field(description="Column names for the list view")


class WorkspaceRequest(Shape):
    title: str
    url_path: str
    description: str
    tables: list[WorkspaceTable]

    @property
    def key(self) -> str:
        return id_key(self.title)
