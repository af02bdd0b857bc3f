"""ServiceNow Dev — MCP Server.

Run:   uv run python -m snc_mcp.server
Test:  uv run mcp dev snc_mcp/server.py
"""

import argparse
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from snc_mcp.core import Settings
from snc_mcp.prompts import new_servicenow_app
from snc_mcp.references import REFERENCES, load
from snc_mcp.tools import GENERATOR_TOOLS, SdkCommands

logger = logging.getLogger("snc_mcp.server")

INSTRUCTIONS = (
    "You help build ServiceNow applications with the Fluent SDK. "
    "snc_* command tools run the now-sdk CLI (init, build, install, auth, dependencies, transform, clean). "
    "snc_generate_* tools return Fluent .now.ts source text; write it into src/fluent/ yourself. "
    "Read the servicenow:// resources for API details before generating unfamiliar artifacts."
)


def _reader(filename: str):
    def read() -> str:
        return load(filename)
    return read


def create_server(settings: Optional[Settings] = None) -> FastMCP:
    settings = settings or Settings.from_env()
    mcp = FastMCP(name="servicenow-dev-mcp", instructions=INSTRUCTIONS)

    # Register the 9 CLI tools and the 7 generators
    for fn in SdkCommands(settings).tools():
        mcp.tool()(fn)
    for fn in GENERATOR_TOOLS:
        mcp.tool()(fn)

    for ref in REFERENCES:
        mcp.resource(ref.uri, name=ref.name, description=ref.description,
                     mime_type="text/markdown")(_reader(ref.filename))

    mcp.prompt(name="new-servicenow-app")(new_servicenow_app)
    return mcp


SETTINGS = Settings.from_env()
mcp = create_server(SETTINGS)


def main(argv=None):
    parser = argparse.ArgumentParser(description="ServiceNow Dev MCP server (stdio transport)")
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr output (default: INFO)",
    )
    args = parser.parse_args(argv)

    # stdout carries JSON-RPC, so logs go to stderr only
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    logger.info("ServiceNow Dev MCP Server running on stdio (default auth alias: %s)",
                SETTINGS.default_auth_alias)
    mcp.run()


if __name__ == "__main__":
    main()
