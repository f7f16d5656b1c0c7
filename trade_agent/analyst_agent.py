# =============================================================================
# trade_agent/analyst_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that receives trade questions, calls the
#   MCP query tools, and writes the answer.
#
# ARCHITECTURE:
#
#     ADK Agent (LiteLlm model + system prompt)
#            │  MCP over stdio
#            ▼
#     FastMCP server (trade_tools/mcp_server.py)
#            │  build_query + execute_graphql
#            ▼
#     trade_core/  →  GraphQL gateway
#
#   ADK starts the MCP server as a subprocess and talks to it over
#   stdin/stdout; the agent discovers the tools automatically.
#
# MODEL:
#   Any LiteLLM model string works.  Set AGENT_MODEL to switch; the default
#   routes GPT-4o through OpenRouter (reads OPENROUTER_API_KEY).
# =============================================================================

import os
import sys

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from trade_agent.prompt import get_trade_analyst_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent() -> Agent:
    """Create the trade analyst agent wired to the MCP tool server.

    The agent holds no query logic of its own:
        trade_agent/ → orchestration only
        trade_tools/ → MCP wrappers only
        trade_core/  → query building and transport
    """
    # Run the server as a module from the project root so `trade_core`
    # is importable in the subprocess; reuse this interpreter's venv.
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command=sys.executable,
            args=["-m", "trade_tools.mcp_server"],
            cwd=project_root,
        ),
    )

    return Agent(
        name="trade_data_analyst",
        model=LiteLlm(model=os.environ.get("AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_trade_analyst_prompt(),
        tools=[mcp_tools],
    )
