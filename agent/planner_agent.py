# =============================================================================
# agent/planner_agent.py  -  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that talks to the traveler and drives the
#   MCP tools in tools/mcp_server.py.
#
# ARCHITECTURE:
#   Google ADK handles orchestration (tool calling, sessions); the model is
#   any LiteLLM model string, OpenRouter-routed GPT-4o by default
#   (PLANNER_MODEL).
#
#       ADK Agent  ──▶  LiteLlm (reasoning)
#           │
#           └──▶  MCPToolset ──stdio──▶ tools/mcp_server.py ──▶ core/
#
# MCP CONNECTION:
#   ADK starts the FastMCP server as a subprocess via "uv run" so it uses
#   the project's virtual environment, then discovers the tools over
#   stdin/stdout.  It runs as a module from the project root so core/ is
#   importable.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_planner_prompt
from core import config


def create_agent() -> Agent:
    """Create the itinerary planner agent with its MCP tool connection."""
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=project_root,
        ),
    )

    # LiteLlm reads OPENROUTER_API_KEY (or the provider's own key) from the
    # environment.
    return Agent(
        name="itinerary_planner",
        model=LiteLlm(model=config.PLANNER_MODEL),
        instruction=get_planner_prompt(),
        tools=[mcp_tools],
    )
