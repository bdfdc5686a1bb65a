# =============================================================================
# main.py  -  Entry Point for the Itinerary Planner Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (OPENROUTER_API_KEY, USE_LIVE_WEATHER, ...)
#   2. Creates the Google ADK agent (agent/planner_agent.py)
#   3. Runs an interactive loop: each message goes to the agent, which
#      calls the MCP tools (profile, itinerary, reservations) as needed
#   4. Prints tool calls as they happen and the agent's final answer
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Must run before anything reads os.environ (core/config.py, LiteLlm).
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.planner_agent import create_agent

APP_NAME = "itinerary_planner"
USER_ID = "demo_user"


async def run_agent():
    """Run the planner agent interactively until the user quits."""
    print("=" * 70)
    print("  PERSONALIZED ITINERARY PLANNER")
    print("  Powered by Google ADK + LiteLLM + FastMCP")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Agent initialized and ready!\n")
    print("💬 Tell the planner where and when you are traveling.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(role="user", parts=[types.Part(text=user_input)])

        print("\n🤖 Planner is thinking...\n")
        print("-" * 70)

        # The runner yields events as the agent reasons: text parts and
        # function calls.  The last text part is the answer.
        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text
                    if getattr(part, "function_call", None):
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Planner:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
