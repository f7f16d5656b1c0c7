# =============================================================================
# main.py  —  Interactive console for the Trade Data Analyst agent
# =============================================================================
#
# HOW TO RUN:
#   python main.py
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (trade_agent/analyst_agent.py), which
#      starts the MCP tool server as a subprocess
#   2. Opens an in-memory session
#   3. Sends each question to the agent and prints the tools it calls
#   4. Prints the agent's final answer
#
# ENVIRONMENT (.env is loaded automatically):
#   APIM_GRAPHQL_ENDPOINT, APIM_SUBSCRIPTION_KEY   for the tool server
#   OPENROUTER_API_KEY (or the key for AGENT_MODEL)  for the LLM
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm reads its API key from the
# environment at construction time, and the MCP subprocess inherits it.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from trade_agent.analyst_agent import create_agent

APP_NAME = "trade_analyst"
USER_ID = "console_user"


async def run_agent():
    """Run the trade analyst agent in a console loop."""
    print("=" * 70)
    print("  TAIWAN TRADE DATA ANALYST")
    print("  Google ADK + LiteLLM + FastMCP + GraphQL")
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

    print("✅ Agent ready!\n")
    print("💬 Ask about Taiwan's imports and exports (type 'quit' to exit)")
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

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

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
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")
        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
