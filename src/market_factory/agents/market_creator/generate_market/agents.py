import argparse
import json
import sys
from typing import Optional

import asyncio
from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types
from pydantic import ValidationError

from market_factory.agents.market_creator.generate_market.schemas import (
    MarketRequest,
)
from market_factory.agents.market_creator.generate_market.prompts import (
    build_market_prompt,
    model_instruction,
    model_description,
)
from market_factory.parsing.response_parser import parse_model_response
from market_factory.parsing.schemas import MarketDetails
from market_factory.config import ConfigurationError, config, ensure_api_key

target_model = config.default_model
model_name = "market_creator_agent"
output_key = "market_raw_response"


def make_market_creator_agent() -> Agent:
    # no output_schema: the raw answer goes through parse_model_response
    return Agent(
        model=LiteLlm(model=target_model),
        name=model_name,
        instruction=model_instruction,
        description=model_description,
        generate_content_config=types.GenerateContentConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
        ),
        output_key=output_key,
    )


async def run_market_agent(
    agent: Agent,
    request: MarketRequest,
    session_service: InMemorySessionService,
    app_name: str,
    user_id: str,
) -> str:
    # fresh session
    session = await session_service.create_session(app_name=app_name, user_id=user_id)
    runner = Runner(agent=agent, app_name=app_name, session_service=session_service)

    new_message = types.Content(
        role="user", parts=[types.Part(text=build_market_prompt(request))]
    )

    async for _ in runner.run_async(
        user_id=user_id, session_id=session.id, new_message=new_message
    ):
        pass

    refreshed = await session_service.get_session(
        app_name=app_name, user_id=user_id, session_id=session.id
    )
    result = refreshed.state.get(output_key)
    return result if isinstance(result, str) else ""


async def generate_market(
    request: MarketRequest,
    agent: Optional[Agent] = None,
    session_service: Optional[InMemorySessionService] = None,
    app_name: str = config.app_name,
    user_id: str = config.user_id,
) -> MarketDetails:
    """
    Ask the model for market details and parse its answer.

    Args:
        request: Validated question and resolution date
        agent: Agent to run, a fresh market creator agent by default
        session_service: Session service, a new in-memory one by default
        app_name: ADK application name
        user_id: ADK user id

    Returns:
        MarketDetails, with the not-found sentinel for sections the answer lacks

    Raises:
        ConfigurationError: If the API key environment variable is not set
    """
    ensure_api_key(config)

    raw_response = await run_market_agent(
        agent=agent or make_market_creator_agent(),
        request=request,
        session_service=session_service or InMemorySessionService(),
        app_name=app_name,
        user_id=user_id,
    )
    print(f"[INFO] Model answered with {len(raw_response)} characters")
    return parse_model_response(raw_response)


# ---- CLI ----
def _parse_args(argv=None):
    ap = argparse.ArgumentParser(
        description="Market creator: draft resolution criteria, description and edge cases"
    )
    ap.add_argument(
        "--question", required=True, help="e.g., Will AI achieve AGI by 2030?"
    )
    ap.add_argument("--resolution-date", required=True, help="e.g., 2030-12-31")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    try:
        request = MarketRequest(
            question=args.question, resolution_date=args.resolution_date
        )
    except ValidationError:
        print("[ERROR] Please fill in both the question and resolution date")
        return 1

    try:
        details = asyncio.run(generate_market(request))
    except ConfigurationError as e:
        print(f"[ERROR] {e}")
        return 1
    except Exception as e:
        print(f"[ERROR] Failed to generate content: {e!r}")
        return 1

    print(json.dumps(details.model_dump(by_alias=True), ensure_ascii=False, indent=4))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
