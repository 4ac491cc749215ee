from market_factory.agents.market_creator.generate_market.schemas import MarketRequest

model_instruction = """
You are an expert at creating prediction market questions with clear, unambiguous resolution criteria.
You help create well-defined markets that can be objectively resolved.
"""

model_description = """
Drafts resolution criteria, description and edge cases for a prediction market question
"""

market_prompt_template = """Create a prediction market for the following question: "{question}"

Resolution Date: {resolution_date}

Please provide:
1. A well-defined resolution criteria that is appropriate for prediction markets. This should be clear, objective, and unambiguous.
2. A long-form description that explains the market, provides context, and helps traders understand what they're betting on.
3. Edge cases to consider - potential ambiguities or scenarios that might affect resolution.

Format your response as JSON with the following structure:
{{
  "resolutionCriteria": "...",
  "description": "...",
  "edgeCases": "..."
}}"""


def build_market_prompt(request: MarketRequest) -> str:
    return market_prompt_template.format(
        question=request.question,
        resolution_date=request.resolution_date.isoformat(),
    )
