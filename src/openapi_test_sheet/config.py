"""Run settings for test case generation."""

from typing import Literal, get_args

from pydantic import BaseModel, Field

DEFAULT_OUTPUT = "api-test-cases.xlsx"

InvalidBodyStrategy = Literal["random", "omit", "corrupt", "alternate"]
INVALID_BODY_STRATEGIES = get_args(InvalidBodyStrategy)

ENV_PREFIX = "OPENAPI_TEST_SHEET_"


class GeneratorSettings(BaseModel):
    """Knobs that change how fixtures and references are produced."""

    seed: int | None = None  # None = unseeded coin flips
    invalid_body: InvalidBodyStrategy = "random"
    ref_depth: int = Field(default=1, ge=1)
