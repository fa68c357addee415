"""Engine configuration.

Defaults are fine for the board view. Embedders can override them through
the environment (or a .env file in the working directory or one of its
parents):

    TREEFLOW_MAX_CHILDREN_VISIBLE  children shown per parent before overflow
    TREEFLOW_MAX_DEPTH             nesting depth at which building stops
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from treeflow.node_types import MAX_CHILDREN_VISIBLE

DEFAULT_MAX_DEPTH = 64


class EngineConfig(BaseModel):
    max_children_visible: int = Field(default=MAX_CHILDREN_VISIBLE, ge=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "EngineConfig":
        """Read overrides from the environment, loading ``env_file`` first.

        Without ``env_file`` the nearest .env searching up from the working
        directory is used. Variables already set in the environment win.

        Unset variables keep their defaults. Invalid values raise
        pydantic.ValidationError.
        """
        load_dotenv(env_file if env_file is not None else find_dotenv(usecwd=True))
        values: dict[str, str] = {}
        if os.environ.get("TREEFLOW_MAX_CHILDREN_VISIBLE"):
            values["max_children_visible"] = os.environ["TREEFLOW_MAX_CHILDREN_VISIBLE"]
        if os.environ.get("TREEFLOW_MAX_DEPTH"):
            values["max_depth"] = os.environ["TREEFLOW_MAX_DEPTH"]
        return cls.model_validate(values)


DEFAULT_CONFIG = EngineConfig()
