import os
from typing import Any, TypeVar

from dotenv import dotenv_values

from .env import Env

T = TypeVar("T", bound=Env)


def load_env(
    default: type[T],
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build ``default`` from the ``COTLINK_*`` process environment, then the
    ``.env`` file (which wins over the process), then any fields explicitly
    set on ``override``.
    """
    converters = default.types_map()

    if env_file is None:
        env_file = ".env"

    sources: list[dict[str, str | None]] = [dict(os.environ)]
    if os.path.exists(env_file):
        sources.append(dotenv_values(dotenv_path=env_file))

    values: dict[str, Any] = {}
    for source in sources:
        for name, convert in converters.items():
            if raw := source.get(name):
                values[name] = convert(raw)

    if override is not None:
        values.update(override.model_dump(exclude_unset=True))
        default = type(override)

    return default(**values)
