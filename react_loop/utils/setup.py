from __future__ import annotations

import logging
import os
from pathlib import Path

from omegaconf import OmegaConf

from react_loop.utils.settings import API_KEY_ENV

logger = logging.getLogger(__name__)


def setup(secrets_path: str | Path = "config.yml") -> None:
    """Export the API key from a local secrets file unless the environment already has one."""
    path = Path(secrets_path)
    if os.environ.get(API_KEY_ENV) or not path.exists():
        return
    secrets = OmegaConf.load(path)
    api_key = secrets.get("dash_scope_api_key")
    if api_key:
        os.environ[API_KEY_ENV] = str(api_key)
        logger.debug("Loaded %s from %s", API_KEY_ENV, path)
