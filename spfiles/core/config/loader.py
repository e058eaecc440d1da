"""Resolve the effective site configuration from profiles and environment."""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from spfiles.core.config.profiles import ProfileManager
from spfiles.core.config.site_config import SiteConfig
from spfiles.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_OVERRIDES = {
    "SPFILES_SITE_URL": "site_url",
    "SPFILES_ACCESS_TOKEN": "access_token",
    "SPFILES_ODATA_MODE": "odata_mode",
    "SPFILES_CHUNK_SIZE": "chunk_size",
    "SPFILES_HTTP_TIMEOUT": "timeout",
    "SPFILES_HTTP_RETRIES": "retries",
}


def load_site_config(
    profile: str | None = None, config_dir: Path | None = None
) -> SiteConfig:
    """Build the site configuration for a client.

    Values come from the named profile (if any) and are then overridden by
    ``SPFILES_*`` environment variables that are set.

    Args:
        profile: Optional profile name to load from disk.
        config_dir: Optional config directory holding the profiles.

    Returns:
        The validated site configuration.

    Raises:
        ProfileNotFound: If ``profile`` names a profile that does not exist.
        ConfigError: If the merged values are invalid or no site URL is set.
    """
    values = {}
    if profile is not None:
        values = ProfileManager(config_dir).get_profile(profile).model_dump()

    for env_name, field_name in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value:
            logger.debug(f"Overriding {field_name} from {env_name}")
            values[field_name] = env_value

    try:
        config = SiteConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid site configuration: {exc}") from exc

    if not config.site_url:
        raise ConfigError(
            "No site URL configured; set SPFILES_SITE_URL or use a profile."
        )
    return config
