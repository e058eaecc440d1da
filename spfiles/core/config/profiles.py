"""Named site profiles stored as YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from spfiles.core.config.site_config import SiteConfig
from spfiles.core.const import CONFIG_DIR
from spfiles.core.exceptions import ConfigError, ProfileAlreadyExist, ProfileNotFound


class ProfileManager:
    """Manage site profiles stored under the spfiles config directory."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialise ProfileManager.

        Args:
            config_dir: Root config directory. Defaults to ``CONFIG_DIR``.
        """
        self._config_dir = Path(config_dir or CONFIG_DIR)

    @property
    def profiles_dir(self) -> Path:
        """Return the directory where profiles are stored."""
        return self._config_dir / "profiles"

    def _get_profile_path(self, profile: str) -> Path:
        self.profiles_dir.mkdir(parents=True, exist_ok=True)
        return self.profiles_dir / f"{profile}.yaml"

    def list_profiles(self) -> list[str]:
        """List available profile names, without the ``.yaml`` suffix."""
        if not self.profiles_dir.exists():
            return []
        return sorted(
            path.stem
            for path in self.profiles_dir.iterdir()
            if path.is_file() and path.suffix == ".yaml"
        )

    def get_profile(self, profile: str) -> SiteConfig:
        """Load a profile from disk.

        Args:
            profile: Name of the profile to load.

        Returns:
            Parsed site configuration for the profile.

        Raises:
            ProfileNotFound: If the profile file does not exist.
            ConfigError: If the profile file holds invalid values.
        """
        profile_path = self._get_profile_path(profile)
        try:
            with profile_path.open("r") as profile_file:
                profile_data = yaml.safe_load(profile_file) or {}
        except FileNotFoundError as exc:
            raise ProfileNotFound(f"Profile {profile!r} not found.") from exc

        try:
            return SiteConfig(**profile_data)
        except ValidationError as exc:
            raise ConfigError(f"Profile {profile!r} is invalid: {exc}") from exc

    def create_profile(self, profile: str, config: SiteConfig | None = None) -> None:
        """Create a new profile, with default values unless ``config`` is given.

        Raises:
            ProfileAlreadyExist: If a profile with the same name already exists.
        """
        profile_path = self._get_profile_path(profile)
        site_config = config or SiteConfig()
        try:
            with profile_path.open("x") as profile_file:
                yaml.safe_dump(site_config.model_dump(), profile_file)
        except FileExistsError as exc:
            raise ProfileAlreadyExist(f"Profile {profile!r} already exists.") from exc

    def update_profile(self, profile: str, updates: dict[str, Any]) -> SiteConfig:
        """Update an existing profile with the provided field values.

        Fields whose value is ``None`` are left untouched.

        Raises:
            ProfileNotFound: If the profile file does not exist.
            ConfigError: If the updated values are invalid.
        """
        current = self.get_profile(profile)
        filtered_updates = {
            name: value for name, value in updates.items() if value is not None
        }
        try:
            new_config = SiteConfig.model_validate(
                {**current.model_dump(), **filtered_updates}
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid update for profile {profile!r}: {exc}") from exc

        with self._get_profile_path(profile).open("w") as profile_file:
            yaml.safe_dump(new_config.model_dump(), profile_file)
        return new_config

    def delete_profile(self, profile: str) -> None:
        """Delete a profile file.

        Raises:
            ProfileNotFound: If the profile file does not exist.
        """
        try:
            self._get_profile_path(profile).unlink()
        except FileNotFoundError as exc:
            raise ProfileNotFound(f"Profile {profile!r} not found.") from exc
