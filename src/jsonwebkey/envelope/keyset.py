"""JSON Web Key Sets (RFC 7517 section 5)."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Optional, Union

import httpx
import yaml
from pydantic import BaseModel, Field

from ..core.config import get_settings
from ..core.enums import Algorithm, KeyUse
from ..core.errors import JsonWebKeyError, KeySetError
from .record import JsonWebKey

logger = logging.getLogger(__name__)


class JsonWebKeySet(BaseModel):
    """An ordered collection of JSON Web Keys, looked up by ``kid``."""

    keys: list[JsonWebKey] = Field(default_factory=list)

    def add(self, jwk: JsonWebKey) -> None:
        """Add a key, replacing any existing key with the same ``kid``.

        Args:
            jwk: Key to add
        """
        if jwk.key_id is not None:
            self.remove(jwk.key_id)
        self.keys.append(jwk)

    def remove(self, key_id: str) -> None:
        """Remove every key with the given ``kid``."""
        self.keys = [jwk for jwk in self.keys if jwk.key_id != key_id]

    def get(self, key_id: str) -> Optional[JsonWebKey]:
        """Get a key by ``kid``.

        Returns:
            JsonWebKey if found, None otherwise
        """
        for jwk in self.keys:
            if jwk.key_id == key_id:
                return jwk
        return None

    def find(
        self,
        algorithm: Optional[Algorithm] = None,
        key_use: Optional[KeyUse] = None,
    ) -> list[JsonWebKey]:
        """List keys matching the given ``alg`` and ``use`` (None matches anything).

        Keys without an ``alg`` match when the key type supports the algorithm.
        """
        matches = []
        for jwk in self.keys:
            if algorithm is not None:
                if jwk.algorithm is not None and jwk.algorithm != algorithm:
                    continue
                if not jwk.key.is_algorithm_compatible(algorithm):
                    continue
            if key_use is not None and jwk.key_use not in (None, key_use):
                continue
            matches.append(jwk)
        return matches

    def to_public(self) -> "JsonWebKeySet":
        """Public halves of the asymmetric keys; symmetric keys are dropped."""
        public = (jwk.to_public() for jwk in self.keys)
        return JsonWebKeySet(keys=[jwk for jwk in public if jwk is not None])

    def to_dict(self) -> dict[str, Any]:
        return {"keys": [jwk.to_dict() for jwk in self.keys]}

    def to_json(self) -> str:
        return self.model_dump_json()

    def zeroize(self) -> None:
        for jwk in self.keys:
            jwk.zeroize()

    def __iter__(self) -> Iterator[JsonWebKey]:  # type: ignore[override]
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    @classmethod
    def from_dict(cls, data: Any, strict: bool = True) -> "JsonWebKeySet":
        """Build a key set from a decoded ``{"keys": [...]}`` object.

        Args:
            data: Decoded JSON/YAML document
            strict: If False, skip keys that fail to parse instead of raising

        Raises:
            KeySetError: If the document is not a key set, or a key is invalid
                and strict is True
        """
        if not isinstance(data, dict) or not isinstance(data.get("keys"), list):
            raise KeySetError('key set must be an object with a "keys" array')

        keys = []
        for index, entry in enumerate(data["keys"]):
            try:
                keys.append(JsonWebKey.from_dict(entry))
            except JsonWebKeyError as e:
                if strict:
                    raise KeySetError(f"invalid key at index {index}: {e}") from e
                logger.warning("Skipping key at index %d: %s", index, e)
        return cls(keys=keys)

    @classmethod
    def parse(cls, data: Union[str, bytes], strict: bool = True) -> "JsonWebKeySet":
        """Parse a key set from JSON text."""
        try:
            document = json.loads(data)
        except ValueError as e:
            raise KeySetError(f"key set is not valid JSON: {e}") from e
        return cls.from_dict(document, strict=strict)

    @classmethod
    def from_config(cls, config_path: Union[str, Path], strict: bool = True) -> "JsonWebKeySet":
        """Load a key set from a YAML (or JSON) file.

        Args:
            config_path: Path to the file

        Returns:
            JsonWebKeySet instance

        Raises:
            KeySetError: If the file cannot be read or parsed
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise KeySetError(f"Key set file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise KeySetError(f"Failed to load key set: {e}") from e

        key_set = cls.from_dict(data, strict=strict)
        logger.debug("Loaded %d keys from %s", len(key_set), config_path)
        return key_set

    def save(self, config_path: Union[str, Path]) -> None:
        """Save the key set to a YAML file.

        Args:
            config_path: Path to save the YAML file
        """
        config_path = Path(config_path)
        try:
            with open(config_path, "w") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise KeySetError(f"Failed to save key set: {e}") from e

    @classmethod
    def fetch(
        cls,
        url: str,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        strict: bool = True,
    ) -> "JsonWebKeySet":
        """Download a key set, e.g. from an OpenID provider's ``jwks_uri``.

        Args:
            url: Key set URL
            client: Optional httpx client (a short-lived one is created otherwise)
            timeout: Request timeout in seconds (default: Settings.http_timeout)
            strict: If False, skip keys that fail to parse

        Raises:
            KeySetError: On transport errors, non-2xx responses or invalid content
        """
        try:
            if client is None:
                timeout = timeout if timeout is not None else get_settings().http_timeout
                with httpx.Client(timeout=timeout) as own_client:
                    response = own_client.get(url)
            else:
                response = client.get(url)
            response.raise_for_status()
            document = response.json()
        except httpx.HTTPError as e:
            raise KeySetError(f"Failed to fetch key set from {url}: {e}") from e
        except ValueError as e:
            raise KeySetError(f"Key set at {url} is not valid JSON: {e}") from e

        key_set = cls.from_dict(document, strict=strict)
        logger.debug("Fetched %d keys from %s", len(key_set), url)
        return key_set
