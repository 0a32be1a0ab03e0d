"""Multi-source resolution of service configuration and credentials.

Service properties are keyed by a service name. For the service
``open_toolchain`` the property ``URL`` comes from ``OPEN_TOOLCHAIN_URL``,
``AUTH_TYPE`` from ``OPEN_TOOLCHAIN_AUTH_TYPE``, and so on.

Resolution order (highest to lowest priority):
1. Explicitly provided value (constructor arguments, ServiceOptions)
2. Credentials file (python-dotenv format), overlaid on the environment
3. Environment variable
4. Default value

The credentials file is taken from ``IBM_CREDENTIALS_FILE`` when set,
otherwise ``ibm-credentials.env`` in the working directory, otherwise in the
home directory.

Example:
    ```python
    from open_toolchain_sdk.auth import CredentialResolver

    resolver = CredentialResolver()
    props = resolver.service_properties("open_toolchain")
    url = props.get("URL")
    ```

Security Considerations:
    - Credentials are never logged in full (masked with ***)
    - Only source information is logged (env var name, file path, etc.)
    - File-based credentials have whitespace stripped
    - Thread-safe credentials file loading with lock
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from threading import Lock

from dotenv import dotenv_values

from open_toolchain_sdk.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

CREDENTIALS_FILE_ENV_VAR = "IBM_CREDENTIALS_FILE"
DEFAULT_CREDENTIALS_FILENAME = "ibm-credentials.env"

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


def service_env_prefix(service_name: str) -> str:
    """Environment variable prefix for a service name (``open_toolchain`` → ``OPEN_TOOLCHAIN_``)."""
    return service_name.upper().replace("-", "_") + "_"


def parse_bool(value: str | None) -> bool:
    return value is not None and value.strip().lower() in TRUE_VALUES


def _expand(path: str | Path) -> Path:
    return Path(os.path.expanduser(os.path.expandvars(str(path))))


class CredentialResolver:
    """Resolve service properties and credentials from multiple sources.

    Attributes:
        _file_loaded: Whether the credentials file has been loaded.
        _file_lock: Thread lock for safe credentials file loading.

    Example:
        ```python
        resolver = CredentialResolver()

        # All OPEN_TOOLCHAIN_* properties, file values overriding env
        props = resolver.service_properties("open_toolchain")

        # One value, explicit beats file beats env beats default
        apikey = resolver.resolve(env_var_name="OPEN_TOOLCHAIN_APIKEY", required=True)
        ```
    """

    def __init__(
        self,
        credentials_file: str | Path | None = None,
        load_credentials_file: bool = True,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize credential resolver.

        Args:
            credentials_file: Path to a credentials file. If None, uses
                ``IBM_CREDENTIALS_FILE`` or searches the working and home
                directories for ``ibm-credentials.env``.
            load_credentials_file: Whether to read a credentials file at all.
            environ: Environment mapping to read; defaults to ``os.environ``.
        """
        self._file_loaded = False
        self._file_lock = Lock()
        self._file_values: dict[str, str] = {}
        self._credentials_file = credentials_file
        self._load_file_enabled = load_credentials_file
        self._environ = environ

        if self._load_file_enabled:
            self._ensure_file_loaded()

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _locate_credentials_file(self) -> Path | None:
        if self._credentials_file is not None:
            return _expand(self._credentials_file)

        from_env = self.environ.get(CREDENTIALS_FILE_ENV_VAR)
        if from_env:
            return _expand(from_env)

        for candidate in (Path.cwd() / DEFAULT_CREDENTIALS_FILENAME, Path.home() / DEFAULT_CREDENTIALS_FILENAME):
            if candidate.is_file():
                return candidate
        return None

    def _ensure_file_loaded(self) -> None:
        """Load the credentials file once (thread-safe)."""
        if self._file_loaded:
            return

        with self._file_lock:
            # Double-check pattern for thread safety
            if self._file_loaded:
                return

            path = self._locate_credentials_file()
            if path is None:
                self._file_loaded = True
                return

            if not path.is_file():
                logger.warning(f"Credentials file not found: {path}")
                self._file_loaded = True
                return

            try:
                values = dotenv_values(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to load credentials file {path}: {e}")
                self._file_loaded = True
                return

            self._file_values = {k: v for k, v in values.items() if v is not None}
            self._file_loaded = True
            logger.debug(f"Loaded {len(self._file_values)} values from credentials file {path}")

    def _mask_credential(self, value: str | None) -> str:
        """Mask a credential value for safe logging."""
        if value is None:
            return "None"
        return "***"

    def service_properties(self, service_name: str) -> dict[str, str]:
        """Collect every configured property for a service.

        Args:
            service_name: Service name, e.g. ``open_toolchain``.

        Returns:
            Mapping of property name without prefix (``URL``, ``AUTH_TYPE``,
            ``APIKEY``, ...) to value. Credentials file values override
            environment values.
        """
        prefix = service_env_prefix(service_name)
        props: dict[str, str] = {}

        for key, value in self.environ.items():
            if key.startswith(prefix) and len(key) > len(prefix):
                props[key[len(prefix) :]] = value

        if self._load_file_enabled:
            self._ensure_file_loaded()
            for key, value in self._file_values.items():
                if key.startswith(prefix) and len(key) > len(prefix):
                    props[key[len(prefix) :]] = value

        if props:
            logger.debug(f"Resolved service properties for {service_name!r}: {sorted(props)}")
        return props

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a single credential from multiple sources.

        Resolution order (first match wins):
        1. Explicitly provided ``value``
        2. Credentials file entry named ``env_var_name``
        3. Environment variable ``env_var_name``
        4. ``default``

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Variable name to look up in the credentials file and environment.
            default: Default value if not found elsewhere.
            required: If True, raises CredentialNotFoundError when not resolved.
            mask_in_logs: If True (default), masks the value in log messages.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required=True and the credential was not found.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in self._file_values:
            result = self._file_values[env_var_name]
            source = f"credentials file entry '{env_var_name}'"
        elif env_var_name and env_var_name in self.environ:
            result = self.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = self._mask_credential(result) if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential (such as a compute resource token) from a file.

        Supports ``~`` and ``$VAR`` expansion. The path may come from
        ``file_path`` or, failing that, from ``env_var_name``. Contents are
        stripped of surrounding whitespace.

        Returns:
            File contents, or None if the file is missing and not required.

        Raises:
            CredentialFileError: If required=True and no path is given or the
                file cannot be read.
        """
        if file_path is None and env_var_name:
            file_path = self.resolve(env_var_name=env_var_name) or None

        if file_path is None:
            if required:
                hint = f" ({env_var_name} is not set)" if env_var_name else ""
                raise CredentialFileError(f"no credential file given{hint}")
            return None

        path = _expand(file_path)
        try:
            content = path.read_text().strip()
        except OSError as e:
            reason = "not found" if isinstance(e, FileNotFoundError) else f"unreadable ({e.strerror or e})"
            if required:
                raise CredentialFileError(f"credential file {path} {reason}") from e
            log = logger.debug if isinstance(e, FileNotFoundError) else logger.warning
            log(f"Skipping credential file {path}: {reason}")
            return None

        logger.debug(f"Read credential from file {path} (***)")
        return content


def get_service_properties(service_name: str, resolver: CredentialResolver | None = None) -> dict[str, str]:
    """Shortcut for ``CredentialResolver().service_properties(service_name)``."""
    return (resolver or CredentialResolver()).service_properties(service_name)
