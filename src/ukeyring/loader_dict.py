__version__ = "1.1.0"

from collections import UserDict
from pathlib import Path

from zenlib.logging import loggify
from zenlib.util import colorize

from .exceptions import ValidationError
from .gpg_executor import DEFAULT_TIMEOUT
from .hkp_fetcher import DEFAULT_ATTEMPTS, DEFAULT_DELAY
from .keyring_specifier import DEFAULT_KEYRING, is_default

TRUE_STRINGS = ("true", "yes", "on", "1")
FALSE_STRINGS = ("false", "no", "off", "0")


def to_tristate(value):
    """Converts a value to True, False, or None (unset)."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in TRUE_STRINGS:
            return True
        if value.lower() in FALSE_STRINGS:
            return False
    raise ValueError("Invalid boolean value: %r" % value)


@loggify
class KeyLoaderConfigDict(UserDict):
    """
    Dict for ukeyring config.

    Only parameters in builtin_parameters may be set, values are converted to the registered type.
    If a _process_<name> method exists, it is used to set the parameter instead.
    """

    builtin_parameters = {
        "key_contents": str,  # Armored key text
        "key_file": Path,  # File to read key_contents from
        "keyserver": str,  # HKP key server to fetch key_id from
        "key_id": str,
        "for_user": str,  # User to run gpg as, the current user if unset
        "gnupg_home": Path,  # Overrides the user's gpg home directory
        "keyring_file_public": str,
        "keyring_file_secret": str,
        "disable_trust_db_check": bool,  # None leaves gpg's default
        "force_import_owner_trust": bool,  # None trusts secret keys in the default keyrings only
        "gpg_binary": str,
        "timeout": int,  # Timeout for each gpg command, in seconds
        "fetch_attempts": int,
        "fetch_delay": float,
    }

    defaults = {
        "key_contents": "",
        "key_file": None,
        "keyserver": "",
        "key_id": "",
        "for_user": "",
        "gnupg_home": None,
        "keyring_file_public": DEFAULT_KEYRING,
        "keyring_file_secret": DEFAULT_KEYRING,
        "disable_trust_db_check": None,
        "force_import_owner_trust": None,
        "gpg_binary": "gpg",
        "timeout": DEFAULT_TIMEOUT,
        "fetch_attempts": DEFAULT_ATTEMPTS,
        "fetch_delay": DEFAULT_DELAY,
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.data.update(self.defaults)

    def import_args(self, args: dict, quiet=False) -> None:
        """Imports data from an argument dict."""
        log_level = 10 if quiet else 20
        for arg, value in args.items():
            self.logger.log(log_level, f"[{colorize(arg, 'blue')}] Setting from arguments: {colorize(value, 'green')}")
            self[arg] = value

    def __setitem__(self, key: str, value) -> None:
        if key not in self.builtin_parameters:
            raise KeyError("Parameter not registered: %s" % key)

        if hasattr(self, f"_process_{key}"):
            self.logger.log(5, "[%s] Using builtin setitem: %s" % (key, f"_process_{key}"))
            return getattr(self, f"_process_{key}")(value)

        if value is None:
            self.logger.debug("Resetting parameter to default: %s" % key)
            self.data[key] = self.defaults[key]
            return

        self.data[key] = self.builtin_parameters[key](value)

    def _process_key_file(self, key_file) -> None:
        """Sets key_contents from the file."""
        if not key_file:
            self.data["key_file"] = None
            return

        key_file = Path(key_file)
        self.logger.info("Reading key contents from: %s" % colorize(key_file, "blue"))
        self.data["key_file"] = key_file
        self["key_contents"] = key_file.read_text()

    def _process_gnupg_home(self, gnupg_home) -> None:
        self.data["gnupg_home"] = Path(gnupg_home) if gnupg_home else None

    def _process_keyring_file_public(self, keyring) -> None:
        self.data["keyring_file_public"] = DEFAULT_KEYRING if is_default(keyring) else str(keyring)

    def _process_keyring_file_secret(self, keyring) -> None:
        self.data["keyring_file_secret"] = DEFAULT_KEYRING if is_default(keyring) else str(keyring)

    def _process_disable_trust_db_check(self, value) -> None:
        self.data["disable_trust_db_check"] = to_tristate(value)

    def _process_force_import_owner_trust(self, value) -> None:
        self.data["force_import_owner_trust"] = to_tristate(value)

    def validate(self) -> None:
        """Checks a single key source is configured."""
        from_server = bool(self["keyserver"] or self["key_id"])
        if from_server and not (self["keyserver"] and self["key_id"]):
            raise ValidationError("keyserver and key_id must be set together")

        if from_server and self["key_contents"]:
            raise ValidationError("key_contents/key_file cannot be used with keyserver/key_id")

        if not from_server and not self["key_contents"]:
            raise ValidationError("One of key_contents, key_file, or keyserver with key_id must be set")

    def __str__(self) -> str:
        # Don't dump key material into logs
        shown = dict(self.data)
        if shown["key_contents"]:
            shown["key_contents"] = "<%d characters>" % len(shown["key_contents"])
        return "\n".join("%s: %s" % (key, value) for key, value in shown.items())
