__version__ = "1.0.0"

from .exceptions import ConfigurationError
from .key_header import SECRET_KEY

DEFAULT_KEYRING = "default"


def is_default(keyring) -> bool:
    return not keyring or keyring == DEFAULT_KEYRING


class KeyringSpecifier:
    """
    Holds the public and secret keyrings an operation is scoped to, and the gpg flags selecting them.

    Custom keyrings always disable the default keyring and automatic trustdb checks.
    A secret key operation on custom keyrings needs both keyring files, the public part is stored in the public keyring.
    """

    def __init__(self, keyring_public=DEFAULT_KEYRING, keyring_secret=DEFAULT_KEYRING, disable_trust_db_check=None):
        self.keyring_public = str(keyring_public) if not is_default(keyring_public) else DEFAULT_KEYRING
        self.keyring_secret = str(keyring_secret) if not is_default(keyring_secret) else DEFAULT_KEYRING
        self.disable_trust_db_check = disable_trust_db_check

    @property
    def is_custom(self) -> bool:
        return not (is_default(self.keyring_public) and is_default(self.keyring_secret))

    def get_keyring(self, key_type: str) -> str:
        """Returns the keyring file keys of the type are listed from."""
        return self.keyring_secret if key_type == SECRET_KEY else self.keyring_public

    def validate(self, key_type: str) -> None:
        """Checks the keyrings can hold a key of the type, raises a ConfigurationError if not."""
        if not is_default(self.keyring_secret) and is_default(self.keyring_public):
            raise ConfigurationError(
                "keyring_file_secret is a custom file (%s) but no keyring_file_public was specified.  "
                "It's not a good idea to import a private key without a public keyring "
                "to also import the associated public key!"
                % self.keyring_secret
            )
        if key_type == SECRET_KEY and not is_default(self.keyring_public) and is_default(self.keyring_secret):
            raise ConfigurationError(
                "keyring_file_public is a custom file (%s) but no keyring_file_secret was specified.  "
                "Cannot import a private key without a secret keyring to put it in!" % self.keyring_public
            )

    def trust_db_flags(self) -> list[str]:
        if self.disable_trust_db_check:
            return ["--no-auto-check-trustdb"]
        return []

    def list_flags(self, key_type: str, keyring=None) -> list[str]:
        """Flags for listing keys of the type, only the keyring holding that type is named."""
        keyring = keyring or self.get_keyring(key_type)
        if is_default(keyring):
            return self.trust_db_flags()
        ring_flag = "--secret-keyring" if key_type == SECRET_KEY else "--keyring"
        return ["--no-auto-check-trustdb", "--no-default-keyring", ring_flag, str(keyring)]

    def flags(self, key_type: str) -> list[str]:
        """Flags for modifying keys of the type, secret keys name both keyrings."""
        if not self.is_custom:
            return self.trust_db_flags()

        flags = ["--no-auto-check-trustdb", "--no-default-keyring"]
        if key_type == SECRET_KEY:
            flags += ["--secret-keyring", self.keyring_secret]
        if not is_default(self.keyring_public):
            flags += ["--keyring", self.keyring_public]
        return flags

    def __str__(self) -> str:
        return "public: %s, secret: %s" % (self.keyring_public, self.keyring_secret)
