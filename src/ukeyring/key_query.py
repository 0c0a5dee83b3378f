__version__ = "1.1.1"

from zenlib.logging import loggify
from zenlib.util import colorize as c_

from .exceptions import MultipleKeysError, ParseError, TypeMismatchError
from .gpg_parser import GpgParser
from .key_contents import DesiredKeySpec, get_key_type
from .key_header import KEY_TYPES, SECRET_KEY, KeyHeader
from .keyring_specifier import KeyringSpecifier

OUTPUT_FLAGS = ["--with-fingerprint", "--with-colons"]


@loggify
class KeyQuery:
    """
    Asks gpg about installed keys and supplied key text.

    The executor must provide execute(args, stdin=None) -> stdout, raising on failure.
    """

    def __init__(self, executor, keyrings: KeyringSpecifier = None, gpg_binary="gpg", parser=None, *args, **kwargs):
        self.executor = executor
        self.gpg_binary = gpg_binary
        self.parser = parser or GpgParser(logger=self.logger)
        self.keyrings = keyrings or KeyringSpecifier()

    def list_installed(self, key_type: str, keyring=None) -> list[KeyHeader]:
        """Lists the installed keys of the type, in the keyring file or the configured keyring for the type."""
        if key_type not in KEY_TYPES:
            raise ValueError("Invalid key type: %s" % key_type)

        keyring = keyring or self.keyrings.get_keyring(key_type)
        list_flag = "--list-secret-keys" if key_type == SECRET_KEY else "--list-keys"
        args = [self.gpg_binary, *self.keyrings.list_flags(key_type, keyring), list_flag, *OUTPUT_FLAGS]

        self.logger.debug("[%s] Listing installed %s keys" % (keyring, key_type))
        headers = self.parser.parse_output_ring(self.executor.execute(args))
        self.logger.info("[%s] Found %d installed %s(s)" % (c_(keyring, "blue"), len(headers), key_type))
        return headers

    def classify(self, armored_text: str, expected_type: str) -> KeyHeader:
        """Reads the key held in the armored text, which must be a single key of the expected type."""
        args = [self.gpg_binary, *OUTPUT_FLAGS]
        headers = self.parser.parse_output_external(self.executor.execute(args, armored_text))

        if len(headers) > 1:
            raise MultipleKeysError(
                "Multiple keys returned from a single import should not happen!  Keys returned: %s" % headers
            )
        if not headers:
            raise ParseError("No keys returned from importing the key contents")

        header = headers[0]
        if header.type != expected_type:
            raise TypeMismatchError(
                "Key %s is a %s but you're trying to import a %s" % (header, header.type, expected_type)
            )

        self.logger.info("Key contents hold: %s" % c_(header, "green"))
        return header

    def load_desired(self, armored_text: str) -> DesiredKeySpec:
        """Checks the armored text holds one key, classifies it, returns the DesiredKeySpec."""
        key_type = get_key_type(armored_text)
        return DesiredKeySpec(self.classify(armored_text, key_type), armored_text)
