__version__ = "1.0.2"

from re import compile

from zenlib.logging import loggify
from zenlib.util import colorize as c_

from .exceptions import ParseError
from .key_header import PUBLIC_KEY, SECRET_KEY, KeyHeader

RING_MODE = "ring"
EXTERNAL_MODE = "external"
PARSE_MODES = (RING_MODE, EXTERNAL_MODE)

KEY_RECORDS = {"pub": PUBLIC_KEY, "sec": SECRET_KEY}
SUBKEY_RECORDS = ("sub", "ssb")

# Field positions in --with-colons records, zero indexed
KEY_ID_FIELD = 4
USER_ID_FIELD = 9
FINGERPRINT_FIELD = 9

_ESCAPE = compile(r"\\x([0-9a-fA-F]{2})")


def _get_field(fields: list[str], index: int) -> str:
    """Returns the field at the index, or an empty string if the record is too short."""
    return fields[index] if len(fields) > index else ""


def unescape_field(value: str) -> str:
    """Decodes the \\xHH escapes gpg uses for reserved and non-printable bytes.
    Escaped bytes may be part of a multi-byte UTF-8 sequence, so the value is rebuilt as bytes."""
    if "\\x" not in value:
        return value

    out = bytearray()
    position = 0
    for match in _ESCAPE.finditer(value):
        out += value[position : match.start()].encode()
        out.append(int(match.group(1), 16))
        position = match.end()
    out += value[position:].encode()

    try:
        return out.decode()
    except UnicodeDecodeError as e:
        raise ParseError("Unable to decode escaped field: %s" % value) from e


@loggify
class GpgParser:
    """
    Parses `gpg --with-colons --with-fingerprint` output into KeyHeaders.

    'ring' mode handles --list-keys/--list-secret-keys output, where banners and
    trust records come before the keys.
    'external' mode handles output from reading supplied key text, where older gpg
    releases put the first user ID on the pub/sec record itself.
    """

    def __init__(self, *args, **kwargs):
        pass

    def parse(self, raw_text: str, mode=RING_MODE) -> list[KeyHeader]:
        if mode not in PARSE_MODES:
            raise ValueError("Invalid parse mode '%s', must be one of: %s" % (mode, ", ".join(PARSE_MODES)))

        headers = []
        current = None
        for line_number, line in enumerate(raw_text.splitlines(), start=1):
            fields = line.strip().split(":")
            record = fields[0]

            if record in KEY_RECORDS:
                if current:
                    headers.append(self._flush(current))
                current = {
                    "type": KEY_RECORDS[record],
                    "id": _get_field(fields, KEY_ID_FIELD),
                    "fingerprint": "",
                    "usernames": [],
                    "in_subkey": False,
                }
                self.logger.debug("[%d] Found %s: %s" % (line_number, current["type"], current["id"]))
                if mode == EXTERNAL_MODE and (username := _get_field(fields, USER_ID_FIELD)):
                    self._add_username(current, unescape_field(username))
            elif record in SUBKEY_RECORDS:
                if current:
                    current["in_subkey"] = True
            elif record == "fpr":
                if not current:
                    raise ParseError("[%d] Fingerprint record found before any key record: %s" % (line_number, line))
                if current["in_subkey"] or current["fingerprint"]:
                    self.logger.log(5, "[%d] Ignoring subkey fingerprint: %s" % (line_number, line))
                    continue
                current["fingerprint"] = _get_field(fields, FINGERPRINT_FIELD)
            elif record == "uid":
                if not current:
                    raise ParseError("[%d] User ID record found before any key record: %s" % (line_number, line))
                self._add_username(current, unescape_field(_get_field(fields, USER_ID_FIELD)))
            else:
                self.logger.log(5, "[%d] Ignoring line: %s" % (line_number, line))

        if current:
            headers.append(self._flush(current))

        self.logger.debug("[%s] Parsed %d key(s): %s" % (mode, len(headers), headers))
        return headers

    def parse_output_ring(self, raw_text: str) -> list[KeyHeader]:
        return self.parse(raw_text, RING_MODE)

    def parse_output_external(self, raw_text: str) -> list[KeyHeader]:
        return self.parse(raw_text, EXTERNAL_MODE)

    def _add_username(self, current: dict, username: str) -> None:
        if username in current["usernames"]:
            return self.logger.debug("[%s] Skipping duplicate user ID: %s" % (current["id"], username))
        current["usernames"].append(username)

    def _flush(self, current: dict) -> KeyHeader:
        if not current["fingerprint"]:
            raise ParseError("Key '%s' (%s) has an empty fingerprint field" % (current["id"], current["type"]))

        header = KeyHeader(current["fingerprint"], current["usernames"], current["id"], current["type"])
        self.logger.debug("Parsed key: %s" % c_(header, "green"))
        return header
