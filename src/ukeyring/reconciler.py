__version__ = "1.3.0"

from typing import Union

from zenlib.logging import loggify
from zenlib.util import colorize as c_

from .exceptions import TypeMismatchError
from .key_contents import DesiredKeySpec
from .key_header import SECRET_KEY, KeyHeader
from .keyring_specifier import KeyringSpecifier

NO_CURRENT_KEY = "no_current_key"
CURRENT_MATCHES_DESIRED = "current_matches_desired"
CURRENT_DIFFERS = "current_differs"

ULTIMATE_TRUST = 6


class DeleteKey:
    def __init__(self, key_header: KeyHeader):
        self.key_header = key_header

    @property
    def key_type(self) -> str:
        return self.key_header.type

    def __eq__(self, other):
        return isinstance(other, DeleteKey) and self.key_header == other.key_header

    def __repr__(self) -> str:
        return "delete(%s)" % self.key_header.fingerprint


class ImportKey:
    def __init__(self, armored_text: str, key_type: str):
        self.armored_text = armored_text
        self.key_type = key_type

    def __eq__(self, other):
        return (
            isinstance(other, ImportKey)
            and self.armored_text == other.armored_text
            and self.key_type == other.key_type
        )

    def __repr__(self) -> str:
        return "import(%s)" % self.key_type


class ImportTrust:
    def __init__(self, fingerprint: str, key_type: str):
        self.fingerprint = fingerprint
        self.key_type = key_type

    @property
    def trust_record(self) -> str:
        """The ownertrust line marking the key as ultimately trusted."""
        return "%s:%d:\n" % (self.fingerprint, ULTIMATE_TRUST)

    def __eq__(self, other):
        return (
            isinstance(other, ImportTrust)
            and self.fingerprint == other.fingerprint
            and self.key_type == other.key_type
        )

    def __repr__(self) -> str:
        return "import_trust(%s)" % self.fingerprint


class ReconciliationPlan:
    """Ordered operations which bring the keyring to the desired state."""

    def __init__(self, state: str, operations=None):
        self.state = state
        self.operations = list(operations or [])

    @property
    def changed(self) -> bool:
        return bool(self.operations)

    def __iter__(self):
        return iter(self.operations)

    def __len__(self):
        return len(self.operations)

    def __str__(self) -> str:
        return "[%s] %s" % (self.state, ", ".join(repr(op) for op in self.operations) or "no changes")


@loggify
class Reconciler:
    """
    Compares the installed key against the desired key and plans the changes needed to converge.

    force_import_owner_trust:
        None: secret keys imported into the default keyrings are ultimately trusted.
        True: every imported key is ultimately trusted, including custom keyrings.
        False: imported keys are never trusted.
    """

    def __init__(self, keyrings: KeyringSpecifier = None, force_import_owner_trust=None, *args, **kwargs):
        self.keyrings = keyrings or KeyringSpecifier()
        self.force_import_owner_trust = force_import_owner_trust

    def validate(self, key_type: str) -> None:
        """Checks the keyring configuration before any command is run."""
        self.keyrings.validate(key_type)

    def select_current(
        self, installed: list[KeyHeader], desired: Union[KeyHeader, DesiredKeySpec]
    ) -> Union[KeyHeader, None]:
        """
        Picks the installed key the desired key should replace.

        An installed key of the same type with the desired fingerprint is always used, whatever its usernames.
        Otherwise keys of the same type sharing a username with the desired key are candidates,
        and the first candidate is used.
        """
        desired = desired.key_header if isinstance(desired, DesiredKeySpec) else desired
        same_type = [key for key in installed if key.type == desired.type]
        for key in same_type:
            if key.same_key(desired):
                return key

        candidates = [key for key in same_type if key.shares_username(desired)]
        if not candidates:
            self.logger.debug("No installed %s shares a username with: %s" % (desired.type, desired))
            return None

        if len(candidates) > 1:
            self.logger.warning(
                "Multiple installed keys share usernames with %s, replacing the first: %s"
                % (c_(desired.fingerprint, "yellow"), candidates)
            )
        return candidates[0]

    def get_state(self, current: Union[KeyHeader, None], desired: KeyHeader) -> str:
        if current is None:
            return NO_CURRENT_KEY
        if current.type != desired.type:
            raise TypeMismatchError(
                "Installed key %s is a %s but the desired key is a %s" % (current, current.type, desired.type)
            )
        if current == desired:
            return CURRENT_MATCHES_DESIRED
        return CURRENT_DIFFERS

    def should_import_trust(self, key_type: str) -> bool:
        if self.force_import_owner_trust is not None:
            return bool(self.force_import_owner_trust)
        # Keys in custom keyrings are only trusted when forced
        if self.keyrings.is_custom:
            return False
        return key_type == SECRET_KEY

    def reconcile(self, current: Union[KeyHeader, None], desired: DesiredKeySpec) -> ReconciliationPlan:
        """Returns the plan which replaces current with desired."""
        self.validate(desired.type)
        state = self.get_state(current, desired.key_header)

        if state == CURRENT_MATCHES_DESIRED:
            plan = ReconciliationPlan(state)
            self.logger.info("Key is already installed: %s" % c_(desired.fingerprint, "green"))
            return plan

        operations = []
        if state == CURRENT_DIFFERS:
            self.logger.info(
                "Replacing installed key %s with: %s"
                % (c_(current.fingerprint, "red"), c_(desired.fingerprint, "green"))
            )
            operations.append(DeleteKey(current))

        operations.append(ImportKey(desired.armored_text, desired.type))

        if self.should_import_trust(desired.type):
            operations.append(ImportTrust(desired.fingerprint, desired.type))
        else:
            self.logger.debug("Not importing owner trust for: %s" % desired.fingerprint)

        plan = ReconciliationPlan(state, operations)
        self.logger.info("Planned: %s" % plan)
        return plan
