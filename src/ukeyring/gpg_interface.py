__version__ = "1.0.3"

from zenlib.logging import loggify
from zenlib.util import colorize as c_

from .key_header import SECRET_KEY
from .keyring_specifier import KeyringSpecifier
from .reconciler import DeleteKey, ImportKey, ImportTrust, ReconciliationPlan


@loggify
class GpgInterface:
    """
    Runs reconciliation plans against gpg.

    Operations run strictly in order, the first failure stops the plan.
    Completed operations are not rolled back.
    """

    def __init__(self, executor, keyrings: KeyringSpecifier = None, gpg_binary="gpg", *args, **kwargs):
        self.executor = executor
        self.keyrings = keyrings or KeyringSpecifier()
        self.gpg_binary = gpg_binary

    def _gpg(self, key_type: str, *args) -> list[str]:
        return [self.gpg_binary, *self.keyrings.flags(key_type), *args]

    def delete_key(self, operation: DeleteKey) -> None:
        """Deletes the key by fingerprint, secret keys take their public part with them."""
        delete_flag = "--delete-secret-and-public-key" if operation.key_type == SECRET_KEY else "--delete-key"
        self.logger.warning("Deleting %s: %s" % (operation.key_type, c_(operation.key_header, "red", bold=True)))
        args = self._gpg(operation.key_type, "--batch", "--yes", delete_flag, operation.key_header.fingerprint)
        self.executor.execute(args)

    def import_key(self, operation: ImportKey) -> None:
        self.logger.info("[%s] Importing %s" % (self.keyrings, operation.key_type))
        self.executor.execute(self._gpg(operation.key_type, "--import"), operation.armored_text)

    def import_trust(self, operation: ImportTrust) -> None:
        self.logger.info("Importing owner trust for: %s" % c_(operation.fingerprint, "green"))
        self.executor.execute(self._gpg(operation.key_type, "--import-ownertrust"), operation.trust_record)

    def apply(self, plan: ReconciliationPlan) -> None:
        handlers = {DeleteKey: self.delete_key, ImportKey: self.import_key, ImportTrust: self.import_trust}
        for index, operation in enumerate(plan, start=1):
            self.logger.debug("[%d/%d] Running operation: %r" % (index, len(plan), operation))
            try:
                handler = handlers[type(operation)]
            except KeyError as e:
                raise TypeError("Unknown plan operation: %r" % operation) from e
            handler(operation)
