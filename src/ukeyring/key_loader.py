from tomllib import TOMLDecodeError, load

from zenlib.logging import loggify
from zenlib.util import colorize as c_

from . import __version__
from .gpg_executor import GpgExecutor
from .gpg_interface import GpgInterface
from .hkp_fetcher import HkpKeyFetcher
from .key_contents import get_key_type
from .key_query import KeyQuery
from .keyring_specifier import KeyringSpecifier
from .loader_dict import KeyLoaderConfigDict
from .reconciler import Reconciler, ReconciliationPlan


@loggify
class KeyLoader:
    """
    Makes sure the configured key is installed for a user.

    The config file is loaded first, then kwargs are applied over it.
    An executor (execute(args, stdin=None) -> stdout) and fetcher (fetch(server, key_id) -> str)
    may be passed, otherwise gpg is run with subprocess and keys are fetched with requests.
    """

    def __init__(self, config=None, executor=None, fetcher=None, *args, **kwargs):
        self.config_dict = KeyLoaderConfigDict(logger=self.logger)
        self.executor = executor
        self.fetcher = fetcher

        try:
            self.load_config(config)
        except FileNotFoundError:
            if config:
                self.logger.critical("[%s] Config file not found, using the base config." % config)
            else:
                self.logger.debug("No config file specified, using the base config.")
        except TOMLDecodeError as e:
            raise ValueError("[%s] Error decoding config file: %s" % (config, e))

        self.config_dict.import_args(kwargs)

    def load_config(self, config_filename) -> None:
        """Loads the config from the specified toml file."""
        if not config_filename:
            raise FileNotFoundError("Config file not specified.")

        with open(config_filename, "rb") as config_file:
            self.logger.info("Loading config file: %s" % c_(config_file.name, "blue", bold=True, bright=True))
            raw_config = load(config_file)

        for config, value in raw_config.items():
            self.logger.debug("[%s] (%s) Processing config value: %s" % (config_file.name, config, value))
            try:
                self[config] = value
            except (FileNotFoundError, KeyError) as e:
                raise ValueError("[%s] Error loading config parameter '%s': %s" % (config_file.name, config, e))

        self.logger.debug("Loaded config:\n%s" % self.config_dict)

    def __setitem__(self, key, value):
        self.config_dict[key] = value

    def __getitem__(self, item):
        return self.config_dict[item]

    def __contains__(self, item):
        return item in self.config_dict

    def get(self, item, default=None):
        return self.config_dict.get(item, default)

    def __getattr__(self, item):
        """Allows access to the config dict via the KeyLoader object."""
        if item != "config_dict" and item in self.config_dict:
            return self[item]
        raise AttributeError("'%s' object has no attribute '%s'" % (self.__class__.__name__, item))

    def _setup(self) -> None:
        """Creates the gpg helpers from the current config."""
        self.keyrings = KeyringSpecifier(
            self["keyring_file_public"], self["keyring_file_secret"], self["disable_trust_db_check"]
        )
        if not self.executor:
            self.executor = GpgExecutor(
                for_user=self["for_user"], gnupg_home=self["gnupg_home"], timeout=self["timeout"], logger=self.logger
            )
        if not self.fetcher:
            self.fetcher = HkpKeyFetcher(attempts=self["fetch_attempts"], delay=self["fetch_delay"], logger=self.logger)

        self.query = KeyQuery(self.executor, self.keyrings, self["gpg_binary"], logger=self.logger)
        self.reconciler = Reconciler(self.keyrings, self["force_import_owner_trust"], logger=self.logger)
        self.interface = GpgInterface(self.executor, self.keyrings, self["gpg_binary"], logger=self.logger)

    def get_key_contents(self) -> str:
        """Returns the armored key text, fetching it from the key server if one is set."""
        if self["keyserver"]:
            return self.fetcher.fetch(self["keyserver"], self["key_id"])
        return self["key_contents"]

    def load(self) -> ReconciliationPlan:
        """Installs the configured key, returns the plan which was run."""
        self._log_run("Running ukeyring v%s" % __version__)
        self.config_dict.validate()
        self._setup()

        armored_text = self.get_key_contents()
        key_type = get_key_type(armored_text)
        self.reconciler.validate(key_type)  # Before anything runs gpg

        desired = self.query.load_desired(armored_text)
        installed = self.query.list_installed(key_type)
        current = self.reconciler.select_current(installed, desired)
        plan = self.reconciler.reconcile(current, desired)

        self.interface.apply(plan)
        if plan.changed:
            self._log_run("Changed: %s" % c_(plan, "green"))
        else:
            self._log_run("Unchanged: %s" % desired.fingerprint)
        return plan

    def _log_run(self, logline) -> None:
        self.logger.info(f"-- | {c_(logline, 'blue', bold=True)}")

    def __str__(self) -> str:
        return str(self.config_dict)
