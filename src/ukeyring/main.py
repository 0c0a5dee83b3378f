#!/usr/bin/env python

from zenlib.util import get_args_n_logger, get_kwargs_from_args

from ukeyring.key_loader import KeyLoader


def main():
    arguments = [{'flags': ['-c', '--config'], 'action': 'store', 'help': 'set the config file location'},
                 {'flags': ['--key-file'], 'action': 'store', 'help': 'file containing the armored key to install'},
                 {'flags': ['--keyserver'], 'action': 'store', 'help': 'HKP key server to fetch the key from'},
                 {'flags': ['--key-id'], 'action': 'store', 'help': 'ID of the key to fetch from the key server'},
                 {'flags': ['-u', '--for-user'], 'action': 'store', 'help': 'user to install the key for'},
                 {'flags': ['--gnupg-home'], 'action': 'store', 'help': 'set the gpg home directory'},
                 {'flags': ['--keyring-public'], 'action': 'store', 'help': 'custom public keyring file', 'dest': 'keyring_file_public'},
                 {'flags': ['--keyring-secret'], 'action': 'store', 'help': 'custom secret keyring file', 'dest': 'keyring_file_secret'},
                 {'flags': ['--disable-trust-db-check'], 'action': 'store_true', 'help': 'pass --no-auto-check-trustdb to gpg'},
                 {'flags': ['--enable-trust-db-check'], 'action': 'store_false', 'help': 'let gpg check the trustdb', 'dest': 'disable_trust_db_check'},
                 {'flags': ['--force-import-owner-trust'], 'action': 'store_true', 'help': 'ultimately trust the imported key, even in custom keyrings'},
                 {'flags': ['--no-import-owner-trust'], 'action': 'store_false', 'help': 'never trust the imported key', 'dest': 'force_import_owner_trust'},
                 {'flags': ['--gpg-binary'], 'action': 'store', 'help': 'gpg binary to run'},
                 {'flags': ['--timeout'], 'action': 'store', 'type': int, 'help': 'timeout for each gpg command, in seconds'},
                 {'flags': ['--print-plan'], 'action': 'store_true', 'help': 'print the plan which was run'}]

    args, logger = get_args_n_logger(package=__package__, description='GPG key installer', arguments=arguments, drop_default=True)
    kwargs = get_kwargs_from_args(args, logger=logger)
    print_plan = kwargs.pop('print_plan', False)  # This is not a valid kwarg for KeyLoader

    logger.debug(f"Using the following kwargs: {kwargs}")
    loader = KeyLoader(**kwargs)

    try:
        plan = loader.load()
    except Exception as e:
        logger.info("Dumping config dict:\n")
        print(loader.config_dict)
        logger.error(e, exc_info=True)
        exit(1)

    if print_plan:
        print(plan)


if __name__ == '__main__':
    main()
