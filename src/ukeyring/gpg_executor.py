__version__ = "1.2.0"

from os import environ
from pathlib import Path
from pwd import getpwnam
from subprocess import TimeoutExpired, run
from typing import Union

from zenlib.logging import loggify
from zenlib.util import colorize as c_

from .exceptions import ProcessError

DEFAULT_TIMEOUT = 60


@loggify
class GpgExecutor:
    """
    Runs commands, optionally as another user, returning stdout.

    When for_user is set, the command runs with that user's uid and HOME/USER/LOGNAME,
    so gpg uses the user's default home directory unless gnupg_home is passed.
    Output is decoded as UTF-8, undecodable bytes are replaced.
    """

    def __init__(self, for_user=None, gnupg_home: Union[Path, str] = None, timeout=DEFAULT_TIMEOUT, *args, **kwargs):
        self.for_user = for_user or None
        self.gnupg_home = Path(gnupg_home) if gnupg_home else None
        self.timeout = timeout

    def get_env(self) -> dict:
        env = dict(environ)
        if self.for_user:
            user_info = getpwnam(self.for_user)  # Raises a KeyError for unknown users
            env.update({"HOME": user_info.pw_dir, "USER": self.for_user, "LOGNAME": self.for_user})
            # The invoking user's GNUPGHOME must not leak into the target user's gpg
            if env.pop("GNUPGHOME", None):
                self.logger.debug("[%s] Dropping GNUPGHOME from the environment" % self.for_user)
            self.logger.log(5, "[%s] Using home directory: %s" % (self.for_user, user_info.pw_dir))
        if self.gnupg_home:
            env["GNUPGHOME"] = str(self.gnupg_home)
        return env

    def execute(self, args: list[str], stdin: str = None) -> str:
        """Runs a command, returns stdout on success.
        Non-zero return codes and timeouts raise a ProcessError."""

        def print_err(stdout, stderr) -> None:
            self.logger.error("Failed command: %s" % c_(" ".join(cmd_args), "red", bright=True))
            if stdout:
                self.logger.error("Command output:\n%s" % stdout)
            if stderr:
                self.logger.error("Command error:\n%s" % stderr)

        cmd_args = [str(arg) for arg in args]
        self.logger.debug("[%s] Running command: %s" % (self.for_user or "current user", " ".join(cmd_args)))
        if stdin:
            self.logger.log(5, "Command input:\n%s" % stdin)

        try:
            cmd = run(
                cmd_args,
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Legacy user IDs may not be valid UTF-8
                timeout=self.timeout,
                env=self.get_env(),
                user=self.for_user,
            )
        except TimeoutExpired as e:
            stdout = e.stdout.decode(errors="replace") if isinstance(e.stdout, bytes) else e.stdout
            stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else e.stderr
            print_err(stdout, stderr)
            raise ProcessError(cmd_args, None, stdout or "", stderr or "") from e

        if cmd.returncode != 0:
            print_err(cmd.stdout, cmd.stderr)
            raise ProcessError(cmd_args, cmd.returncode, cmd.stdout, cmd.stderr)

        return cmd.stdout
