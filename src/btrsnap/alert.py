# pyright: standard

"""btrsnap: btrsnap/alert.py
Mail failure alerts through the system mail command.
"""

from . import __util__
from .__logger__ import logger
from .config import Config


def alert_subject(hostname: str, path: str) -> str:
    """Subject line naming the failed path and the host."""
    return f"btrsnap: backup of {path} on {hostname} failed"


def alert_body(result, hostname: str) -> str:
    """Compose the alert text for a failed VolumeResult."""
    lines = [
        f"Host:   {hostname}",
        f"Path:   {result.path}",
        f"Stage:  {result.failed_stage.value if result.failed_stage else 'unknown'}",
        f"Error:  {result.error}",
    ]
    if result.archive:
        lines.append(f"Archive: {result.archive}")
    if result.output:
        lines += ["", "Command output:", result.output.rstrip()]
    lines += ["", "See the system log (tag btrsnap) for details."]
    return "\n".join(lines) + "\n"


def _deliver(run, cmd: list[str], body: str) -> None:
    proc = run(cmd, input=body)
    if proc.returncode != 0:
        raise __util__.AlertError(
            f"mail exited with status {proc.returncode}: {proc.stdout.strip()}"
        )


def send_alert(config: Config, result, runner=None) -> bool:
    """Mail an alert about ``result`` to the configured recipients.

    Returns:
        True if a mail was handed to the mail command
    """
    if not config.alerts_enabled:
        logger.debug("No alert recipients configured, not sending mail")
        return False

    run = runner or __util__.exec_subprocess
    cmd = [
        "mail",
        "-s",
        alert_subject(config.hostname, result.path),
        *config.alert_recipients,
    ]
    try:
        _deliver(run, cmd, alert_body(result, config.hostname))
    except (__util__.AlertError, OSError) as e:
        logger.error("Failed to send alert for %s: %s", result.path, e)
        return False

    logger.info(
        "Sent failure alert for %s to %s", result.path, ", ".join(config.alert_recipients)
    )
    return True
