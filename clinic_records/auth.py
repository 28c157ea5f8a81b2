"""
Admin Gate

The tool is operated by a single administrator. Before the menu is shown
the CLI asks for one shared username/password pair, configured through
``CLINIC_ADMIN_USERNAME`` / ``CLINIC_ADMIN_PASSWORD``.
"""

import hmac

from loguru import logger


class AdminGate:
    """
    Single shared credential check.

    Example:
        >>> gate = AdminGate("admin", "admin123")
        >>> gate.check("admin", "admin123")
        True
    """

    def __init__(self, username: str, password: str):
        self._username = username
        self._password = password

    @classmethod
    def from_config(cls, config) -> "AdminGate":
        return cls(config.admin_username, config.admin_password)

    def check(self, username: str, password: str) -> bool:
        """True when both values match the configured credential."""
        user_ok = hmac.compare_digest(username.encode("utf-8"), self._username.encode("utf-8"))
        pass_ok = hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8"))
        if user_ok and pass_ok:
            logger.info("Admin login successful")
            return True
        logger.warning("Admin login failed")
        return False
