import hmac
import logging
from typing import Optional

from meeple.configs import ADMIN_PASSCODE
from meeple.core.exceptions import PasscodeError

logger = logging.getLogger(__name__)


def check_passcode(passcode: Optional[str], expected: Optional[str] = None):
    """Single shared passcode in front of catalog management. An empty
    configured passcode locks management entirely."""
    expected = ADMIN_PASSCODE if expected is None else expected
    if not expected or not hmac.compare_digest((passcode or "").encode(), expected.encode()):
        logger.warning("Rejected catalog management passcode")
        raise PasscodeError("Incorrect passcode.")
