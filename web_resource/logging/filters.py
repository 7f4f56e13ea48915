"""
Custom logging filters for web_resource.
"""

import logging
import re


class CredentialMaskFilter(logging.Filter):
    """Mask ``user:password@`` credentials embedded in logged URLs."""

    pattern = re.compile(r"(https?://[^:/\s@]+):([^@/\s]+)@", re.IGNORECASE)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.pattern.sub(r"\1:***MASKED***@", message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True
