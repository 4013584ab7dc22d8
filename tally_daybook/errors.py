# ==============================================
# Errors
# ==============================================
#
# DaybookReadError: the export bytes could not be obtained at all
# (a missing or unreadable file, or a failed Tally request). Malformed
# content inside a readable export never raises; it shows up as
# rejected records or NULL columns instead.
#
# ==============================================


class DaybookReadError(Exception):
    """The daybook export could not be read from disk or fetched from Tally."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read daybook export from {source}: {reason}")
