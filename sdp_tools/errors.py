class SDPError(Exception):
    """Root of all SDP errors. Raised directly for container-level failures that abort the run."""


class TooSmall(SDPError):
    pass


class Truncated(SDPError):
    pass


class EntryError(SDPError):
    """Failure scoped to a single entry; the run carries on with the next one."""


class InvalidRange(EntryError):
    pass


class OddPcmSize(EntryError):
    pass


class WriteError(EntryError):
    pass
