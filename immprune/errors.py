"""Exception hierarchy for immprune.

Every failure is fatal for the run: the CLI catches ImmpruneError in main()
and exits with a cause-specific message.
"""


class ImmpruneError(Exception):
    """Base class for all errors raised by immprune."""


class ConfigError(ImmpruneError):
    """Missing, unreadable or incomplete credentials."""


class UserInputError(ImmpruneError):
    """Invalid option values (dates, year ranges, limits)."""


class RemoteFetchError(ImmpruneError):
    """A request to the Immich server failed."""


class ParseError(ImmpruneError):
    """Malformed JSON from either asset source."""


class RemoteParseError(RemoteFetchError, ParseError):
    """The Immich server answered with something that is not an asset page."""


class LocalParseError(ParseError):
    """The local library tool returned malformed JSON."""


class PlatformError(ImmpruneError):
    """The local library cannot be read on this machine."""


class UnsupportedPlatformError(PlatformError):
    pass


class LocalToolMissingError(PlatformError):
    """The external library query tool is not installed."""

    def __init__(self, tool: str):
        super().__init__(f"{tool} not found in PATH")
        self.tool = tool


class LocalAccessError(PlatformError):
    """The external tool ran but failed, usually denied automation access."""

    def __init__(self, tool: str, detail: str = ""):
        msg = f"{tool} failed"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.tool = tool
        self.detail = detail
