"""Fatal conditions that abort an archive run."""


class ArchiveError(RuntimeError):
    """Base class for every error that stops the run."""


class ConfigurationError(ArchiveError):
    """Missing token, unreadable config value or similar setup problem."""


class ListingError(ArchiveError):
    """A files.list page came back without `ok`."""


class InvalidArgument(ArchiveError):
    """An identity lookup was requested for an unknown kind."""


class ResolutionError(ArchiveError):
    """Slack refused to describe a user, channel, group or conversation."""


class PartnerError(ArchiveError):
    """The other participant of a direct message could not be determined."""


class RemoteError(ArchiveError):
    """Any other Slack call that returned without `ok`."""
