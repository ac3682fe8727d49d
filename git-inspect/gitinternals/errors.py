class GitObjectError(ValueError):
    """Base class for every failure while reading the object store."""


class NotFoundError(GitObjectError, LookupError):
    """No backing file for an object id or ref."""


class CorruptObjectError(GitObjectError):
    """Object could not be decompressed or its header could not be split."""


class UnknownKindError(GitObjectError):
    """Header kind is not one of commit, tree, blob."""


class MalformedCommitError(GitObjectError):
    pass


class MalformedPersonError(GitObjectError):
    pass


class MalformedTreeError(GitObjectError):
    pass


class RemoteError(GitObjectError):
    """HTTP transport failure while talking to a dumb remote."""
