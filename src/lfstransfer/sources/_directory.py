"""ObjectDirectory: resolve oids to files in a local object directory."""

from pathlib import Path

from lfstransfer.errors import ObjectNotFoundError
from lfstransfer.sources._file import FileSource


class ObjectDirectory:
    """Source provider over a local object directory.

    Objects live at ``<root>/<oid[0:2]>/<oid[2:4]>/<oid>``, the layout used
    by ``.git/lfs/objects``.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize with the object directory root."""
        self._root = Path(root)

    @property
    def root(self) -> Path:
        """Return the root directory path."""
        return self._root

    def path_for(self, oid: str) -> Path | None:
        """Return the object path for an oid, or None when the oid cannot name a file under root."""
        if len(oid) < 5 or not oid.isalnum():
            return None
        root = self._root.resolve()
        candidate = (self._root / oid[0:2] / oid[2:4] / oid).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            return None
        return candidate

    def has_object(self, oid: str) -> bool:
        """Check whether the object file exists."""
        path = self.path_for(oid)
        return path is not None and path.is_file()

    def source_for(self, oid: str) -> FileSource:
        """Return a FileSource for the object, raising ObjectNotFoundError when missing."""
        path = self.path_for(oid)
        if path is None or not path.is_file():
            raise ObjectNotFoundError(oid)
        return FileSource(path)
