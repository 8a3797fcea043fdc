"""Key binding table mapping keyboard keys to sound groups."""

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple
from soundkeys.core.exceptions import KeyBindingError
from soundkeys.core.models import DEFAULT_KEY_SET
from soundkeys.utils.log import get_logger

if TYPE_CHECKING:
    from soundkeys.core.catalog import Group

logger = get_logger(__name__)


def normalize_key(key: str) -> str:
    """Key identifiers are compared case-insensitively."""
    return key.lower()


class KeyBindingTable:
    """
    Assigns groups to keys from a fixed ordered key set.

    Responsibilities:
    - Hand out the next unused key, in the order groups are created
    - Resolve a pressed key to its group
    - Resolve a group name to its key

    Keys and names are indexed in two maps that reference the same Group
    objects.
    """

    def __init__(
        self,
        key_set: Iterable[str] = DEFAULT_KEY_SET,
        reserved: Iterable[str] = (),
    ):
        """
        Initialize the table.

        Args:
            key_set: Ordered bindable keys.
            reserved: Command keys that must not appear in `key_set`.

        Raises:
            KeyBindingError: If the key set is empty, has duplicates or
                overlaps a reserved key.
        """
        keys = [normalize_key(k) for k in key_set]
        if not keys:
            raise KeyBindingError("Key set is empty")

        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise KeyBindingError(f"Duplicate keys in key set: {', '.join(duplicates)}")

        clashes = sorted(set(keys) & {normalize_key(k) for k in reserved})
        if clashes:
            raise KeyBindingError(
                f"Key set overlaps command keys: {', '.join(clashes)}"
            )

        self._keys: Tuple[str, ...] = tuple(keys)
        self._by_key: Dict[str, "Group"] = {}
        self._by_name: Dict[str, "Group"] = {}
        self._key_of: Dict[str, str] = {}

    @property
    def keys(self) -> Tuple[str, ...]:
        """Full ordered key set."""
        return self._keys

    @property
    def capacity(self) -> int:
        return len(self._keys)

    @property
    def remaining(self) -> int:
        """Number of keys still unassigned."""
        return len(self._keys) - len(self._by_key)

    def assign(self, group: "Group") -> Optional[str]:
        """
        Bind `group` to the next unused key.

        Args:
            group: Group to bind.

        Returns:
            The assigned key, the existing key if the group is already bound,
            or None if the key set is exhausted.
        """
        if group.name in self._key_of:
            return self._key_of[group.name]

        if self.remaining == 0:
            logger.debug(f"Key set exhausted, cannot bind '{group.name}'")
            return None

        key = self._keys[len(self._by_key)]
        self._by_key[key] = group
        self._by_name[group.name] = group
        self._key_of[group.name] = key
        logger.debug(f"Bound group '{group.name}' to key '{key}'")
        return key

    def lookup(self, key: str) -> Optional["Group"]:
        """Return the group bound to `key`, or None."""
        return self._by_key.get(normalize_key(key))

    def lookup_by_name(self, name: str) -> Optional[str]:
        """
        Return the key bound to the group called `name`.

        Returns:
            The key, or None (logged) if no group of that name is bound.
        """
        key = self._key_of.get(name)
        if key is None:
            logger.warning(f"Group '{name}' not found in key bindings")
        return key

    def group_by_name(self, name: str) -> Optional["Group"]:
        return self._by_name.get(name)

    def items(self) -> List[Tuple[str, "Group"]]:
        """Bound (key, group) pairs in key-set order."""
        return list(self._by_key.items())

    def groups(self) -> List["Group"]:
        return list(self._by_key.values())

    def format_table(self) -> str:
        """Render the key -> group name -> sound count table."""
        if not self._by_key:
            return "No sound groups bound."

        width = max(len(group.name) for group in self._by_key.values())
        lines = [f"{'Key':<5} {'Group':<{width}}  Sounds"]
        for key, group in self._by_key.items():
            lines.append(f"{key:<5} {group.name:<{width}}  {len(group.sounds)}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: str) -> bool:
        return normalize_key(key) in self._by_key
