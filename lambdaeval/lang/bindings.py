"""Binding store for `let <name> = <λ-term>` statements. Bindings live as long as their Session."""

import logging


logger = logging.getLogger(__name__)


class BindingEntry:
    """A single binding. source is the raw right-hand side text; value is its normal form, set once the right-hand side
    has been successfully evaluated.
    """

    def __init__(self, name, source):
        self.name = name
        self.source = source
        self.value = None

    def __repr__(self):
        return f"BindingEntry(name='{self.name}', source='{self.source}', value={self.value!r})"


class BindingStore:
    """Append-only, insertion-ordered list of BindingEntries. Entries are only removed by rollback."""

    def __init__(self):
        self.entries = []

    def append(self, name, source):
        entry = BindingEntry(name, source)
        self.entries.append(entry)
        logger.debug("bound '%s' to '%s'", name, source)
        return entry

    def rollback(self, entry):
        """Removes entry, normally the one just appended, after its right-hand side failed to evaluate."""
        self.entries.remove(entry)
        logger.debug("rolled back binding '%s'", entry.name)

    def lookup(self, name):
        """Returns the latest evaluated entry named name, or None."""
        for entry in reversed(self.entries):
            if entry.name == name and entry.value is not None:
                return entry
        return None

    def values(self, names):
        """Maps each of names that has an evaluated binding to the latest value bound to it."""
        mapping = {}
        for name in names:
            entry = self.lookup(name)
            if entry is not None:
                mapping[name] = entry.value
        return mapping

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)
