"""Runtime storage for lox variables.

Locals live in Environments: frames holding an append-only list of values, each frame linked to the frame that
encloses it. A local is addressed by (distance, slot) as computed by the resolver, so reading one is a walk of
`distance` links and a list index, with no name lookup. Globals live in a separate name-keyed table.
"""

from lox.lang.error import LoxRuntimeError


class Environment:
    """One frame of local variables. enclosing is None for frames whose parent is the global scope."""

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = []

    def define(self, value):
        """Appends value to this frame. Returns its slot."""
        self.values.append(value)
        return len(self.values) - 1

    def ancestor(self, distance):
        """Returns the frame distance links up from this one."""
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, slot, name):
        """Returns value at slot, distance frames up. name is the token of the reference, used if the slot has not
        been defined yet (a closure called from inside the initializer of the variable it captures).
        """
        return self._frame(distance, slot, name).values[slot]

    def assign_at(self, distance, value, slot, name):
        self._frame(distance, slot, name).values[slot] = value

    def _frame(self, distance, slot, name):
        environment = self.ancestor(distance)
        if slot >= len(environment.values):
            raise LoxRuntimeError(f"Undefined variable '{name.lexeme}'.", name)
        return environment

    def __repr__(self):
        return f"Environment(values={self.values!r}, enclosing={self.enclosing!r})"


class Globals:
    """Name-keyed table of top-level bindings. Redefinition silently replaces the previous value."""

    def __init__(self):
        self.values = {}

    def define(self, name, value):
        self.values[name] = value

    def get(self, name):
        """Returns value bound to name token. Raises LoxRuntimeError if there is none."""
        try:
            return self.values[name.lexeme]
        except KeyError:
            raise LoxRuntimeError(f"Undefined variable '{name.lexeme}'.", name)

    def set(self, name, value):
        """Rebinds existing global name token to value. Raises LoxRuntimeError if it was never defined."""
        if name.lexeme not in self.values:
            raise LoxRuntimeError(f"Undefined variable '{name.lexeme}'.", name)
        self.values[name.lexeme] = value
