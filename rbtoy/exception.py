
class RBToyError(Exception):
    def __str__(self):
        return ''.join(map(str, self.args))

class DuplicateKeyError(RBToyError):
    def __init__(self, key):
        super(DuplicateKeyError, self).__init__(key)
        self.key = key

    def __str__(self):
        return "duplicate key: " + repr(self.key)

class KeyNotFoundError(RBToyError, KeyError):
    def __init__(self, key):
        super(KeyNotFoundError, self).__init__(key)
        self.key = key

    def __str__(self):
        return "key not found: " + repr(self.key)

class UnorderableKeyError(RBToyError, ValueError):
    def __init__(self, key):
        super(UnorderableKeyError, self).__init__(key)
        self.key = key

    def __str__(self):
        return "key cannot be ordered: " + repr(self.key)

class InvariantError(RBToyError):
    def __str__(self):
        return 'red-black invariant violated: ' + ''.join(map(str, self.args))
