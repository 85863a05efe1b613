def quote(val):
    return repr(val) if val is not None else "None"


class StringerMixin:
    """ renders the class name and the instance attributes in key sorted order. """

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, self._sorted_items_string())

    def _sorted_items_string(self):
        return ", ".join(["%s=%s" % (key, quote(val)) for key, val in sorted(vars(self).items())])


class CommonEqualityMixin(object):
    """ value equality for simple record types: same class and equal attributes. """

    def __eq__(self, other):
        return isinstance(other, self.__class__) and vars(self) == vars(other)

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None
