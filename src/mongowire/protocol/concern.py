""" Write concern directives, passed through to the ``getlasterror``
    command that acknowledges every write-style message.
"""


class WriteConcern:
    """ Acknowledgment requirements for a write. Each directive is optional;
        unset directives are omitted from the acknowledgment command and
        the server default applies.

        *w* is either the number of members that must acknowledge the
        write or a string naming a mode or tag set, such as
        ``'majority'``. *wtimeout* is in milliseconds. *j* waits for the
        journal, *fsync* for a flush to disk.
    """

    def __init__(self, w=None, wtimeout=None, j=None, fsync=None):

        if w is not None and not isinstance(w, (int, str)):
            raise TypeError('w must be an int or a str, not ' + type(w).__name__)

        if isinstance(w, bool):
            raise TypeError('w must be an int or a str, not bool')

        if wtimeout is not None:
            wtimeout = int(wtimeout)
            if wtimeout < 0:
                raise ValueError('wtimeout must be non-negative')

        self.w = w
        self.wtimeout = wtimeout
        self.j = j
        self.fsync = fsync


    def __repr__(self):
        return 'WriteConcern(%s)' % (', '.join('%s=%r' % pair for pair in self.to_command().items()))


    def __eq__(self, other):
        if isinstance(other, WriteConcern):
            return self.to_command() == other.to_command()
        return NotImplemented


    def to_command(self):
        """ Return the directives as fields of a ``getlasterror`` command.
        """

        fields = dict()

        if self.w is not None:
            fields['w'] = self.w
        if self.wtimeout is not None:
            fields['wtimeout'] = self.wtimeout
        if self.j is not None:
            fields['j'] = bool(self.j)
        if self.fsync is not None:
            fields['fsync'] = bool(self.fsync)

        return fields


# end of class WriteConcern


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
